"""
Sprite CFG Command-Line Interface
=================================

This package provides the cfgtool command-line tool:

- **cfgtool show**: print a record from a .cfg, .json or ROM file
- **cfgtool validate**: check a record the way every save does
- **cfgtool slots**: list the vanilla sprite slots of a ROM
- **cfgtool export / import**: copy tweaker bytes out of and into a ROM
- **cfgtool table**: dump the sprite table entry of a record

The tool is a Click application with help on every command.
"""

__all__ = ["cfgtool"]
