"""
Sprite CFG - Custom Sprite Configuration Toolkit for Super Mario World
======================================================================

This package reads, edits and writes the configuration records (CFG
files) that sprite insertion tools use to describe a custom sprite.

A CFG record holds the six "tweaker" bytes that SMW copies into the
sprite property registers $1656, $1662, $166E, $167A, $1686 and $190F,
plus the data an insertion tool needs: sprite type, acts-like number,
extra property bytes, extra byte counts, the ASM source file, Lunar
Magic display and collection entries, and custom map16 tiles.

Main Components
---------------
- **model**: CfgRecord and its entries, with change notification
    Every packed property of the tweaker bytes is a typed attribute

- **codec**: conversions to and from external forms
    .cfg text, PIXI .json, vanilla ROM slots and sprite table entries

- **files**: load/save by file name, picking the codec from the extension

- **cli**: the cfgtool command-line tool

Quick Start
-----------
Load, edit and save a CFG file:
    >>> from sprite_cfg import load_file, save_file
    >>> loaded = load_file("thwomp.cfg")
    >>> loaded.record.palette = 3
    >>> loaded.record.inedible = True
    >>> save_file(loaded.record, "thwomp.json")

Read a vanilla sprite from a ROM:
    >>> from sprite_cfg.codec import read_from_image
    >>> record = read_from_image(Path("smw.smc").read_bytes(), 0x26)

Or use the command-line tool:
    $ cfgtool show thwomp.cfg
    $ cfgtool export smw.smc --slot 0x26 -o thwomp.json
    $ cfgtool import thwomp.json smw.smc --slot 0x26

Version History
---------------
1.0.0 - Initial release with text, JSON and ROM codecs and cfgtool
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from sprite_cfg.errors import (
    CfgError,
    FormatError,
    ValidationError,
    DuplicateEntryError,
    Map16CapacityError,
    ImageTooSmallError,
    SlotIndexError,
    ProgrammingError,
)

from sprite_cfg.model import (
    CfgRecord,
    CollectionEntry,
    DisplayEntry,
    Map16Block,
    SpriteType,
    REGISTER_FIELDS,
    REGISTER_NAMES,
    read_bits,
    write_bits,
    validate_before_save,
)

from sprite_cfg.codec import (
    from_json,
    from_text,
    to_json,
    to_text,
    read_from_image,
    write_to_image,
    SLOT_COUNT,
    TableEntry,
)

from sprite_cfg.config import CfgConfig, get_config, set_config
from sprite_cfg.files import FileType, LoadedFile, load_file, save_file

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "CfgError",
    "FormatError",
    "ValidationError",
    "DuplicateEntryError",
    "Map16CapacityError",
    "ImageTooSmallError",
    "SlotIndexError",
    "ProgrammingError",
    # Model
    "CfgRecord",
    "CollectionEntry",
    "DisplayEntry",
    "Map16Block",
    "SpriteType",
    "REGISTER_FIELDS",
    "REGISTER_NAMES",
    "read_bits",
    "write_bits",
    "validate_before_save",
    # Codecs
    "from_json",
    "from_text",
    "to_json",
    "to_text",
    "read_from_image",
    "write_to_image",
    "SLOT_COUNT",
    "TableEntry",
    # Configuration
    "CfgConfig",
    "get_config",
    "set_config",
    # Files
    "FileType",
    "LoadedFile",
    "load_file",
    "save_file",
]
