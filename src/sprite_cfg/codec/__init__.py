"""
CFG Codecs
==========

Conversions between a CfgRecord and its external forms:

- **cfgtext**: the line-oriented .cfg format
- **cfgjson**: the .json format used by PIXI
- **rom**: tweaker bytes of a vanilla sprite inside an SMW ROM image
- **table**: the 16-byte sprite table entry built from a record

Quick Start
-----------
    >>> from sprite_cfg.codec import from_text, to_json
    >>> record = from_text(Path("thwomp.cfg").read_text())
    >>> Path("thwomp.json").write_text(to_json(record))

Text and JSON hold the same information, so converting a record from one
to the other and back gives an equal record. The ROM form holds only the
six tweaker bytes.
"""

from sprite_cfg.codec.cfgjson import (
    from_json,
    read_json_file,
    record_from_dict,
    record_to_dict,
    to_json,
    write_json_file,
)
from sprite_cfg.codec.cfgtext import (
    escape_text,
    from_text,
    read_cfg_file,
    to_text,
    unescape_text,
    write_cfg_file,
)
from sprite_cfg.codec.rom import (
    SLOT_COUNT,
    TWEAKER_TABLES,
    VANILLA_SPRITE_NAMES,
    detect_header,
    pc_to_snes,
    read_from_image,
    required_image_size,
    slot_offsets,
    snes_to_pc,
    write_to_image,
)
from sprite_cfg.codec.table import EMPTY_ROUTINE, SnesPointer, TableEntry

__all__ = [
    # Text
    "escape_text",
    "from_text",
    "read_cfg_file",
    "to_text",
    "unescape_text",
    "write_cfg_file",
    # JSON
    "from_json",
    "read_json_file",
    "record_from_dict",
    "record_to_dict",
    "to_json",
    "write_json_file",
    # ROM
    "SLOT_COUNT",
    "TWEAKER_TABLES",
    "VANILLA_SPRITE_NAMES",
    "detect_header",
    "pc_to_snes",
    "read_from_image",
    "required_image_size",
    "slot_offsets",
    "snes_to_pc",
    "write_to_image",
    # Sprite table
    "EMPTY_ROUTINE",
    "SnesPointer",
    "TableEntry",
]
