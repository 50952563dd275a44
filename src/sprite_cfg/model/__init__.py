"""
Sprite CFG Data Model
=====================

The in-memory side of sprite_cfg. Nothing in this package knows about any
file format; the codecs in sprite_cfg.codec read and write these objects.

- **CfgRecord**: one CFG record with change notification
- **DisplayEntry / CollectionEntry**: Lunar Magic entries owned by a record
- **Map16Block**: the record's custom map16 tiles
- **read_bits / write_bits / REGISTER_FIELDS**: tweaker register layout
- **validate_before_save**: invariants checked by every save path
"""

from sprite_cfg.model.bits import (
    REGISTER_ADDRESSES,
    REGISTER_FIELDS,
    REGISTER_NAMES,
    RegisterField,
    field_for,
    field_mask,
    fields_of,
    read_bits,
    write_bits,
)
from sprite_cfg.model.entries import (
    DISPLAY_POSITION_MASK,
    CollectionEntry,
    DisplayEntry,
)
from sprite_cfg.model.map16 import (
    MAP16_CAPACITY,
    MAP16_FIRST_TILE,
    MAP16_TILE_COUNT,
    MAP16_TILE_SIZE,
    Map16Block,
)
from sprite_cfg.model.observable import ChangeCallback, Observable
from sprite_cfg.model.record import (
    BYTE_FIELDS,
    TYPE_DEPENDENT_FIELDS,
    CfgRecord,
    EntryList,
    SpriteType,
)
from sprite_cfg.model.validation import (
    find_duplicate_displays,
    validate_before_save,
)

__all__ = [
    # Bit fields
    "REGISTER_ADDRESSES",
    "REGISTER_FIELDS",
    "REGISTER_NAMES",
    "RegisterField",
    "field_for",
    "field_mask",
    "fields_of",
    "read_bits",
    "write_bits",
    # Entries
    "DISPLAY_POSITION_MASK",
    "CollectionEntry",
    "DisplayEntry",
    # Map16
    "MAP16_CAPACITY",
    "MAP16_FIRST_TILE",
    "MAP16_TILE_COUNT",
    "MAP16_TILE_SIZE",
    "Map16Block",
    # Record
    "BYTE_FIELDS",
    "TYPE_DEPENDENT_FIELDS",
    "CfgRecord",
    "EntryList",
    "SpriteType",
    "ChangeCallback",
    "Observable",
    # Validation
    "find_duplicate_displays",
    "validate_before_save",
]
