"""
CFG JSON Codec
==============

Reads and writes the .json CFG format used by PIXI and its CFG editor.
It holds the same fields as the .cfg text format in a self-describing
object.

Document Layout
---------------
    {
      "$1656": {"Object Clipping": 0, "Can be jumped on": false, ...},
      "$1662": {...}, "$166E": {...}, "$167A": {...},
      "$1686": {...}, "$190F": {...},
      "AsmFile": "mysprite.asm",
      "ActLike": 54,
      "Type": 1,
      "Extra Property Byte 1": 0,
      "Extra Property Byte 2": 0,
      "Additional Byte Count (extra bit clear)": 0,
      "Additional Byte Count (extra bit set)": 0,
      "Map16": "<base64>",
      "Displays": [{"Description": "", "ExtraBit": false,
                    "X": 0, "Y": 0, "UseText": false}],
      "Collection": [{"Name": "", "ExtraBit": false,
                      "Extra Property Byte 1": 0, ... 4}]
    }

Registers are written with one member per packed property. On reading,
a register may also be a plain integer.

Compatibility
-------------
Unknown members are ignored, so files written by newer tools still load.
The registers, AsmFile, ActLike, Type and the two extra property bytes
are required; the byte counts, Map16, Displays and Collection default to
zero/empty when absent.
"""

from pathlib import Path
from typing import Any, Union
import base64
import binascii
import json
import logging

from sprite_cfg.config import get_config
from sprite_cfg.errors import FormatError
from sprite_cfg.model import (
    REGISTER_NAMES,
    CfgRecord,
    CollectionEntry,
    DisplayEntry,
    fields_of,
    validate_before_save,
)
from sprite_cfg.model.entries import DISPLAY_POSITION_MASK

logger = logging.getLogger(__name__)

# Marker for "use the configured indent"; None already means compact output
DEFAULT_INDENT = object()


# =============================================================================
# Member Names
# =============================================================================

REGISTER_KEYS: dict[str, str] = {
    "addr_1656": "$1656",
    "addr_1662": "$1662",
    "addr_166e": "$166E",
    "addr_167a": "$167A",
    "addr_1686": "$1686",
    "addr_190f": "$190F",
}

FIELD_LABELS: dict[str, str] = {
    "object_clipping": "Object Clipping",
    "can_be_jumped_on": "Can be jumped on",
    "dies_when_jumped_on": "Dies when jumped on",
    "hop_in_kick_shells": "Hop in/kick shells",
    "disappears_in_smoke": "Disappears in cloud of smoke",
    "sprite_clipping": "Sprite Clipping",
    "shell_death_frame": "Use shell as death frame",
    "falls_when_killed": "Falls straight down when killed",
    "second_graphics_page": "Use second graphics page",
    "palette": "Palette",
    "no_fireball_kill": "Disable fireball killing",
    "no_cape_kill": "Disable cape killing",
    "no_water_splash": "Disable water splash",
    "no_layer2_interaction": "Don't interact with Layer 2",
    "keep_clipping_when_starkilled": "Don't disable cliping when starkilled",
    "invincible": "Invincible to star/cape/fire/bounce blk.",
    "process_offscreen": "Process when off screen",
    "no_shell_when_stunned": "Don't change into shell when stunned",
    "cannot_be_kicked": "Can't be kicked like shell",
    "interact_every_frame": "Process interaction with Mario every frame",
    "powerup_when_eaten": "Gives power-up when eaten by yoshi",
    "no_default_interaction": "Don't use default interaction with Mario",
    "inedible": "Inedible",
    "stay_in_yoshis_mouth": "Stay in Yoshi's mouth",
    "weird_ground_behaviour": "Weird ground behaviour",
    "no_sprite_interaction": "Don't interact with other sprites",
    "keep_direction_when_touched": "Don't change direction if touched",
    "no_coin_at_goal": "Don't turn into coin when goal passed",
    "spawns_new_sprite": "Spawn a new sprite",
    "no_object_interaction": "Don't interact with objects",
    "passable_from_below": "Make platform passable from below",
    "keep_at_goal": "Don't erase when goal passed",
    "immune_to_slide": "Can't be killed by sliding",
    "five_fireballs": "Takes 5 fireballs to kill",
    "jump_with_upward_speed": "Can be jumped on with upward Y speed",
    "tall_death_frame": "Death frame two tiles high",
    "no_silver_pow_coin": "Don't turn into a coin with silver POW",
    "no_wall_stick": "Don't get stuck in walls (carryable sprites)",
}

KEY_ASM_FILE = "AsmFile"
KEY_ACT_LIKE = "ActLike"
KEY_TYPE = "Type"
KEY_EXTRA_PROP = "Extra Property Byte {}"
KEY_BYTE_COUNT = "Additional Byte Count (extra bit clear)"
KEY_EXTRA_BYTE_COUNT = "Additional Byte Count (extra bit set)"
KEY_MAP16 = "Map16"
KEY_DISPLAYS = "Displays"
KEY_COLLECTION = "Collection"

KEY_DESCRIPTION = "Description"
KEY_EXTRA_BIT = "ExtraBit"
KEY_X = "X"
KEY_Y = "Y"
KEY_USE_TEXT = "UseText"
KEY_NAME = "Name"


# =============================================================================
# Encoding
# =============================================================================

def _register_to_dict(record: CfgRecord, register: str) -> dict[str, Any]:
    value = record.get_register(register)
    result: dict[str, Any] = {}
    for spec in fields_of(register):
        field_value = spec.read(value)
        result[FIELD_LABELS[spec.name]] = bool(field_value) if spec.is_flag else field_value
    return result


def record_to_dict(record: CfgRecord) -> dict[str, Any]:
    """Convert a record to the JSON document structure."""
    document: dict[str, Any] = {}
    for register in REGISTER_NAMES:
        document[REGISTER_KEYS[register]] = _register_to_dict(record, register)

    document[KEY_ASM_FILE] = record.asm_file
    document[KEY_ACT_LIKE] = record.act_like
    document[KEY_TYPE] = record.type
    document[KEY_EXTRA_PROP.format(1)] = record.extra_property_1
    document[KEY_EXTRA_PROP.format(2)] = record.extra_property_2
    document[KEY_BYTE_COUNT] = record.byte_count
    document[KEY_EXTRA_BYTE_COUNT] = record.extra_byte_count
    document[KEY_MAP16] = base64.b64encode(record.map16.significant_data()).decode("ascii")

    document[KEY_DISPLAYS] = [
        {
            KEY_DESCRIPTION: entry.description,
            KEY_EXTRA_BIT: entry.extra_bit,
            KEY_X: entry.x,
            KEY_Y: entry.y,
            KEY_USE_TEXT: entry.use_text,
        }
        for entry in record.display_entries
    ]
    document[KEY_COLLECTION] = [
        {
            KEY_NAME: entry.name,
            KEY_EXTRA_BIT: entry.extra_bit,
            **{
                KEY_EXTRA_PROP.format(n): value
                for n, value in enumerate(entry.extra_properties, start=1)
            },
        }
        for entry in record.collection_entries
    ]
    return document


def to_json(record: CfgRecord, indent: Any = DEFAULT_INDENT) -> str:
    """
    Encode a record as JSON text.

    Args:
        record: The record to encode
        indent: Indentation width; None for a single line. Defaults to the
            configured indent.
    """
    if indent is DEFAULT_INDENT:
        indent = get_config().json_indent
    return json.dumps(record_to_dict(record), indent=indent, ensure_ascii=False)


# =============================================================================
# Decoding
# =============================================================================

_MISSING = object()

_KIND_NAMES = {int: "integer", bool: "boolean", str: "string", dict: "object", list: "array"}


def _member(obj: dict, key: str, path: str, kind: type, default: Any = _MISSING) -> Any:
    """Fetch a member and check its JSON type."""
    member_path = f"{path}.{key}" if path else key
    if key not in obj:
        if default is _MISSING:
            raise FormatError("required member is missing", member=member_path)
        return default
    value = obj[key]
    # bool is an int subclass; JSON true/false must not pass as a number
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        raise FormatError(
            f"expected {_KIND_NAMES[kind]}, got {_json_type_name(value)}",
            member=member_path,
        )
    return value


def _ranged(obj: dict, key: str, path: str, limit: int = 0xFF, default: Any = _MISSING) -> int:
    value = _member(obj, key, path, int, default)
    if not 0 <= value <= limit:
        member_path = f"{path}.{key}" if path else key
        raise FormatError(f"value {value} is outside 0-{limit}", member=member_path)
    return value


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return _KIND_NAMES.get(type(value), type(value).__name__)


def _register_from_json(document: dict, register: str) -> int:
    key = REGISTER_KEYS[register]
    if key not in document:
        raise FormatError("required member is missing", member=key)
    if isinstance(document[key], int) and not isinstance(document[key], bool):
        return _ranged(document, key, "")

    obj = _member(document, key, "", dict)
    value = 0
    for spec in fields_of(register):
        label = FIELD_LABELS[spec.name]
        if spec.is_flag:
            field_value = int(_member(obj, label, key, bool))
        else:
            field_value = _ranged(obj, label, key, limit=(1 << spec.width) - 1)
        value = spec.write(value, field_value)
    return value


def _display_from_json(obj: Any, path: str) -> DisplayEntry:
    if not isinstance(obj, dict):
        raise FormatError(f"expected object, got {_json_type_name(obj)}", member=path)
    return DisplayEntry(
        description=_member(obj, KEY_DESCRIPTION, path, str),
        x=_ranged(obj, KEY_X, path, limit=DISPLAY_POSITION_MASK),
        y=_ranged(obj, KEY_Y, path, limit=DISPLAY_POSITION_MASK),
        extra_bit=_member(obj, KEY_EXTRA_BIT, path, bool),
        use_text=_member(obj, KEY_USE_TEXT, path, bool),
    )


def _collection_from_json(obj: Any, path: str) -> CollectionEntry:
    if not isinstance(obj, dict):
        raise FormatError(f"expected object, got {_json_type_name(obj)}", member=path)
    props = [_ranged(obj, KEY_EXTRA_PROP.format(n), path) for n in range(1, 5)]
    return CollectionEntry(
        name=_member(obj, KEY_NAME, path, str),
        extra_bit=_member(obj, KEY_EXTRA_BIT, path, bool),
        extra_property_1=props[0],
        extra_property_2=props[1],
        extra_property_3=props[2],
        extra_property_4=props[3],
    )


def record_from_dict(document: Any) -> CfgRecord:
    """
    Build a record from a parsed JSON document.

    Raises:
        FormatError: If a required member is missing or has the wrong shape
    """
    if not isinstance(document, dict):
        raise FormatError(f"expected object, got {_json_type_name(document)}", member="$")

    record = CfgRecord()
    for register in REGISTER_NAMES:
        record.set_register(register, _register_from_json(document, register))

    record.asm_file = _member(document, KEY_ASM_FILE, "", str)
    record.act_like = _ranged(document, KEY_ACT_LIKE, "")
    record.type = _ranged(document, KEY_TYPE, "")
    record.extra_property_1 = _ranged(document, KEY_EXTRA_PROP.format(1), "")
    record.extra_property_2 = _ranged(document, KEY_EXTRA_PROP.format(2), "")
    record.byte_count = _ranged(document, KEY_BYTE_COUNT, "", default=0)
    record.extra_byte_count = _ranged(document, KEY_EXTRA_BYTE_COUNT, "", default=0)

    encoded = _member(document, KEY_MAP16, "", str, default="")
    try:
        map16 = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise FormatError("invalid base64 data", member=KEY_MAP16) from None
    if len(map16) > record.map16.CAPACITY:
        raise FormatError(
            f"map16 data is {len(map16)} bytes, the block holds {record.map16.CAPACITY}",
            member=KEY_MAP16,
        )
    record.map16.set_data(map16)

    displays = _member(document, KEY_DISPLAYS, "", list, default=[])
    record.display_entries.replace_all(
        _display_from_json(obj, f"{KEY_DISPLAYS}[{i}]") for i, obj in enumerate(displays)
    )
    collection = _member(document, KEY_COLLECTION, "", list, default=[])
    record.collection_entries.replace_all(
        _collection_from_json(obj, f"{KEY_COLLECTION}[{i}]") for i, obj in enumerate(collection)
    )
    return record


def from_json(text: Union[str, bytes]) -> CfgRecord:
    """
    Decode JSON text into a new record.

    Raises:
        FormatError: If the text is not valid JSON or not a CFG document
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"invalid JSON: {e.msg}", line=e.lineno) from None
    except UnicodeDecodeError as e:
        raise FormatError(f"invalid JSON encoding: {e.reason}") from None
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and very deep nesting
        raise FormatError(f"invalid JSON: {e}") from None

    record = record_from_dict(document)
    logger.debug(
        f"Parsed CFG JSON: type={record.type:02X}, "
        f"{len(record.display_entries)} display, "
        f"{len(record.collection_entries)} collection entries"
    )
    return record


# =============================================================================
# File Helpers
# =============================================================================

def read_json_file(filepath: Union[str, Path]) -> CfgRecord:
    """
    Read a .json CFG file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        FormatError: If the file is not a valid CFG document
    """
    return from_json(Path(filepath).read_bytes())


def write_json_file(
    record: CfgRecord,
    filepath: Union[str, Path],
    indent: Any = DEFAULT_INDENT,
) -> int:
    """
    Validate a record and write it as a .json file.

    Returns:
        Number of bytes written

    Raises:
        ValidationError: If the record fails validation (nothing is written)
    """
    validate_before_save(record)
    data = to_json(record, indent=indent).encode("utf-8")
    Path(filepath).write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {filepath}")
    return len(data)
