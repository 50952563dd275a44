"""
CFG Text Codec
==============

Reads and writes the line-oriented .cfg format that sprite tools have
consumed since the original sprite_tool.

File Layout
-----------
    Line    Content                         Example
    ----    -------                         -------
    1       Type (hex)                      01
    2       Acts like (hex)                 36
    3       Tweaker bytes $1656-$190F (hex) 10 40 01 11 01 00
    4       Extra property bytes 1, 2 (hex) 00 00
    5       ASM file name                   mysprite.asm
    6       Byte counts (decimal)           2:3

Line 6 holds the number of extra bytes the sprite takes in a level with
the extra bit clear and set. Older files stop after line 5.

Each value is read from its own line. The original sprite_tool reads the
ten hex values as a whitespace-separated token stream and takes the next
non-blank line as the ASM file, so a file that splits or joins lines 1-4
differently (or leaves a blank line between them) is read differently
here. Files written by PIXI and the CFG Editor use the layout above.

Extension Lines
---------------
The Lunar Magic data of a record is written after line 6 as tagged lines.
Tools that only know the legacy layout stop reading at line 6.

    DISPLAY <x> <y> <extra bit> <use text> <description>
    COLLECTION <extra bit> <p1> <p2> <p3> <p4> <name>
    MAP16 <hex bytes>

X, Y and the property bytes are hex; flags are 0 or 1. Description and
name are the rest of the line with backslash, CR and LF escaped as \\\\,
\\r and \\n. MAP16 data is split over as many lines as needed and
concatenated in order on reading.

Usage
-----
    >>> record = from_text(Path("thwomp.cfg").read_text())
    >>> record.act_like
    38
    >>> text = to_text(record)
"""

from pathlib import Path
from typing import Optional, Union
import logging
import re

from sprite_cfg.config import get_config
from sprite_cfg.errors import FormatError
from sprite_cfg.model import (
    REGISTER_NAMES,
    CfgRecord,
    CollectionEntry,
    DisplayEntry,
    validate_before_save,
)

logger = logging.getLogger(__name__)

# Hex bytes written per MAP16 line
MAP16_BYTES_PER_LINE = 32

TAG_DISPLAY = "DISPLAY"
TAG_COLLECTION = "COLLECTION"
TAG_MAP16 = "MAP16"

_HEX_TOKEN = re.compile(r"^[0-9A-Fa-f]+$")
_BYTE_COUNTS = re.compile(r"^\s*(\d{1,3})\s*:\s*(\d{1,3})\s*$")


# =============================================================================
# Escaping
# =============================================================================

def escape_text(text: str) -> str:
    """Escape a free-text field so it fits on one line."""
    return text.replace("\\", "\\\\").replace("\r", "\\r").replace("\n", "\\n")


def unescape_text(text: str) -> str:
    """Undo escape_text(). Unknown escapes are kept as written."""
    result = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            following = text[i + 1]
            if following in ("\\", "n", "r"):
                result.append({"\\": "\\", "n": "\n", "r": "\r"}[following])
                i += 2
                continue
        result.append(char)
        i += 1
    return "".join(result)


# =============================================================================
# Encoding
# =============================================================================

def to_text(record: CfgRecord, newline: Optional[str] = None) -> str:
    """
    Encode a record as .cfg text.

    Args:
        record: The record to encode
        newline: Line ending, defaults to the configured one (CRLF)

    Returns:
        The file contents, ending with a newline
    """
    if newline is None:
        newline = get_config().newline

    registers = " ".join(f"{record.get_register(name):02X}" for name in REGISTER_NAMES)
    lines = [
        f"{record.type:02X}",
        f"{record.act_like:02X}",
        registers,
        f"{record.extra_property_1:02X} {record.extra_property_2:02X}",
        record.asm_file,
        f"{record.byte_count}:{record.extra_byte_count}",
    ]

    for entry in record.display_entries:
        lines.append(
            f"{TAG_DISPLAY} {entry.x:X} {entry.y:X} {int(entry.extra_bit)} "
            f"{int(entry.use_text)} {escape_text(entry.description)}"
        )

    for entry in record.collection_entries:
        props = " ".join(f"{p:02X}" for p in entry.extra_properties)
        lines.append(
            f"{TAG_COLLECTION} {int(entry.extra_bit)} {props} {escape_text(entry.name)}"
        )

    map16 = record.map16.significant_data()
    for start in range(0, len(map16), MAP16_BYTES_PER_LINE):
        chunk = map16[start:start + MAP16_BYTES_PER_LINE]
        lines.append(f"{TAG_MAP16} {chunk.hex().upper()}")

    return newline.join(lines) + newline


# =============================================================================
# Decoding
# =============================================================================

def _parse_hex(token: str, line_number: int, line: str, limit: int = 0xFF) -> int:
    if not _HEX_TOKEN.match(token):
        raise FormatError(f"invalid hex value '{token}'", line=line_number, source_line=line)
    value = int(token, 16)
    if value > limit:
        raise FormatError(
            f"value '{token}' is larger than 0x{limit:X}",
            line=line_number, source_line=line,
        )
    return value


def _parse_hex_list(line: str, count: int, line_number: int) -> list[int]:
    """Parse up to count hex bytes; missing ones are zero, extra ones ignored."""
    tokens = line.split()[:count]
    values = [_parse_hex(token, line_number, line) for token in tokens]
    return values + [0] * (count - len(values))


def _parse_flag(token: str, line_number: int, line: str) -> bool:
    if token not in ("0", "1"):
        raise FormatError(f"flag must be 0 or 1, got '{token}'", line=line_number, source_line=line)
    return token == "1"


def _parse_byte_counts(line: str, line_number: int) -> tuple[int, int]:
    if not line.strip():
        return 0, 0
    match = _BYTE_COUNTS.match(line)
    if not match:
        raise FormatError(
            "byte counts must be written as <normal>:<extra>",
            line=line_number, source_line=line,
        )
    normal, extra = int(match.group(1)), int(match.group(2))
    if normal > 0xFF or extra > 0xFF:
        raise FormatError("byte count larger than 255", line=line_number, source_line=line)
    return normal, extra


def _parse_display(line: str, line_number: int) -> DisplayEntry:
    parts = line.split(" ", 5)
    if len(parts) < 5:
        raise FormatError(
            f"{TAG_DISPLAY} needs X, Y, extra bit and use-text flag",
            line=line_number, source_line=line,
        )
    return DisplayEntry(
        description=unescape_text(parts[5]) if len(parts) > 5 else "",
        x=_parse_hex(parts[1], line_number, line, limit=0x0F),
        y=_parse_hex(parts[2], line_number, line, limit=0x0F),
        extra_bit=_parse_flag(parts[3], line_number, line),
        use_text=_parse_flag(parts[4], line_number, line),
    )


def _parse_collection(line: str, line_number: int) -> CollectionEntry:
    parts = line.split(" ", 6)
    if len(parts) < 6:
        raise FormatError(
            f"{TAG_COLLECTION} needs the extra bit and four property bytes",
            line=line_number, source_line=line,
        )
    props = [_parse_hex(token, line_number, line) for token in parts[2:6]]
    return CollectionEntry(
        name=unescape_text(parts[6]) if len(parts) > 6 else "",
        extra_bit=_parse_flag(parts[1], line_number, line),
        extra_property_1=props[0],
        extra_property_2=props[1],
        extra_property_3=props[2],
        extra_property_4=props[3],
    )


def _parse_map16(line: str, line_number: int) -> bytes:
    data = line[len(TAG_MAP16):].strip()
    try:
        return bytes.fromhex(data)
    except ValueError:
        raise FormatError("invalid map16 hex data", line=line_number, source_line=line) from None


def from_text(text: str) -> CfgRecord:
    """
    Decode .cfg text into a new record.

    Missing lines leave their fields at zero/empty. Unknown tagged lines
    after line 6 are ignored.

    Raises:
        FormatError: If a numeric token is malformed or out of range
    """
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    # Line 1 may start with a UTF-8 byte order mark
    if lines and lines[0].startswith("\ufeff"):
        lines[0] = lines[0][1:]

    def line_at(index: int) -> str:
        return lines[index] if index < len(lines) else ""

    record = CfgRecord()
    record.type = _parse_hex_list(line_at(0), 1, 1)[0]
    record.act_like = _parse_hex_list(line_at(1), 1, 2)[0]
    for name, value in zip(REGISTER_NAMES, _parse_hex_list(line_at(2), 6, 3)):
        record.set_register(name, value)
    record.extra_property_1, record.extra_property_2 = _parse_hex_list(line_at(3), 2, 4)
    record.asm_file = line_at(4).strip()
    record.byte_count, record.extra_byte_count = _parse_byte_counts(line_at(5), 6)

    displays = []
    collection = []
    map16 = bytearray()
    for index in range(6, len(lines)):
        line = lines[index]
        line_number = index + 1
        tag = line.split(" ", 1)[0].upper()
        if tag == TAG_DISPLAY:
            displays.append(_parse_display(line, line_number))
        elif tag == TAG_COLLECTION:
            collection.append(_parse_collection(line, line_number))
        elif tag == TAG_MAP16:
            map16.extend(_parse_map16(line, line_number))
        elif line.strip():
            logger.debug(f"Ignoring unknown line {line_number}: {line!r}")

    if len(map16) > record.map16.CAPACITY:
        raise FormatError(
            f"map16 data is {len(map16)} bytes, the block holds {record.map16.CAPACITY}"
        )

    record.display_entries.replace_all(displays)
    record.collection_entries.replace_all(collection)
    record.map16.set_data(bytes(map16))

    logger.debug(
        f"Parsed CFG text: type={record.type:02X}, {len(displays)} display, "
        f"{len(collection)} collection entries, {len(map16)} map16 bytes"
    )
    return record


# =============================================================================
# File Helpers
# =============================================================================

def read_cfg_file(filepath: Union[str, Path]) -> CfgRecord:
    """
    Read a .cfg file from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        FormatError: If the file is not valid CFG text
    """
    filepath = Path(filepath)
    try:
        text = filepath.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        # Old files may be ANSI encoded; latin-1 keeps every byte.
        logger.debug(f"{filepath} is not UTF-8 ({e}), decoding as latin-1")
        text = filepath.read_bytes().decode("latin-1")
    return from_text(text)


def write_cfg_file(
    record: CfgRecord,
    filepath: Union[str, Path],
    newline: Optional[str] = None,
) -> int:
    """
    Validate a record and write it as a .cfg file.

    Returns:
        Number of bytes written

    Raises:
        ValidationError: If the record fails validation (nothing is written)
    """
    validate_before_save(record)
    data = to_text(record, newline=newline).encode("utf-8")
    Path(filepath).write_bytes(data)
    logger.debug(f"Wrote {len(data)} bytes to {filepath}")
    return len(data)
