"""
File Dispatch
=============

Loads and saves a record by file name, picking the codec from the
extension:

    Extension       Format
    ---------       ------
    .cfg            CFG text
    .json           CFG JSON
    .smc / .sfc     SMW ROM image, one vanilla slot

Every save validates the record first, so a file is never written from a
record that fails validation. ROM saves read the existing image, patch
the slot's six tweaker bytes and write the image back at the same length.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union
import logging

from sprite_cfg.codec.cfgjson import read_json_file, write_json_file
from sprite_cfg.codec.cfgtext import read_cfg_file, write_cfg_file
from sprite_cfg.codec.rom import read_from_image, write_to_image
from sprite_cfg.config import get_config
from sprite_cfg.errors import FormatError
from sprite_cfg.model import CfgRecord, validate_before_save

logger = logging.getLogger(__name__)


class FileType(Enum):
    """Storage format of a CFG file."""
    CFG = "cfg"
    JSON = "json"
    ROM = "rom"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileType":
        """
        Determine the format from a file extension.

        Raises:
            FormatError: If the extension is not recognised
        """
        suffix = Path(path).suffix.lower()
        try:
            return _EXTENSIONS[suffix]
        except KeyError:
            raise FormatError(
                f"unsupported file extension '{suffix or Path(path).name}' "
                f"(expected .cfg, .json, .smc or .sfc)"
            ) from None


_EXTENSIONS = {
    ".cfg": FileType.CFG,
    ".json": FileType.JSON,
    ".smc": FileType.ROM,
    ".sfc": FileType.ROM,
}


@dataclass
class LoadedFile:
    """A record together with where it came from."""
    record: CfgRecord
    file_type: FileType
    path: Path
    slot: Optional[int] = None


def _resolve_slot(slot: Optional[int]) -> int:
    return get_config().default_slot if slot is None else slot


def load_file(path: Union[str, Path], slot: Optional[int] = None) -> LoadedFile:
    """
    Load a record from a .cfg, .json or ROM file.

    Args:
        path: File to read
        slot: Vanilla sprite slot for ROM files (defaults to the configured slot)

    Raises:
        FormatError: If the extension is unknown or the file is malformed
        SlotIndexError, ImageTooSmallError: For bad ROM reads
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    file_type = FileType.from_path(path)

    if file_type == FileType.CFG:
        record = read_cfg_file(path)
    elif file_type == FileType.JSON:
        record = read_json_file(path)
    else:
        slot = _resolve_slot(slot)
        record = read_from_image(path.read_bytes(), slot, get_config().rom_header)
        logger.debug(f"Loaded slot 0x{slot:02X} from {path}")
        return LoadedFile(record, file_type, path, slot)

    logger.debug(f"Loaded {path}")
    return LoadedFile(record, file_type, path)


def save_file(record: CfgRecord, path: Union[str, Path], slot: Optional[int] = None) -> FileType:
    """
    Validate a record and save it in the format the extension names.

    ROM files must already exist; only the slot's tweaker bytes change.

    Returns:
        The format that was written

    Raises:
        ValidationError: If the record fails validation (nothing is written)
        FormatError: If the extension is unknown
        SlotIndexError, ImageTooSmallError: For bad ROM writes
    """
    path = Path(path)
    file_type = FileType.from_path(path)
    validate_before_save(record)

    if file_type == FileType.CFG:
        write_cfg_file(record, path)
    elif file_type == FileType.JSON:
        write_json_file(record, path)
    else:
        slot = _resolve_slot(slot)
        image = bytearray(path.read_bytes())
        write_to_image(record, image, slot, get_config().rom_header)
        path.write_bytes(image)
        logger.debug(f"Patched slot 0x{slot:02X} in {path}")
        return file_type

    logger.debug(f"Saved {path}")
    return file_type
