"""
Save-Time Validation
====================

Invariants the editor may break temporarily but must never write out.
Every save path (text, JSON and ROM) calls validate_before_save() before
the first byte reaches its destination.
"""

import logging

from sprite_cfg.errors import DuplicateEntryError
from sprite_cfg.model.record import CfgRecord

logger = logging.getLogger(__name__)


def find_duplicate_displays(record: CfgRecord) -> list[tuple[int, int]]:
    """
    Find display entries that share X, Y and extra bit.

    Returns:
        (first_index, duplicate_index) pairs, ordered by duplicate_index.
        Empty when every entry is unique.
    """
    first_seen: dict[tuple[int, int, bool], int] = {}
    pairs = []
    for index, entry in enumerate(record.display_entries):
        key = entry.unique_key()
        if key in first_seen:
            pairs.append((first_seen[key], index))
        else:
            first_seen[key] = index
    return pairs


def validate_before_save(record: CfgRecord) -> None:
    """
    Check every save-time invariant of a record.

    Raises:
        DuplicateEntryError: If two display entries share X, Y and extra bit
    """
    pairs = find_duplicate_displays(record)
    if pairs:
        keys = []
        for _, index in pairs:
            key = record.display_entries[index].unique_key()
            if key not in keys:
                keys.append(key)
        logger.debug(f"Duplicate display entries at {pairs}")
        raise DuplicateEntryError(keys)
