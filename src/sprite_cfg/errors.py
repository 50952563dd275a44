"""
Sprite CFG Error Hierarchy
==========================

This module defines the exception hierarchy for the sprite_cfg package.
All exceptions inherit from CfgError, allowing callers to catch every
data-dependent failure of the codecs with a single except clause.

Exception Hierarchy
-------------------
CfgError (base)
├── FormatError - malformed text or JSON input
├── ValidationError - record violates an invariant checked before saving
│   ├── DuplicateEntryError - two display entries share X, Y and extra bit
│   └── Map16CapacityError - custom map16 data does not fit the block
├── ImageTooSmallError - ROM image too short for the requested slot
├── SlotIndexError - ROM slot index outside the sprite table
└── ProgrammingError - bit-field offset/width outside a byte register

Recoverability
--------------
FormatError, ValidationError and ImageTooSmallError describe problems with
user data. They are always raised before anything is written, so the
caller can report them and carry on with its current state.

SlotIndexError is a caller error and is raised before the image is read.

ProgrammingError means one of the fixed field tables is wrong. It should
never be caught and shown to a user as if their file were bad.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class CfgError(Exception):
    """
    Base exception for all sprite_cfg errors.

        try:
            record = from_json(text)
        except CfgError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Input Format Errors
# =============================================================================

class FormatError(CfgError):
    """
    Malformed CFG text or JSON input.

    Attributes:
        message: The error description
        line: 1-indexed line number in the source text (optional)
        member: JSON member path such as "Displays[1].X" (optional)
        source_line: The offending line text (optional)
    """

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        member: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.line = line
        self.member = member
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the message with its location.

        Example output:
            line 3: invalid hex value 'G1'
                00 G1 00 00 00 00
        """
        if self.line is not None:
            text = f"line {self.line}: {self.message}"
        elif self.member is not None:
            text = f"member '{self.member}': {self.message}"
        else:
            text = self.message

        if self.source_line is not None:
            text += f"\n    {self.source_line}"
        return text


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(CfgError):
    """
    The record violates an invariant that is only enforced on save.

    The in-memory model accepts these states so an editor can hold them
    while the user is still typing; every save path refuses them.
    """
    pass


class DuplicateEntryError(ValidationError):
    """
    Two or more Lunar Magic display entries share X, Y and extra bit.

    Attributes:
        duplicates: The (x, y, extra_bit) keys that occur more than once
    """

    MESSAGE = (
        "The combination of X, Y and ExtraBit settings must be unique "
        "for all entries in the Lunar Magic display sprites."
    )

    def __init__(self, duplicates: Optional[list[tuple[int, int, bool]]] = None):
        self.duplicates = duplicates or []
        super().__init__(self.MESSAGE)


class Map16CapacityError(ValidationError):
    """Custom map16 data is larger than the block can hold."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"custom map16 data is {size} bytes, "
            f"but the block holds at most {capacity} bytes"
        )


# =============================================================================
# ROM Image Errors
# =============================================================================

class ImageTooSmallError(CfgError):
    """
    The ROM image ends before the last byte a slot needs.

    Raised before any byte is read or written.

    Attributes:
        slot: The requested slot index
        required: Minimum image length for the slot
        actual: Length of the image passed in
    """

    def __init__(self, slot: int, required: int, actual: int):
        self.slot = slot
        self.required = required
        self.actual = actual
        super().__init__(
            f"ROM image is {actual} bytes, slot 0x{slot:02X} needs "
            f"at least {required} bytes"
        )


class SlotIndexError(CfgError):
    """ROM slot index outside the vanilla sprite table."""

    def __init__(self, slot: object, slot_count: int):
        self.slot = slot
        self.slot_count = slot_count
        super().__init__(
            f"invalid sprite slot {slot!r}: must be an integer "
            f"from 0 to {slot_count - 1} (0x{slot_count - 1:02X})"
        )


# =============================================================================
# Defects
# =============================================================================

class ProgrammingError(CfgError):
    """
    A bit-field offset or width does not fit in a byte register.

    This indicates a defect in one of the fixed field tables, not a
    problem with user data.
    """
    pass
