"""
Sprite Table Entry Codec
========================

Builds the 16-byte entry a sprite insertion tool writes into its custom
sprite table for each CFG record.

Entry Layout
------------
    Offset  Size    Description
    ------  ----    -----------
    0       1       Type
    1       1       Acts like
    2       6       Tweaker bytes $1656, $1662, $166E, $167A, $1686, $190F
    8       3       INIT routine pointer (little-endian SNES address)
    11      3       MAIN routine pointer (little-endian SNES address)
    14      2       Extra property bytes 1 and 2

Sprites that have not been assembled yet point both routines at an RTL
in bank $01 ($01:8021), so an empty slot does nothing when it runs.
"""

from dataclasses import dataclass, field
import struct

from sprite_cfg.errors import FormatError
from sprite_cfg.model import REGISTER_NAMES, CfgRecord

ENTRY_SIZE = 16

# Address of an RTL instruction in bank $01
EMPTY_ROUTINE = 0x018021

_ENTRY_FORMAT = "<BB6s3s3sBB"


@dataclass(frozen=True)
class SnesPointer:
    """A 24-bit SNES address."""
    address: int = EMPTY_ROUTINE

    def __post_init__(self) -> None:
        if not 0 <= self.address <= 0xFFFFFF:
            raise ValueError(f"SNES address out of range: 0x{self.address:X}")

    @property
    def bank(self) -> int:
        return self.address >> 16

    def is_empty(self) -> bool:
        """True when the pointer is the do-nothing routine."""
        return self.address == EMPTY_ROUTINE

    def to_bytes(self) -> bytes:
        return self.address.to_bytes(3, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> "SnesPointer":
        return cls(int.from_bytes(data[:3], "little"))

    def __str__(self) -> str:
        return f"${self.bank:02X}:{self.address & 0xFFFF:04X}"


@dataclass
class TableEntry:
    """One 16-byte sprite table entry."""
    type: int = 0
    act_like: int = 0
    tweakers: tuple[int, ...] = (0, 0, 0, 0, 0, 0)
    init: SnesPointer = field(default_factory=SnesPointer)
    main: SnesPointer = field(default_factory=SnesPointer)
    extra_property_1: int = 0
    extra_property_2: int = 0

    @classmethod
    def from_record(
        cls,
        record: CfgRecord,
        init: SnesPointer = SnesPointer(),
        main: SnesPointer = SnesPointer(),
    ) -> "TableEntry":
        """Build the entry for a record and its assembled routine addresses."""
        return cls(
            type=record.type,
            act_like=record.act_like,
            tweakers=tuple(record.get_register(name) for name in REGISTER_NAMES),
            init=init,
            main=main,
            extra_property_1=record.extra_property_1,
            extra_property_2=record.extra_property_2,
        )

    def to_bytes(self) -> bytes:
        """Serialize the entry to 16 bytes."""
        return struct.pack(
            _ENTRY_FORMAT,
            self.type & 0xFF,
            self.act_like & 0xFF,
            bytes(value & 0xFF for value in self.tweakers),
            self.init.to_bytes(),
            self.main.to_bytes(),
            self.extra_property_1 & 0xFF,
            self.extra_property_2 & 0xFF,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "TableEntry":
        """
        Deserialize an entry.

        Raises:
            FormatError: If data is not exactly 16 bytes
        """
        if len(data) != ENTRY_SIZE:
            raise FormatError(
                f"sprite table entry must be {ENTRY_SIZE} bytes, got {len(data)}"
            )
        type_, act_like, tweakers, init, main, extra_1, extra_2 = struct.unpack(
            _ENTRY_FORMAT, bytes(data)
        )
        return cls(
            type=type_,
            act_like=act_like,
            tweakers=tuple(tweakers),
            init=SnesPointer.from_bytes(init),
            main=SnesPointer.from_bytes(main),
            extra_property_1=extra_1,
            extra_property_2=extra_2,
        )

    def apply_to(self, record: CfgRecord) -> None:
        """Copy the CFG fields of this entry into a record."""
        record.type = self.type
        record.act_like = self.act_like
        for name, value in zip(REGISTER_NAMES, self.tweakers):
            record.set_register(name, value)
        record.extra_property_1 = self.extra_property_1
        record.extra_property_2 = self.extra_property_2
