"""
Bit-Field Accessors for Tweaker Registers
=========================================

The six "tweaker" bytes of a sprite are copied by the game into the sprite
tables at $1656, $1662, $166E, $167A, $1686 and $190F. Each byte packs
several properties. This module provides the generic read/write helpers
and the declarative table describing every packed property.

Register Layout
---------------
    $1656   oooo jdks   o = object clipping, j = can be jumped on,
                        d = dies when jumped on, k = hop in/kick shells,
                        s = disappears in cloud of smoke
    $1662   ssss sscf   s = sprite clipping (6 bits), c = shell death
                        frame, f = falls straight down when killed
    $166E   gppp fcwl   g = second graphics page, p = palette,
                        f/c = fireball/cape immune, w = no water splash,
                        l = don't interact with layer 2
    $167A-$190F         eight single-bit flags each

The diagrams list bits from 0 upwards, matching the offsets below.

Usage
-----
    >>> read_bits(0x39, offset=0, width=4)
    9
    >>> hex(write_bits(0x00, offset=1, width=3, value=0x0F))
    '0xe'
"""

from typing import NamedTuple

from sprite_cfg.errors import ProgrammingError


# =============================================================================
# Register Names
# =============================================================================

# Attribute names on CfgRecord, in the order the CFG text format lists them
REGISTER_NAMES: tuple[str, ...] = (
    "addr_1656",
    "addr_1662",
    "addr_166e",
    "addr_167a",
    "addr_1686",
    "addr_190f",
)

# RAM address each register is named after
REGISTER_ADDRESSES: dict[str, int] = {
    "addr_1656": 0x1656,
    "addr_1662": 0x1662,
    "addr_166e": 0x166E,
    "addr_167a": 0x167A,
    "addr_1686": 0x1686,
    "addr_190f": 0x190F,
}


# =============================================================================
# Generic Accessors
# =============================================================================

def _check_range(register: int, offset: int, width: int) -> None:
    if not 0 <= register <= 0xFF:
        raise ProgrammingError(f"register value {register!r} is not a byte")
    if offset < 0 or width < 1 or offset + width > 8:
        raise ProgrammingError(
            f"bit field at offset {offset} with width {width} "
            f"does not fit in an 8-bit register"
        )


def field_mask(offset: int, width: int) -> int:
    """Return the in-register mask of a field, e.g. (1, 3) -> 0x0E."""
    _check_range(0, offset, width)
    return ((1 << width) - 1) << offset


def read_bits(register: int, offset: int, width: int) -> int:
    """
    Read an unsigned field from a byte register.

    Args:
        register: The register value (0-255)
        offset: Zero-based position of the lowest bit of the field
        width: Number of bits in the field

    Returns:
        The field value, always less than 2**width

    Raises:
        ProgrammingError: If the field does not fit in 8 bits
    """
    _check_range(register, offset, width)
    return (register >> offset) & ((1 << width) - 1)


def write_bits(register: int, offset: int, width: int, value: int) -> int:
    """
    Return a new register value with one field replaced.

    The value is masked to the field width, so writing 0x1F into a 4-bit
    field stores 0xF. Bits outside the field are left unchanged.

    Raises:
        ProgrammingError: If the field does not fit in 8 bits
    """
    _check_range(register, offset, width)
    mask = ((1 << width) - 1) << offset
    return (register & ~mask & 0xFF) | ((int(value) << offset) & mask)


# =============================================================================
# Declarative Field Table
# =============================================================================

class RegisterField(NamedTuple):
    """One packed property inside a tweaker register."""
    name: str
    register: str
    offset: int
    width: int

    @property
    def is_flag(self) -> bool:
        """True for single-bit fields, which CfgRecord exposes as bools."""
        return self.width == 1

    @property
    def mask(self) -> int:
        return field_mask(self.offset, self.width)

    def read(self, register: int) -> int:
        return read_bits(register, self.offset, self.width)

    def write(self, register: int, value: int) -> int:
        return write_bits(register, self.offset, self.width, value)


REGISTER_FIELDS: tuple[RegisterField, ...] = (
    # $1656
    RegisterField("object_clipping", "addr_1656", 0, 4),
    RegisterField("can_be_jumped_on", "addr_1656", 4, 1),
    RegisterField("dies_when_jumped_on", "addr_1656", 5, 1),
    RegisterField("hop_in_kick_shells", "addr_1656", 6, 1),
    RegisterField("disappears_in_smoke", "addr_1656", 7, 1),
    # $1662
    RegisterField("sprite_clipping", "addr_1662", 0, 6),
    RegisterField("shell_death_frame", "addr_1662", 6, 1),
    RegisterField("falls_when_killed", "addr_1662", 7, 1),
    # $166E
    RegisterField("second_graphics_page", "addr_166e", 0, 1),
    RegisterField("palette", "addr_166e", 1, 3),
    RegisterField("no_fireball_kill", "addr_166e", 4, 1),
    RegisterField("no_cape_kill", "addr_166e", 5, 1),
    RegisterField("no_water_splash", "addr_166e", 6, 1),
    RegisterField("no_layer2_interaction", "addr_166e", 7, 1),
    # $167A
    RegisterField("keep_clipping_when_starkilled", "addr_167a", 0, 1),
    RegisterField("invincible", "addr_167a", 1, 1),
    RegisterField("process_offscreen", "addr_167a", 2, 1),
    RegisterField("no_shell_when_stunned", "addr_167a", 3, 1),
    RegisterField("cannot_be_kicked", "addr_167a", 4, 1),
    RegisterField("interact_every_frame", "addr_167a", 5, 1),
    RegisterField("powerup_when_eaten", "addr_167a", 6, 1),
    RegisterField("no_default_interaction", "addr_167a", 7, 1),
    # $1686
    RegisterField("inedible", "addr_1686", 0, 1),
    RegisterField("stay_in_yoshis_mouth", "addr_1686", 1, 1),
    RegisterField("weird_ground_behaviour", "addr_1686", 2, 1),
    RegisterField("no_sprite_interaction", "addr_1686", 3, 1),
    RegisterField("keep_direction_when_touched", "addr_1686", 4, 1),
    RegisterField("no_coin_at_goal", "addr_1686", 5, 1),
    RegisterField("spawns_new_sprite", "addr_1686", 6, 1),
    RegisterField("no_object_interaction", "addr_1686", 7, 1),
    # $190F
    RegisterField("passable_from_below", "addr_190f", 0, 1),
    RegisterField("keep_at_goal", "addr_190f", 1, 1),
    RegisterField("immune_to_slide", "addr_190f", 2, 1),
    RegisterField("five_fireballs", "addr_190f", 3, 1),
    RegisterField("jump_with_upward_speed", "addr_190f", 4, 1),
    RegisterField("tall_death_frame", "addr_190f", 5, 1),
    RegisterField("no_silver_pow_coin", "addr_190f", 6, 1),
    RegisterField("no_wall_stick", "addr_190f", 7, 1),
)

_FIELDS_BY_NAME: dict[str, RegisterField] = {f.name: f for f in REGISTER_FIELDS}


def field_for(name: str) -> RegisterField:
    """
    Look up a packed field by name.

    Raises:
        KeyError: If no field has that name
    """
    return _FIELDS_BY_NAME[name]


def fields_of(register: str) -> tuple[RegisterField, ...]:
    """Return the fields packed into one register, lowest bit first."""
    return tuple(f for f in REGISTER_FIELDS if f.register == register)


def _check_table() -> None:
    # Every register must be fully covered with no overlap.
    for register in REGISTER_NAMES:
        covered = 0
        for f in fields_of(register):
            if covered & f.mask:
                raise ProgrammingError(f"field {f.name} overlaps in {register}")
            covered |= f.mask
        if covered != 0xFF:
            raise ProgrammingError(f"{register} is not fully described")


_check_table()
