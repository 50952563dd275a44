"""
Bit-Field Accessor Unit Tests
=============================

Tests for sprite_cfg.model.bits: the generic read/write helpers and the
declarative tweaker register field table.
"""

import pytest

from sprite_cfg.errors import ProgrammingError
from sprite_cfg.model import (
    REGISTER_ADDRESSES,
    REGISTER_FIELDS,
    REGISTER_NAMES,
    field_for,
    field_mask,
    fields_of,
    read_bits,
    write_bits,
)


# =============================================================================
# Generic Accessors
# =============================================================================

class TestReadBits:
    """Tests for read_bits()."""

    def test_low_nibble(self):
        assert read_bits(0xA9, 0, 4) == 0x9

    def test_high_nibble(self):
        assert read_bits(0xA9, 4, 4) == 0xA

    def test_single_bit(self):
        assert read_bits(0b0100_0000, 6, 1) == 1
        assert read_bits(0b0100_0000, 5, 1) == 0

    def test_middle_field(self):
        """Palette lives in bits 1-3 of $166E."""
        assert read_bits(0b0000_1010, 1, 3) == 0b101

    def test_full_byte(self):
        assert read_bits(0xFF, 0, 8) == 0xFF

    @pytest.mark.parametrize("offset,width", [(-1, 1), (0, 0), (7, 2), (8, 1), (0, 9)])
    def test_field_outside_byte(self, offset, width):
        with pytest.raises(ProgrammingError):
            read_bits(0, offset, width)

    @pytest.mark.parametrize("register", [-1, 0x100])
    def test_register_not_a_byte(self, register):
        with pytest.raises(ProgrammingError):
            read_bits(register, 0, 1)


class TestWriteBits:
    """Tests for write_bits()."""

    def test_replaces_only_the_field(self):
        assert write_bits(0xFF, 1, 3, 0) == 0xF1

    def test_sets_field(self):
        assert write_bits(0x00, 4, 4, 0xC) == 0xC0

    def test_masks_wide_value(self):
        """0x1F does not fit in 4 bits; only 0xF is stored."""
        result = write_bits(0x00, 0, 4, 0x1F)
        assert result == 0x0F
        assert read_bits(result, 0, 4) < 16

    def test_wide_value_does_not_leak_into_neighbours(self):
        result = write_bits(0x00, 1, 3, 0xFF)
        assert result == 0x0E

    def test_bit_seven(self):
        assert write_bits(0x00, 7, 1, 1) == 0x80

    def test_write_then_read(self):
        register = 0x5A
        for value in range(8):
            assert read_bits(write_bits(register, 1, 3, value), 1, 3) == value

    def test_field_outside_byte(self):
        with pytest.raises(ProgrammingError):
            write_bits(0, 6, 3, 0)


class TestFieldMask:
    """Tests for field_mask()."""

    def test_masks(self):
        assert field_mask(0, 4) == 0x0F
        assert field_mask(1, 3) == 0x0E
        assert field_mask(7, 1) == 0x80

    def test_invalid(self):
        with pytest.raises(ProgrammingError):
            field_mask(5, 4)


# =============================================================================
# Field Table
# =============================================================================

class TestRegisterFields:
    """Tests for the REGISTER_FIELDS table."""

    def test_six_registers(self):
        assert REGISTER_NAMES == (
            "addr_1656", "addr_1662", "addr_166e", "addr_167a", "addr_1686", "addr_190f",
        )
        assert REGISTER_ADDRESSES["addr_166e"] == 0x166E

    def test_every_register_fully_covered(self):
        for register in REGISTER_NAMES:
            covered = 0
            for spec in fields_of(register):
                assert covered & spec.mask == 0
                covered |= spec.mask
            assert covered == 0xFF

    def test_field_names_unique(self):
        names = [spec.name for spec in REGISTER_FIELDS]
        assert len(names) == len(set(names))

    def test_multi_bit_fields(self):
        assert field_for("object_clipping")[1:] == ("addr_1656", 0, 4)
        assert field_for("sprite_clipping")[1:] == ("addr_1662", 0, 6)
        assert field_for("palette")[1:] == ("addr_166e", 1, 3)

    def test_flags(self):
        assert field_for("inedible").is_flag
        assert not field_for("palette").is_flag

    def test_fields_of_ordered_by_offset(self):
        offsets = [spec.offset for spec in fields_of("addr_166e")]
        assert offsets == sorted(offsets)

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            field_for("not_a_field")

    def test_spec_read_write(self):
        spec = field_for("palette")
        assert spec.read(spec.write(0x00, 5)) == 5
