"""
ROM Tweaker Codec Tests
=======================

Tests for sprite_cfg.codec.rom: slot addressing, header detection, and
in-place patching of the vanilla tweaker tables.
"""

import pytest

from sprite_cfg.codec.rom import (
    COPIER_HEADER_SIZE,
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
from sprite_cfg.errors import ImageTooSmallError, SlotIndexError
from sprite_cfg.model import REGISTER_NAMES, CfgRecord


@pytest.fixture
def tweaked() -> CfgRecord:
    """A record with only the tweaker bytes set."""
    record = CfgRecord()
    for value, name in enumerate(REGISTER_NAMES, start=0xA1):
        record.set_register(name, value)
    return record


# =============================================================================
# Constants and Addressing
# =============================================================================

class TestAddressing:
    """Tests for the table constants and address helpers."""

    def test_slot_count(self):
        assert SLOT_COUNT == 201
        assert len(VANILLA_SPRITE_NAMES) == SLOT_COUNT

    def test_known_names(self):
        assert VANILLA_SPRITE_NAMES[0x00] == "Green Koopa, no shell"
        assert VANILLA_SPRITE_NAMES[0x26] == "Thwomp"
        assert VANILLA_SPRITE_NAMES[0xC8] == "Light switch block for dark room"

    def test_tables_are_consecutive(self):
        offsets = [TWEAKER_TABLES[name] for name in REGISTER_NAMES]
        assert offsets[0] == 0x3F26C
        assert all(b - a == SLOT_COUNT for a, b in zip(offsets, offsets[1:]))

    def test_snes_to_pc(self):
        assert snes_to_pc(0x07F26C) == 0x3F26C
        assert snes_to_pc(0x87F26C) == 0x3F26C
        assert snes_to_pc(0x07F26C, COPIER_HEADER_SIZE) == 0x3F46C

    def test_pc_to_snes(self):
        assert pc_to_snes(0x3F26C) == 0x87F26C
        assert snes_to_pc(pc_to_snes(0x3F659)) == 0x3F659

    def test_slot_offsets(self):
        offsets = slot_offsets(0x26)
        assert offsets["addr_1656"] == 0x3F26C + 0x26
        assert offsets["addr_190f"] == 0x3F659 + 0x26

    def test_slot_offsets_with_header(self):
        assert slot_offsets(0, 0x200)["addr_1656"] == 0x3F46C

    def test_required_image_size(self):
        assert required_image_size(0) == 0x3F65A
        assert required_image_size(SLOT_COUNT - 1) == 0x3F659 + 0xC8 + 1
        assert required_image_size(0, 0x200) == 0x3F65A + 0x200

    def test_detect_header(self, rom_image, headered_rom_image):
        assert detect_header(rom_image) == 0
        assert detect_header(headered_rom_image) == COPIER_HEADER_SIZE


# =============================================================================
# Slot Checks
# =============================================================================

class TestSlotIndex:
    """Tests for slot range checks."""

    def test_one_past_last_slot(self, rom_image, tweaked):
        original = bytes(rom_image)
        with pytest.raises(SlotIndexError):
            write_to_image(tweaked, rom_image, SLOT_COUNT)
        assert rom_image == original

    def test_negative_slot(self, rom_image):
        with pytest.raises(SlotIndexError):
            read_from_image(rom_image, -1)

    @pytest.mark.parametrize("slot", ["1", 1.0, True, None])
    def test_non_integer_slot(self, rom_image, slot):
        with pytest.raises(SlotIndexError):
            read_from_image(rom_image, slot)

    def test_slot_checked_before_image(self):
        """An out-of-range slot is reported even for an empty image."""
        with pytest.raises(SlotIndexError):
            read_from_image(b"", SLOT_COUNT)

    def test_last_slot_valid(self, rom_image):
        read_from_image(rom_image, SLOT_COUNT - 1)


# =============================================================================
# Read
# =============================================================================

class TestRead:
    """Tests for read_from_image()."""

    def test_reads_table_bytes(self, rom_image):
        for name in REGISTER_NAMES:
            rom_image[TWEAKER_TABLES[name] + 0x26] = 0x5A
        record = read_from_image(rom_image, 0x26)
        for name in REGISTER_NAMES:
            assert record.get_register(name) == 0x5A

    def test_absent_fields_default(self, rom_image):
        record = read_from_image(rom_image, 0x10)
        assert record.type == 0
        assert record.act_like == 0
        assert record.asm_file == ""
        assert len(record.display_entries) == 0
        assert record.map16.is_empty()

    def test_headered_image(self, rom_image, headered_rom_image):
        assert read_from_image(headered_rom_image, 0x30) == read_from_image(rom_image, 0x30)

    def test_explicit_header_overrides(self, headered_rom_image, rom_image):
        record = read_from_image(headered_rom_image, 0x30, header_size=0)
        expected = CfgRecord()
        for name in REGISTER_NAMES:
            expected.set_register(name, headered_rom_image[TWEAKER_TABLES[name] + 0x30])
        assert record == expected

    def test_too_small(self):
        with pytest.raises(ImageTooSmallError) as exc_info:
            read_from_image(bytes(0x3F65A - 1), 0)
        assert exc_info.value.required == 0x3F65A
        assert exc_info.value.actual == 0x3F659

    def test_accepts_bytes(self, rom_image):
        read_from_image(bytes(rom_image), 0)


# =============================================================================
# Write
# =============================================================================

class TestWrite:
    """Tests for write_to_image()."""

    def test_returns_same_image(self, rom_image, tweaked):
        assert write_to_image(tweaked, rom_image, 0) is rom_image

    def test_patch_locality(self, rom_image, tweaked):
        original = bytes(rom_image)
        slot = 0x26
        write_to_image(tweaked, rom_image, slot)
        touched = set(slot_offsets(slot).values())
        assert len(rom_image) == len(original)
        for offset, (before, after) in enumerate(zip(original, rom_image)):
            if offset not in touched:
                assert before == after, f"byte 0x{offset:X} changed"
        for name, offset in slot_offsets(slot).items():
            assert rom_image[offset] == tweaked.get_register(name)

    def test_round_trip(self, rom_image, tweaked):
        for slot in (0, 0x26, SLOT_COUNT - 1):
            assert read_from_image(write_to_image(tweaked, rom_image, slot), slot) == tweaked

    def test_non_rom_fields_ignored(self, rom_image, sample_record):
        write_to_image(sample_record, rom_image, 5)
        record = read_from_image(rom_image, 5)
        for name in REGISTER_NAMES:
            assert record.get_register(name) == sample_record.get_register(name)
        assert record.asm_file == ""

    def test_headered_write(self, headered_rom_image, tweaked):
        write_to_image(tweaked, headered_rom_image, 1)
        assert headered_rom_image[0x3F26C + 1 + COPIER_HEADER_SIZE] == 0xA1

    def test_image_one_byte_short(self, tweaked):
        image = bytearray(required_image_size(SLOT_COUNT - 1) - 1)
        with pytest.raises(ImageTooSmallError):
            write_to_image(tweaked, image, SLOT_COUNT - 1)
        assert image == bytearray(len(image))

    def test_exact_size_image(self, tweaked):
        image = bytearray(required_image_size(0))
        write_to_image(tweaked, image, 0)
        assert image[-1] == tweaked.addr_190f

    def test_memoryview(self, rom_image, tweaked):
        view = memoryview(rom_image)
        write_to_image(tweaked, view, 2)
        assert rom_image[0x3F26C + 2] == 0xA1

    def test_immutable_image_rejected(self, rom_image, tweaked):
        with pytest.raises(TypeError):
            write_to_image(tweaked, bytes(rom_image), 0)
        with pytest.raises(TypeError):
            write_to_image(tweaked, memoryview(bytes(rom_image)), 0)
