"""
Sprite CFG - Test Configuration
===============================

Shared fixtures for the sprite_cfg test suite.

It provides:
- A clean default configuration for every test
- A fully populated sample record
- Blank ROM images with and without a copier header
"""

import pytest

from sprite_cfg.codec.rom import COPIER_HEADER_SIZE
from sprite_cfg.config import CfgConfig, set_config
from sprite_cfg.model import CfgRecord, CollectionEntry, DisplayEntry

# Smallest LoROM size that holds every tweaker table (bank $07 included)
ROM_SIZE = 0x80000


@pytest.fixture(autouse=True)
def default_config():
    """Run every test with the built-in defaults, not the environment."""
    config = CfgConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def sample_record() -> CfgRecord:
    """
    A record with every field set to a distinct non-default value.

    Registers: 10 40 01 11 01 00, i.e. object clipping 0 with
    "can be jumped on", sprite clipping 0 with "use shell as death
    frame", second graphics page, etc.
    """
    record = CfgRecord()
    record.type = 1
    record.act_like = 0x36
    for name, value in zip(
        ("addr_1656", "addr_1662", "addr_166e", "addr_167a", "addr_1686", "addr_190f"),
        (0x10, 0x40, 0x01, 0x11, 0x01, 0x00),
    ):
        record.set_register(name, value)
    record.extra_property_1 = 0x12
    record.extra_property_2 = 0xAB
    record.byte_count = 2
    record.extra_byte_count = 3
    record.asm_file = "thwomp_custom.asm"
    record.display_entries.append(
        DisplayEntry(description="Thwomp, falls down", x=0, y=0, extra_bit=False, use_text=False)
    )
    record.display_entries.append(
        DisplayEntry(description="Angry\nThwomp", x=5, y=3, extra_bit=True, use_text=True)
    )
    record.collection_entries.append(
        CollectionEntry(
            name="Thwomp (fast)",
            extra_bit=True,
            extra_property_1=0x01,
            extra_property_2=0x02,
            extra_property_3=0xFE,
            extra_property_4=0xFF,
        )
    )
    record.map16.set_tile(0x300, bytes([0x80, 0x21, 0x81, 0x21, 0x90, 0x21, 0x91, 0x21]))
    record.map16.set_tile(0x302, bytes([0xA0, 0x31, 0xA1, 0x31, 0xB0, 0x31, 0xB1, 0x31]))
    return record


@pytest.fixture
def rom_image() -> bytearray:
    """Headerless ROM image filled with a recognisable pattern."""
    return bytearray((i * 7) & 0xFF for i in range(ROM_SIZE))


@pytest.fixture
def headered_rom_image(rom_image: bytearray) -> bytearray:
    """The same image behind a 512-byte copier header."""
    return bytearray(COPIER_HEADER_SIZE) + rom_image
