"""
ROM Tweaker Codec
=================

Reads and patches the tweaker bytes of a vanilla sprite directly inside a
Super Mario World ROM image.

SMW keeps the initial value of each tweaker register in its own 201-entry
table in bank $07, one byte per vanilla sprite number:

    Register    SNES address    PC offset (no header)
    --------    ------------    ---------------------
    $1656       $07:F26C        0x3F26C
    $1662       $07:F335        0x3F335
    $166E       $07:F3FE        0x3F3FE
    $167A       $07:F4C7        0x3F4C7
    $1686       $07:F590        0x3F590
    $190F       $07:F659        0x3F659

Only these six bytes exist for a vanilla slot. Everything else in a
record (type, acts-like, extra bytes, asm file, Lunar Magic entries and
map16) is read back as its default and ignored when writing.

Copier Header
-------------
Dumps made with old copiers carry a 512-byte header in front of the ROM
data. With header_size=None the header is detected from the image
length: a length of 512 more than a multiple of 32 KiB has one.

Usage
-----
    >>> image = bytearray(Path("smw.smc").read_bytes())
    >>> record = read_from_image(image, 0x26)     # Thwomp
    >>> record.palette = 2
    >>> write_to_image(record, image, 0x26)
"""

from typing import Optional, Union
import logging

from sprite_cfg.errors import ImageTooSmallError, ProgrammingError, SlotIndexError
from sprite_cfg.model import REGISTER_NAMES, CfgRecord

logger = logging.getLogger(__name__)

# Number of vanilla sprite numbers ($00-$C8), and entries per tweaker table
SLOT_COUNT = 0xC9

COPIER_HEADER_SIZE = 0x200
ROM_BANK_SIZE = 0x8000

# Headerless PC offset of each tweaker table
TWEAKER_TABLES: dict[str, int] = {
    "addr_1656": 0x3F26C,
    "addr_1662": 0x3F335,
    "addr_166e": 0x3F3FE,
    "addr_167a": 0x3F4C7,
    "addr_1686": 0x3F590,
    "addr_190f": 0x3F659,
}

VANILLA_SPRITE_NAMES: tuple[str, ...] = (
    "Green Koopa, no shell",                        # 00
    "Red Koopa, no shell",
    "Blue Koopa, no shell",
    "Yellow Koopa, no shell",
    "Green Koopa",
    "Red Koopa",
    "Blue Koopa",
    "Yellow Koopa",
    "Green Koopa, flying left",                     # 08
    "Green bouncing Koopa",
    "Red vertical flying Koopa",
    "Red horizontal flying Koopa",
    "Yellow Koopa with wings",
    "Bob-omb",
    "Keyhole",
    "Goomba",
    "Bouncing Goomba with wings",                   # 10
    "Buzzy Beetle",
    "Unused",
    "Spiny",
    "Spiny falling",
    "Fish, horizontal",
    "Fish, vertical",
    "Fish, created from generator",
    "Surface jumping fish",                         # 18
    "Display text from level Message Box #1",
    "Classic Piranha Plant",
    "Bouncing football in place",
    "Bullet Bill",
    "Hopping flame",
    "Lakitu",
    "Magikoopa",
    "Magikoopa's magic",                            # 20
    "Moving coin",
    "Green vertical net Koopa",
    "Red vertical net Koopa",
    "Green horizontal net Koopa",
    "Red horizontal net Koopa",
    "Thwomp",
    "Thwimp",
    "Big Boo",                                      # 28
    "Koopa Kid",
    "Upside down Piranha Plant",
    "Sumo Brother's fire lightning",
    "Yoshi egg",
    "Baby green Yoshi",
    "Spike Top",
    "Portable spring board",
    "Dry Bones, throws bones",                      # 30
    "Bony Beetle",
    "Dry Bones, stay on ledge",
    "Fireball",
    "Boss fireball",
    "Green Yoshi",
    "Unused",
    "Boo",
    "Eerie",                                        # 38
    "Eerie, wave motion",
    "Urchin, fixed",
    "Urchin, wall detect",
    "Urchin, wall follow",
    "Rip Van Fish",
    "POW",
    "Para-Goomba",
    "Para-Bomb",                                    # 40
    "Dolphin, horizontal",
    "Dolphin2, horizontal",
    "Dolphin, vertical",
    "Torpedo Ted",
    "Directional coins",
    "Diggin' Chuck",
    "Swimming/Jumping fish",
    "Diggin' Chuck's rock",                         # 48
    "Growing/shrinking pipe end",
    "Goal Point Question Sphere",
    "Pipe dwelling Lakitu",
    "Exploding Block",
    "Ground dwelling Monty Mole",
    "Ledge dwelling Monty Mole",
    "Jumping Piranha Plant",
    "Jumping Piranha Plant, spit fire",             # 50
    "Ninji",
    "Moving ledge hole in ghost house",
    "Throw block sprite",
    "Climbing net door",
    "Checkerboard platform, horizontal",
    "Flying rock platform, horizontal",
    "Checkerboard platform, vertical",
    "Flying rock platform, vertical",               # 58
    "Turn block bridge, horizontal and vertical",
    "Turn block bridge, horizontal",
    "Brown platform floating in water",
    "Checkerboard platform that falls",
    "Orange platform floating in water",
    "Orange platform, goes on forever",
    "Brown platform on a chain",
    "Flat green switch palace switch",              # 60
    "Floating skulls",
    "Brown platform, line-guided",
    "Checker/brown platform, line-guided",
    "Rope mechanism, line-guided",
    "Chainsaw, line-guided",
    "Upside down chainsaw, line-guided",
    "Grinder, line-guided",
    "Fuzz ball, line-guided",                       # 68
    "Unused",
    "Coin game cloud",
    "Spring board, left wall",
    "Spring board, right wall",
    "Invisible solid block",
    "Dino Rhino",
    "Dino Torch",
    "Pokey",                                        # 70
    "Super Koopa, red cape",
    "Super Koopa, yellow cape",
    "Super Koopa, feather",
    "Mushroom",
    "Flower",
    "Star",
    "Feather",
    "1-Up",                                         # 78
    "Growing Vine",
    "Firework",
    "Goal Point",
    "Princess Peach",
    "Balloon",
    "Flying Red coin",
    "Flying yellow 1-Up",
    "Key",                                          # 80
    "Changing item from translucent block",
    "Bonus game sprite",
    "Left flying question block",
    "Flying question block",
    "Unused",
    "Wiggler",
    "Lakitu's cloud",
    "Unused (Winged cage sprite)",                  # 88
    "Layer 3 smash",
    "Bird from Yoshi's house",
    "Puff of smoke from Yoshi's house",
    "Fireplace smoke/exit from side screen",
    "Ghost house exit sign and door",
    "Invisible \"Warp Hole\" blocks",
    "Scale platforms",
    "Large green gas bubble",                       # 90
    "Chargin' Chuck",
    "Splittin' Chuck",
    "Bouncin' Chuck",
    "Whistlin' Chuck",
    "Clapin' Chuck",
    "Unused (Chargin' Chuck clone)",
    "Puntin' Chuck",
    "Pitchin' Chuck",                               # 98
    "Volcano Lotus",
    "Sumo Brother",
    "Hammer Brother",
    "Flying blocks for Hammer Brother",
    "Bubble with sprite",
    "Ball and Chain",
    "Banzai Bill",
    "Activates Bowser scene",                       # A0
    "Bowser's bowling ball",
    "MechaKoopa",
    "Grey platform on chain",
    "Floating Spike ball",
    "Fuzzball/Sparky, ground-guided",
    "HotHead, ground-guided",
    "Iggy's ball",
    "Blargg",                                       # A8
    "Reznor",
    "Fishbone",
    "Rex",
    "Wooden Spike, moving down and up",
    "Wooden Spike, moving up/down first",
    "Fishin' Boo",
    "Boo Block",
    "Reflecting stream of Boo Buddies",             # B0
    "Creating/Eating block",
    "Falling Spike",
    "Bowser statue fireball",
    "Grinder, non-line-guided",
    "Sinking fireball used in boss battles",
    "Reflecting fireball",
    "Carrot Top lift, upper right",
    "Carrot Top lift, upper left",                  # B8
    "Info Box",
    "Timed lift",
    "Grey moving castle block",
    "Bowser statue",
    "Sliding Koopa without a shell",
    "Swooper bat",
    "Mega Mole",
    "Grey platform on lava",                        # C0
    "Flying grey turn blocks",
    "Blurp fish",
    "Porcu-Puffer fish",
    "Grey platform that falls",
    "Big Boo Boss",
    "Dark room with spot light",
    "Invisible mushroom",
    "Light switch block for dark room",             # C8
)

if len(VANILLA_SPRITE_NAMES) != SLOT_COUNT:
    raise ProgrammingError(
        f"VANILLA_SPRITE_NAMES has {len(VANILLA_SPRITE_NAMES)} names, expected {SLOT_COUNT}"
    )

ImageBuffer = Union[bytes, bytearray, memoryview]


# =============================================================================
# Address Helpers
# =============================================================================

def snes_to_pc(address: int, header_size: int = 0) -> int:
    """Convert a LoROM SNES address to a file offset."""
    return (((address & 0x7F0000) >> 1) | (address & 0x7FFF)) + header_size


def pc_to_snes(offset: int, header_size: int = 0) -> int:
    """Convert a file offset to a LoROM SNES address (bank mirror $80+)."""
    offset -= header_size
    return ((offset << 1) & 0x7F0000) | (offset & 0x7FFF) | 0x808000


def detect_header(image: ImageBuffer) -> int:
    """Return the copier header size implied by the image length."""
    return COPIER_HEADER_SIZE if len(image) % ROM_BANK_SIZE == COPIER_HEADER_SIZE else 0


def _check_slot(slot: int) -> None:
    if isinstance(slot, bool) or not isinstance(slot, int) or not 0 <= slot < SLOT_COUNT:
        raise SlotIndexError(slot, SLOT_COUNT)


def slot_offsets(slot: int, header_size: int = 0) -> dict[str, int]:
    """
    Return the file offset of each tweaker byte of a slot.

    Raises:
        SlotIndexError: If slot is not in 0..SLOT_COUNT-1
    """
    _check_slot(slot)
    return {name: TWEAKER_TABLES[name] + slot + header_size for name in REGISTER_NAMES}


def required_image_size(slot: int, header_size: int = 0) -> int:
    """Smallest image length that holds every tweaker byte of a slot."""
    return max(slot_offsets(slot, header_size).values()) + 1


def _resolve(image: ImageBuffer, slot: int, header_size: Optional[int]) -> dict[str, int]:
    _check_slot(slot)
    if header_size is None:
        header_size = detect_header(image)
    required = required_image_size(slot, header_size)
    if len(image) < required:
        raise ImageTooSmallError(slot, required, len(image))
    return slot_offsets(slot, header_size)


# =============================================================================
# Read / Write
# =============================================================================

def read_from_image(
    image: ImageBuffer,
    slot: int,
    header_size: Optional[int] = None,
) -> CfgRecord:
    """
    Read the tweaker bytes of a vanilla slot into a new record.

    Args:
        image: ROM image contents
        slot: Vanilla sprite number, 0..SLOT_COUNT-1
        header_size: Copier header size, None to detect it

    Raises:
        SlotIndexError: If slot is out of range
        ImageTooSmallError: If the image ends before the slot's last byte
    """
    offsets = _resolve(image, slot, header_size)
    record = CfgRecord()
    for name, offset in offsets.items():
        record.set_register(name, image[offset])
    logger.debug(f"Read slot 0x{slot:02X} ({VANILLA_SPRITE_NAMES[slot]})")
    return record


def write_to_image(
    record: CfgRecord,
    image: Union[bytearray, memoryview],
    slot: int,
    header_size: Optional[int] = None,
) -> Union[bytearray, memoryview]:
    """
    Patch the six tweaker bytes of a vanilla slot in place.

    The image is never resized and no byte outside the slot's six table
    entries changes. All checks run before the first write.

    Returns:
        The same image object

    Raises:
        SlotIndexError: If slot is out of range
        ImageTooSmallError: If the image ends before the slot's last byte
        TypeError: If the image is not writable
    """
    if isinstance(image, memoryview):
        if image.readonly:
            raise TypeError("image memoryview is read-only")
    elif not isinstance(image, bytearray):
        raise TypeError(f"image must be a bytearray or memoryview, not {type(image).__name__}")

    offsets = _resolve(image, slot, header_size)
    for name, offset in offsets.items():
        image[offset] = record.get_register(name)
    logger.debug(f"Patched slot 0x{slot:02X} ({VANILLA_SPRITE_NAMES[slot]})")
    return image
