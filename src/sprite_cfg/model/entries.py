"""
Auxiliary Entry Types
=====================

A CFG record owns two lists of small value objects:

**DisplayEntry** - how Lunar Magic shows the sprite in the level editor.
    An entry applies to sprites placed with a given extra bit at a given
    position inside the 16x16 block grid, which lets one sprite look
    different depending on where it was placed.

**CollectionEntry** - an item of Lunar Magic's custom sprite list. Each
    entry names a preset (extra bit plus four extra property bytes) the
    user can pick from the "insert sprite" window.

Entries do not know which record owns them. They notify their own
subscribers when a field changes; the owning list relays that to the
record.
"""

from dataclasses import dataclass, replace

from sprite_cfg.model.observable import Observable


# X and Y of a display entry are positions within a 16x16 block
DISPLAY_POSITION_MASK = 0x0F


def _as_byte(value: int) -> int:
    return int(value) & 0xFF


# =============================================================================
# Display Entry
# =============================================================================

@dataclass
class DisplayEntry(Observable):
    """
    Lunar Magic display entry.

    Attributes:
        description: Tooltip text shown in Lunar Magic
        x: Horizontal position selector (0-15, masked)
        y: Vertical position selector (0-15, masked)
        extra_bit: Entry applies to sprites placed with the extra bit set
        use_text: Draw the description text instead of tiles
    """
    description: str = ""
    x: int = 0
    y: int = 0
    extra_bit: bool = False
    use_text: bool = False

    def __setattr__(self, name: str, value) -> None:
        if name in ("x", "y"):
            value = int(value) & DISPLAY_POSITION_MASK
        elif name in ("extra_bit", "use_text"):
            value = bool(value)
        elif name == "description":
            value = str(value)
        object.__setattr__(self, name, value)
        self._notify(name)

    def unique_key(self) -> tuple[int, int, bool]:
        """Key that must be unique across a record's display entries."""
        return (self.x, self.y, self.extra_bit)

    def clone(self) -> "DisplayEntry":
        """Return an independent copy with no subscribers."""
        return replace(self)


# =============================================================================
# Collection Entry
# =============================================================================

@dataclass
class CollectionEntry(Observable):
    """
    Lunar Magic custom collection entry.

    Attributes:
        name: Name shown in the sprite list
        extra_bit: Insert the sprite with the extra bit set
        extra_property_1 .. extra_property_4: Extra bytes the sprite is
            inserted with (masked to 8 bits)
    """
    name: str = ""
    extra_bit: bool = False
    extra_property_1: int = 0
    extra_property_2: int = 0
    extra_property_3: int = 0
    extra_property_4: int = 0

    def __setattr__(self, name: str, value) -> None:
        if name.startswith("extra_property_"):
            value = _as_byte(value)
        elif name == "extra_bit":
            value = bool(value)
        elif name == "name":
            value = str(value)
        object.__setattr__(self, name, value)
        self._notify(name)

    @property
    def extra_properties(self) -> tuple[int, int, int, int]:
        return (
            self.extra_property_1,
            self.extra_property_2,
            self.extra_property_3,
            self.extra_property_4,
        )

    def clone(self) -> "CollectionEntry":
        """Return an independent copy with no subscribers."""
        return replace(self)
