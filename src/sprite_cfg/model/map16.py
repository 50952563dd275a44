"""
Custom Map16 Block
==================

A CFG record may carry its own map16 tiles for Lunar Magic to draw the
sprite with. They live on map16 page 3 (tiles $300-$3FF). Each map16 tile
is 8 bytes: four 8x8 tiles (top-left, bottom-left, top-right,
bottom-right), two bytes each.

The block always has its full capacity allocated. Only the prefix up to
the last non-empty tile is significant; the codecs store that prefix and
treat the rest as zero.
"""

from typing import Union

from sprite_cfg.errors import Map16CapacityError
from sprite_cfg.model.observable import Observable


MAP16_TILE_SIZE = 8
MAP16_TILE_COUNT = 0x100
MAP16_FIRST_TILE = 0x300
MAP16_CAPACITY = MAP16_TILE_SIZE * MAP16_TILE_COUNT


class Map16Block(Observable):
    """Fixed-capacity map16 buffer owned by a CfgRecord. Mutations notify."""

    CAPACITY = MAP16_CAPACITY

    def __init__(self, data: Union[bytes, bytearray, None] = None):
        self._data = bytearray(self.CAPACITY)
        if data:
            self.set_data(data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Map16Block):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"Map16Block(significant={self.significant_length} bytes)"

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    @property
    def significant_length(self) -> int:
        """Length of the prefix ending with the last non-empty tile."""
        end = len(self._data.rstrip(b"\x00"))
        remainder = end % MAP16_TILE_SIZE
        if remainder:
            end += MAP16_TILE_SIZE - remainder
        return end

    def significant_data(self) -> bytes:
        """Return the significant prefix (empty when no tile is used)."""
        return bytes(self._data[:self.significant_length])

    def is_empty(self) -> bool:
        return self.significant_length == 0

    def set_data(self, data: Union[bytes, bytearray]) -> None:
        """
        Replace the block contents.

        The data is copied to the start of the block and the rest is
        zeroed.

        Raises:
            Map16CapacityError: If data is longer than the block
        """
        if len(data) > self.CAPACITY:
            raise Map16CapacityError(len(data), self.CAPACITY)
        self._data[:] = bytes(data) + bytes(self.CAPACITY - len(data))
        self._notify("map16")

    def clear(self) -> None:
        self._data[:] = bytes(self.CAPACITY)
        self._notify("map16")

    def get_tile(self, tile: int) -> bytes:
        """
        Return the 8 bytes of one tile.

        Args:
            tile: Map16 tile number, $300-$3FF
        """
        start = self._tile_offset(tile)
        return bytes(self._data[start:start + MAP16_TILE_SIZE])

    def set_tile(self, tile: int, data: bytes) -> None:
        """Replace the 8 bytes of one tile."""
        if len(data) != MAP16_TILE_SIZE:
            raise ValueError(f"a map16 tile is {MAP16_TILE_SIZE} bytes, got {len(data)}")
        start = self._tile_offset(tile)
        self._data[start:start + MAP16_TILE_SIZE] = data
        self._notify("map16")

    def _tile_offset(self, tile: int) -> int:
        index = tile - MAP16_FIRST_TILE
        if not 0 <= index < MAP16_TILE_COUNT:
            raise ValueError(
                f"map16 tile ${tile:03X} is outside "
                f"${MAP16_FIRST_TILE:03X}-${MAP16_FIRST_TILE + MAP16_TILE_COUNT - 1:03X}"
            )
        return index * MAP16_TILE_SIZE
