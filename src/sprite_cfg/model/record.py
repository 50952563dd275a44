"""
CFG Record Model
================

In-memory representation of one custom sprite CFG file.

Record Contents
---------------
    Field               Size    Description
    -----               ----    -----------
    type                1       0 = normal/tweak, 1 = custom, 3 = generator/shooter
    act_like            1       Vanilla sprite whose behaviour is borrowed
    addr_1656..190F     6       Tweaker registers (see sprite_cfg.model.bits)
    extra_property_1/2  2       Free bytes the sprite code reads back
    byte_count          1       Extra bytes in a level when the extra bit is clear
    extra_byte_count    1       Extra bytes in a level when the extra bit is set
    asm_file            str     Source file of the sprite code
    display_entries     list    Lunar Magic display entries
    collection_entries  list    Lunar Magic custom collection entries
    map16               block   Custom map16 tiles (page 3)

Every packed property of the tweaker registers is also available as a
typed attribute, e.g. ``record.palette`` or ``record.inedible``. These
attributes are generated from REGISTER_FIELDS.

Change Notification
-------------------
    >>> record = CfgRecord()
    >>> record.subscribe(lambda source, name: print("changed", name))
    >>> record.palette = 5
    changed palette

Setters mask their value and never raise for out-of-range integers; a
type of 0 disables the type-dependent fields without erasing them.
"""

from collections.abc import MutableSequence
from contextlib import contextmanager
from enum import IntEnum
from typing import Callable, Generic, Iterable, Iterator, TypeVar, Union, overload

from sprite_cfg.model.bits import REGISTER_FIELDS, REGISTER_NAMES, RegisterField
from sprite_cfg.model.entries import CollectionEntry, DisplayEntry
from sprite_cfg.model.map16 import Map16Block
from sprite_cfg.model.observable import Observable


# =============================================================================
# Sprite Type
# =============================================================================

class SpriteType(IntEnum):
    """Known values of the type discriminator."""
    NORMAL = 0
    CUSTOM = 1
    GENERATOR_SHOOTER = 3

    def get_description(self) -> str:
        descriptions = {
            SpriteType.NORMAL: "Normal (tweak only)",
            SpriteType.CUSTOM: "Custom",
            SpriteType.GENERATOR_SHOOTER: "Generator/Shooter",
        }
        return descriptions[self]


# Byte-sized fields, in the order the CFG text format lists them
BYTE_FIELDS: tuple[str, ...] = (
    "type",
    "act_like",
    *REGISTER_NAMES,
    "extra_property_1",
    "extra_property_2",
    "byte_count",
    "extra_byte_count",
)

# Fields disabled (but kept) while type is 0
TYPE_DEPENDENT_FIELDS: tuple[str, ...] = (
    "extra_property_1",
    "extra_property_2",
    "byte_count",
    "extra_byte_count",
    "asm_file",
)


# =============================================================================
# Entry List
# =============================================================================

E = TypeVar("E", DisplayEntry, CollectionEntry)


class EntryList(MutableSequence, Generic[E]):
    """
    Ordered list of entries that reports every change to its owner.

    Field edits on a contained entry are relayed as well, so the owner
    sees ``record.display_entries[0].x = 3`` as a change.
    """

    def __init__(self, entry_type: type, name: str, notify: Callable[[str], None]):
        self._entry_type = entry_type
        self._name = name
        self._owner_notify = notify
        self._items: list[E] = []

    # -------------------------------------------------------------------------
    # Sequence protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> E: ...
    @overload
    def __getitem__(self, index: slice) -> list[E]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            values: list[E] = []
            for v in value:
                values.append(self._check(v, values))
            for old in self._items[index]:
                old.unsubscribe(self._entry_changed)
            self._items[index] = values
            for new in values:
                new.subscribe(self._entry_changed)
        else:
            value = self._check(value)
            self._items[index].unsubscribe(self._entry_changed)
            self._items[index] = value
            value.subscribe(self._entry_changed)
        self._owner_notify(self._name)

    def __delitem__(self, index) -> None:
        removed = self._items[index]
        for entry in removed if isinstance(index, slice) else [removed]:
            entry.unsubscribe(self._entry_changed)
        del self._items[index]
        self._owner_notify(self._name)

    def insert(self, index: int, value: E) -> None:
        value = self._check(value)
        self._items.insert(index, value)
        value.subscribe(self._entry_changed)
        self._owner_notify(self._name)

    def __iter__(self) -> Iterator[E]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EntryList):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"EntryList({self._items!r})"

    # -------------------------------------------------------------------------
    # Editor operations
    # -------------------------------------------------------------------------

    def remove_at(self, index: int) -> E:
        """Remove and return the entry at index."""
        return self.pop(index)

    def clone_and_append(self, index: int) -> E:
        """Append an independent copy of the entry at index and return it."""
        copy = self._items[index].clone()
        self.append(copy)
        return copy

    def replace_all(self, entries: Iterable[E]) -> None:
        """Replace the whole list, notifying once."""
        self[:] = list(entries)

    def _check(self, value: E, pending: Iterable[E] = ()) -> E:
        if not isinstance(value, self._entry_type):
            raise TypeError(
                f"{self._name} holds {self._entry_type.__name__}, "
                f"not {type(value).__name__}"
            )
        if _owned_by_list(value) or any(item is value for item in pending):
            # An entry belongs to one list position; store a copy instead.
            value = value.clone()
        return value

    def _entry_changed(self, source: object, name: str) -> None:
        self._owner_notify(self._name)


def _owned_by_list(entry: Observable) -> bool:
    """True if some EntryList already relays changes of this entry."""
    return any(
        isinstance(getattr(callback, "__self__", None), EntryList)
        for callback in entry._subscribers()
    )


# =============================================================================
# Generated Accessors
# =============================================================================

class _ByteField:
    """Descriptor for a byte-sized field stored in CfgRecord._values."""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return obj._values[self.name]

    def __set__(self, obj, value: int) -> None:
        obj._values[self.name] = int(value) & 0xFF
        obj._notify(self.name)


class _PackedField:
    """Descriptor for one packed property of a tweaker register."""

    def __init__(self, spec: RegisterField):
        self.spec = spec
        self.__doc__ = (
            f"Bits {spec.offset}-{spec.offset + spec.width - 1} of {spec.register}"
            if spec.width > 1 else f"Bit {spec.offset} of {spec.register}"
        )

    def __get__(self, obj, objtype=None) -> Union[int, bool, "_PackedField"]:
        if obj is None:
            return self
        value = self.spec.read(obj._values[self.spec.register])
        return bool(value) if self.spec.is_flag else value

    def __set__(self, obj, value: int) -> None:
        register = self.spec.register
        obj._values[register] = self.spec.write(obj._values[register], value)
        obj._notify(self.spec.name)


# =============================================================================
# CFG Record
# =============================================================================

class CfgRecord(Observable):
    """
    One custom sprite CFG record.

    A new record is all zero: type 0, empty asm file name, no entries and
    an empty map16 block.
    """

    type = _ByteField()
    act_like = _ByteField()
    addr_1656 = _ByteField()
    addr_1662 = _ByteField()
    addr_166e = _ByteField()
    addr_167a = _ByteField()
    addr_1686 = _ByteField()
    addr_190f = _ByteField()
    extra_property_1 = _ByteField()
    extra_property_2 = _ByteField()
    byte_count = _ByteField()
    extra_byte_count = _ByteField()

    def __init__(self) -> None:
        self._muted = 0
        self._values: dict[str, int] = dict.fromkeys(BYTE_FIELDS, 0)
        self._asm_file = ""
        self._display_entries: EntryList[DisplayEntry] = EntryList(
            DisplayEntry, "display_entries", self._notify
        )
        self._collection_entries: EntryList[CollectionEntry] = EntryList(
            CollectionEntry, "collection_entries", self._notify
        )
        self._map16 = Map16Block()
        self._map16.subscribe(lambda source, name: self._notify(name))

    # =========================================================================
    # Scalars
    # =========================================================================

    @property
    def asm_file(self) -> str:
        return self._asm_file

    @asm_file.setter
    def asm_file(self, value: str) -> None:
        # A file name occupies one line of the CFG text format
        self._asm_file = "".join(str(value).splitlines()).strip()
        self._notify("asm_file")

    @property
    def sprite_type(self) -> Union[SpriteType, None]:
        """The type as a SpriteType, or None for an unknown value."""
        try:
            return SpriteType(self.type)
        except ValueError:
            return None

    @property
    def type_dependent_enabled(self) -> bool:
        """False while type is 0; the fields keep their values regardless."""
        return self.type != SpriteType.NORMAL

    def get_register(self, name: str) -> int:
        return self._values[name]

    def set_register(self, name: str, value: int) -> None:
        if name not in REGISTER_NAMES:
            raise KeyError(name)
        setattr(self, name, value)

    # =========================================================================
    # Collections
    # =========================================================================

    @property
    def display_entries(self) -> EntryList[DisplayEntry]:
        return self._display_entries

    @property
    def collection_entries(self) -> EntryList[CollectionEntry]:
        return self._collection_entries

    @property
    def map16(self) -> Map16Block:
        return self._map16

    # =========================================================================
    # Whole-record operations
    # =========================================================================

    def clear(self) -> None:
        """Reset to the all-default state and notify once with "*"."""
        with self._batch():
            for name in BYTE_FIELDS:
                self._values[name] = 0
            self._asm_file = ""
            self._display_entries.clear()
            self._collection_entries.clear()
            self._map16.clear()
        self._notify("*")

    def copy_from(self, other: "CfgRecord") -> None:
        """Replace every field with an independent copy of other's."""
        with self._batch():
            self._values.update(other._values)
            self._asm_file = other._asm_file
            self._display_entries.replace_all(e.clone() for e in other.display_entries)
            self._collection_entries.replace_all(e.clone() for e in other.collection_entries)
            self._map16.set_data(other.map16.significant_data())
        self._notify("*")

    def clone(self) -> "CfgRecord":
        """Return an independent copy with no subscribers."""
        copy = CfgRecord()
        copy.copy_from(self)
        return copy

    def fields(self) -> dict[str, Union[int, str]]:
        """Return every byte field and the asm file name, in format order."""
        result: dict[str, Union[int, str]] = dict(self._values)
        result["asm_file"] = self._asm_file
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CfgRecord):
            return NotImplemented
        return (
            self.fields() == other.fields()
            and self._display_entries == other._display_entries
            and self._collection_entries == other._collection_entries
            and self._map16 == other._map16
        )

    def __repr__(self) -> str:
        return (
            f"CfgRecord(type={self.type}, act_like=0x{self.act_like:02X}, "
            f"asm_file={self._asm_file!r}, "
            f"displays={len(self._display_entries)}, "
            f"collection={len(self._collection_entries)})"
        )

    # =========================================================================
    # Notification
    # =========================================================================

    @contextmanager
    def _batch(self):
        self._muted += 1
        try:
            yield
        finally:
            self._muted -= 1

    def _notify(self, name: str) -> None:
        if not self._muted:
            super()._notify(name)


for _spec in REGISTER_FIELDS:
    setattr(CfgRecord, _spec.name, _PackedField(_spec))
del _spec
