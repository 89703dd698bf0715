"""Tagged values: the self-describing data model carried by every protocol.

The variant set is closed: `Scalar`, `List`, `Set`, `Map` and `Struct`. Each
variant exposes its type tag and seven typed accessors, of which exactly one
succeeds. The others raise a `ProtocolError` of kind INVALID_DATA; a value is
never coerced into another shape.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Self, TypeVar

import msgspec
from msgspec import UNSET, UnsetType
from msgspec.structs import force_setattr

from . import errors
from .ttype import SCALAR_TYPES, MessageType, TType

K = TypeVar('K')
V = TypeVar('V')
T = TypeVar('T')

Payload = bool | int | float | str


def _expected(shape: str) -> errors.ProtocolError:
    return errors.ProtocolError.invalid(f'expected {shape} value')


class _Typed(msgspec.Struct, frozen=True):
    """Typed accessors, resolved against the value returned by `_held`.

    Subclasses define `_held`: a value returns itself, while a field or
    message returns the value it carries.
    """

    @property
    def bool_value(self) -> bool:
        match self._held:
            case Scalar(TType.BOOL) as scalar:
                return scalar.get()
        raise _expected('boolean')

    @property
    def number_value(self) -> int | float:
        match self._held:
            case Scalar(TType.I08 | TType.I16 | TType.I32 | TType.I64 | TType.DOUBLE) as scalar:
                return scalar.get()
        raise _expected('number')

    @property
    def string_value(self) -> str:
        match self._held:
            case Scalar(TType.STRING) as scalar:
                return scalar.get()
        raise _expected('string')

    @property
    def list_value(self) -> List:
        match self._held:
            case List() as value:
                return value
        raise _expected('list')

    @property
    def map_value(self) -> Map:
        match self._held:
            case Map() as value:
                return value
        raise _expected('map')

    @property
    def set_value(self) -> Set:
        match self._held:
            case Set() as value:
                return value
        raise _expected('set')

    @property
    def struct_value(self) -> Struct:
        match self._held:
            case Struct() as value:
                return value
        raise _expected('struct')


class Value(_Typed, frozen=True):
    """Base class for the tagged value variants."""

    @property
    def _held(self) -> Value:
        return self

    def as_field(self) -> Field:
        """Wrap this value in a field carrying its own type tag."""
        return Field(self.value_type, self)


class Scalar(Value, frozen=True):
    """A boolean, number or string, possibly declared but unset."""

    value_type: TType
    value: Payload | UnsetType = UNSET

    def __post_init__(self) -> None:
        try:
            value_type = TType(self.value_type)
        except ValueError:
            value_type = None
        if value_type not in SCALAR_TYPES:
            raise errors.ProtocolError.invalid(f'unsupported scalar type ({self.value_type})')
        force_setattr(self, 'value_type', value_type)

    @property
    def is_set(self) -> bool:
        return self.value is not UNSET

    def get(self) -> Any:
        """Return the payload, raising if it is unset."""
        if self.value is UNSET:
            raise errors.ProtocolError.required()
        return self.value


def new_bool(value: bool) -> Scalar:
    return Scalar(TType.BOOL, value)


def new_byte(value: int) -> Scalar:
    return Scalar(TType.BYTE, value)


def new_i08(value: int) -> Scalar:
    return Scalar(TType.I08, value)


def new_i16(value: int) -> Scalar:
    return Scalar(TType.I16, value)


def new_i32(value: int) -> Scalar:
    return Scalar(TType.I32, value)


def new_i64(value: int) -> Scalar:
    return Scalar(TType.I64, value)


def new_double(value: float) -> Scalar:
    return Scalar(TType.DOUBLE, value)


def new_string(value: str) -> Scalar:
    return Scalar(TType.STRING, value)


class _Items(Value, frozen=True):
    item_type: TType
    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        force_setattr(self, 'item_type', TType(self.item_type))
        force_setattr(self, 'items', tuple(self.items))

    def map(self, f: Callable[[Value], T]) -> list[T]:
        return [f(item) for item in self.items]

    @classmethod
    def from_items(cls, item_type: TType, items: Iterable[T], f: Callable[[T], Value]) -> Self:
        """Build a container by converting each of `items` with `f`."""
        return cls(item_type, tuple(f(item) for item in items))


class List(_Items, frozen=True):
    """An ordered sequence of values declared to share `item_type`."""

    @property
    def value_type(self) -> TType:
        return TType.LIST


class Set(_Items, frozen=True):
    """Like `List`, but unordered. Uniqueness is the producer's concern."""

    @property
    def value_type(self) -> TType:
        return TType.SET


class MapEntry(msgspec.Struct, frozen=True):
    key: Value
    value: Value


class Map(Value, frozen=True):
    """Ordered key/value entries with declared key and item tags."""

    key_type: TType
    item_type: TType
    entries: tuple[MapEntry, ...] = ()

    def __post_init__(self) -> None:
        force_setattr(self, 'key_type', TType(self.key_type))
        force_setattr(self, 'item_type', TType(self.item_type))
        force_setattr(self, 'entries', tuple(self.entries))

    @property
    def value_type(self) -> TType:
        return TType.MAP

    def to_dict(self, fk: Callable[[Value], K], fv: Callable[[Value], V]) -> dict[K, V]:
        return {fk(entry.key): fv(entry.value) for entry in self.entries}

    @classmethod
    def from_dict(
        cls,
        key_type: TType,
        item_type: TType,
        items: Mapping[K, V],
        fk: Callable[[K], Value],
        fv: Callable[[V], Value],
    ) -> Map:
        entries = tuple(MapEntry(fk(key), fv(value)) for key, value in items.items())
        return cls(key_type, item_type, entries)


class Struct(Value, frozen=True):
    """Fields indexed by a small positive integer id."""

    fields: dict[int, Field] = msgspec.field(default_factory=dict)

    def __post_init__(self) -> None:
        force_setattr(self, 'fields', dict(self.fields))

    @property
    def value_type(self) -> TType:
        return TType.STRUCT

    def get_field(self, field_id: int, field_type: TType) -> Field | None:
        """Return field `field_id` if it is present and tagged `field_type`.

        Missing or differently typed fields return `None` rather than raising,
        which lets readers treat them as optional fields that are not set.
        """
        field = self.fields.get(field_id)
        if field is not None and field.field_type == field_type:
            return field
        return None


class Field(_Typed, frozen=True):
    """A typed slot holding a value, as stored in a `Struct`."""

    field_type: TType
    value: Value | None

    @property
    def _held(self) -> Value | None:
        return self.value


class Message(_Typed, frozen=True):
    """A call envelope correlating a method name and payload by `seqid`."""

    name: str
    message_type: MessageType
    seqid: int
    value: Value | None

    @property
    def _held(self) -> Value | None:
        return self.value

    def __post_init__(self) -> None:
        force_setattr(self, 'message_type', MessageType(self.message_type))
