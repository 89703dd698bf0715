"""JSON protocol rendering tagged values as positionally-tagged JSON.

Wire shapes::

    scalar   1 | 0 | <number> | "<string>" | null
    list     ["<tag>", <count>, <item>, ...]
    set      ["<tag>", <count>, <item>, ...]
    map      ["<key tag>", "<value tag>", <count>, {"<key>": <value>, ...}]
    struct   {"<field id>": {"<tag>": <value>}, ...}
    message  [1, "<name>", <message type>, <seqid>, <struct>]
"""

from __future__ import annotations

import math
from typing import Any

from msgspec import UNSET, json

from .. import errors, logs, utils
from ..transport import Transport
from ..ttype import MessageType, TType
from ..value import Field, List, Map, MapEntry, Message, Scalar, Set, Struct, Value
from . import Protocol

VERSION = 1

log = logs.get(__name__)

_TYPE_STRINGS = {
    TType.BOOL: 'tf',
    TType.I08: 'i8',
    TType.I16: 'i16',
    TType.I32: 'i32',
    TType.I64: 'i64',
    TType.DOUBLE: 'dbl',
    TType.STRING: 'str',
    TType.LIST: 'lst',
    TType.MAP: 'map',
    TType.SET: 'set',
    TType.STRUCT: 'rec',
}
_STRING_TYPES = {name: value_type for value_type, name in _TYPE_STRINGS.items()}


def type_string(value_type: TType) -> str:
    """Return the wire tag for *value_type*."""
    try:
        return _TYPE_STRINGS[value_type]
    except (KeyError, TypeError):
        raise errors.ProtocolError.invalid(f'unsupported type ({value_type})') from None


def type_of_string(name: str) -> TType:
    """Return the type tag for the wire tag *name*."""
    try:
        return _STRING_TYPES[name]
    except (KeyError, TypeError):
        raise errors.ProtocolError.invalid(f'unsupported type ({name!r})') from None


def _invalid(message: str, data: Any = UNSET) -> errors.ProtocolError:
    if data is not UNSET:
        message = f'{message}: {utils.format.elide(repr(data))}'
    return errors.ProtocolError.invalid(message)


def _is_int(data: Any) -> bool:
    return isinstance(data, int) and not isinstance(data, bool)


def _is_number(data: Any) -> bool:
    return isinstance(data, (int, float)) and not isinstance(data, bool)


def _integral(data: Any) -> int | None:
    """Return *data* as an int if it is a whole number, else None."""
    if _is_int(data):
        return data
    if isinstance(data, float) and data.is_integer():
        return int(data)
    return None


def _decimal(key: str) -> int | None:
    """Parse a property name holding an integer in its canonical form."""
    try:
        number = int(key)
    except ValueError:
        return None
    # "01", "+1", " 1" and "1_0" all parse as integers but are not canonical
    return number if str(number) == key else None


class JsonProtocol(Protocol):
    """Protocol that encodes tagged values as JSON text.

    Set items are not checked for uniqueness unless `strict_sets` is enabled,
    in which case duplicate items are rejected when writing and reading.
    """

    NAME = 'json'

    def __init__(self, transport: Transport, strict_sets: bool = False) -> None:
        super().__init__(transport)
        self.strict_sets = strict_sets

    async def write_message(self, message: Message) -> None:
        await self._write(self.serialize_message(message))

    async def write_struct(self, struct: Struct) -> None:
        if not isinstance(struct, Struct):
            raise _invalid('struct expected', struct)
        await self._write(self.serialize(struct))

    async def read_message(self) -> Message:
        return self.deserialize_message(await self._read())

    async def read_struct(self) -> Struct:
        data = await self._read()
        if data is None:
            raise errors.ProtocolError.invalid('illegal data format')
        return self.deserialize(TType.STRUCT, data).struct_value

    async def _write(self, data: Any) -> None:
        text = self.encode(data)
        if log.isEnabledFor(logs.DEBUG):
            log.debug('msg: %s -> %s', utils.format.elide(text), self._transport)
        await self._transport.write(text)

    async def _read(self) -> Any:
        text = await self._transport.read()
        if log.isEnabledFor(logs.DEBUG):
            log.debug('msg: %s <- %s', utils.format.elide(text), self._transport)
        return self.decode(text)

    ##
    ## text
    ##

    def encode(self, data: Any) -> str:
        """Render serialized data as JSON text."""
        try:
            return json.encode(data).decode()
        except Exception as exc:
            raise _invalid(f'{exc}: data', data) from exc

    def decode(self, text: str | bytes) -> Any:
        """Parse JSON text into plain data."""
        try:
            return json.decode(text)
        except Exception as exc:
            raise _invalid(f'{exc}: text', text) from exc

    ##
    ## messages
    ##

    def serialize_message(self, message: Message) -> list[Any]:
        return [
            VERSION,
            message.name,
            int(message.message_type),
            message.seqid,
            self.serialize(message.value),
        ]

    def deserialize_message(self, data: Any) -> Message:
        if not isinstance(data, list) or len(data) != 5:
            raise errors.ProtocolError.invalid('illegal data format')

        version, name, message_type, seqid, value = data

        if not _is_int(version) or version != VERSION:
            raise errors.ProtocolError(
                errors.ProtocolErrorKind.BAD_VERSION, f'unsupported version ({version!r})'
            )
        if not isinstance(name, str):
            raise _invalid('message name expected', name)
        if not _is_int(seqid):
            raise _invalid('sequence id expected', seqid)
        if not _is_int(message_type):
            raise _invalid('unsupported message type', message_type)
        try:
            message_type = MessageType(message_type)
        except ValueError:
            raise _invalid('unsupported message type', message_type) from None

        return Message(name, message_type, seqid, self.deserialize(TType.STRUCT, value))

    ##
    ## values
    ##

    def serialize(self, value: Value | None) -> Any:
        """Convert *value* into plain data ready for JSON encoding."""
        match value:
            case None:
                return None

            case Scalar(_, payload) if payload is UNSET:
                return None

            case Scalar(TType.BOOL, payload):
                if isinstance(payload, bool):
                    return 1 if payload else 0
                raise _invalid('boolean expected', payload)

            case Scalar(TType.I08 | TType.I16 | TType.I32 | TType.I64, payload):
                number = _integral(payload)
                if number is not None:
                    return number
                raise _invalid('integer expected', payload)

            case Scalar(TType.DOUBLE, payload):
                if not _is_number(payload):
                    raise _invalid('number expected', payload)
                if math.isnan(payload):
                    raise errors.ProtocolError.invalid('number is NaN')
                if math.isinf(payload):
                    raise errors.ProtocolError.invalid('number is not finite')
                return payload

            case Scalar(TType.STRING, payload):
                if isinstance(payload, str):
                    return payload
                raise _invalid('string expected', payload)

            case List(item_type, items):
                return [type_string(item_type), len(items), *map(self.serialize, items)]

            case Set(item_type, items):
                if self.strict_sets:
                    self._check_unique(items)
                return [type_string(item_type), len(items), *map(self.serialize, items)]

            case Map(key_type, item_type, entries):
                tags = [type_string(key_type), type_string(item_type)]
                data: dict[str, Any] = {}
                for entry in entries:
                    key = self._format_key(entry.key)
                    if key in data:
                        raise _invalid('duplicate map key', key)
                    data[key] = self.serialize(entry.value)
                return [*tags, len(entries), data]

            case Struct(fields):
                return {
                    str(field_id): {type_string(field.field_type): self.serialize(field.value)}
                    for field_id, field in fields.items()
                }

        raise _invalid('unsupported value type', value)

    def deserialize(self, value_type: TType, data: Any) -> Value:
        """Rebuild a value of *value_type* from plain JSON data."""
        match value_type:
            case TType.BOOL:
                if data is None:
                    return Scalar(value_type)
                # booleans travel as 1/0
                if isinstance(data, int) and data in (0, 1):
                    return Scalar(value_type, bool(data))
                raise _invalid('boolean expected', data)

            case TType.I08 | TType.I16 | TType.I32 | TType.I64:
                if data is None:
                    return Scalar(value_type)
                number = _integral(data)
                if number is not None:
                    return Scalar(value_type, number)
                raise _invalid('integer expected', data)

            case TType.DOUBLE:
                if data is None:
                    return Scalar(value_type)
                if not _is_number(data):
                    raise _invalid('number expected', data)
                try:
                    number = float(data)
                except OverflowError:
                    raise _invalid('number is not finite', data) from None
                if not math.isfinite(number):
                    raise _invalid('number is not finite', data)
                return Scalar(value_type, number)

            case TType.STRING:
                if data is None:
                    return Scalar(value_type)
                if isinstance(data, str):
                    return Scalar(value_type, data)
                raise _invalid('string expected', data)

            case TType.LIST | TType.SET:
                kind = 'list' if value_type == TType.LIST else 'set'
                if not isinstance(data, list) or len(data) < 2:
                    raise _invalid(f'{kind} expected', data)

                item_type = type_of_string(data[0])
                size = self._size(data[1])
                items = tuple(self.deserialize(item_type, item) for item in data[2:])

                if len(items) != size:
                    raise errors.ProtocolError.invalid(
                        f'{kind} size mismatch: {len(items)} != {size}'
                    )
                if value_type == TType.LIST:
                    return List(item_type, items)
                if self.strict_sets:
                    self._check_unique(items)
                return Set(item_type, items)

            case TType.MAP:
                if not isinstance(data, list) or len(data) != 4:
                    raise _invalid('map expected', data)

                key_type = type_of_string(data[0])
                item_type = type_of_string(data[1])
                size = self._size(data[2])
                if not isinstance(data[3], dict):
                    raise _invalid('map entries expected', data[3])

                keys: set[Any] = set()
                entries = []
                for key, value in data[3].items():
                    parsed = self._parse_key(key_type, key)
                    if parsed in keys:
                        raise _invalid('duplicate map key', key)
                    keys.add(parsed)
                    entries.append(
                        MapEntry(
                            self.deserialize(key_type, parsed),
                            self.deserialize(item_type, value),
                        )
                    )

                if len(entries) != size:
                    raise errors.ProtocolError.invalid(
                        f'map size mismatch: {len(entries)} != {size}'
                    )
                return Map(key_type, item_type, entries)

            case TType.STRUCT:
                if not isinstance(data, dict):
                    raise _invalid('struct expected', data)

                fields: dict[int, Field] = {}
                for field_id, item in data.items():
                    if not isinstance(item, dict) or len(item) != 1:
                        raise _invalid(f'field {field_id} expected', item)
                    ((name, field_data),) = item.items()
                    field_type = type_of_string(name)
                    fields[self._field_id(field_id)] = Field(
                        field_type, self.deserialize(field_type, field_data)
                    )
                return Struct(fields)

        raise _invalid('unsupported value type', value_type)

    ##
    ## helpers
    ##

    def _format_key(self, key: Value) -> str:
        """Render a serialized map key as a JSON property name."""
        data = self.serialize(key)
        match data:
            case None:
                raise errors.ProtocolError.invalid('map key is unset')
            case str():
                return data
            case int():
                return str(data)
            case float():
                return repr(data)
        raise _invalid('unsupported map key', key)

    def _parse_key(self, key_type: TType, key: str) -> Any:
        """Parse a JSON property name according to the declared key type."""
        match key_type:
            case TType.STRING:
                return key
            case TType.BOOL:
                if key in ('1', 'true'):
                    return True
                if key in ('0', 'false'):
                    return False
                raise _invalid('boolean key expected', key)
            case TType.I08 | TType.I16 | TType.I32 | TType.I64:
                number = _decimal(key)
                if number is None:
                    raise _invalid('integer key expected', key)
                return number
            case TType.DOUBLE:
                try:
                    number = float(key)
                except ValueError:
                    raise _invalid('number key expected', key) from None
                if not math.isfinite(number):
                    raise _invalid('number key expected', key)
                return number
        raise _invalid('unsupported map key type', key_type)

    def _field_id(self, key: str) -> int:
        field_id = _decimal(key)
        if field_id is None:
            raise _invalid('field id expected', key)
        return field_id

    def _size(self, data: Any) -> int:
        if not _is_int(data):
            raise _invalid('size expected', data)
        return data

    def _check_unique(self, items: tuple[Value, ...]) -> None:
        for i, item in enumerate(items):
            if item in items[:i]:
                raise _invalid('duplicate set item', item)
