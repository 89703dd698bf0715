"""Tagged values and a JSON wire protocol for RPC payloads."""

from .errors import (
    ApplicationError,
    ApplicationErrorKind,
    ProtocolError,
    ProtocolErrorKind,
    ThriftError,
    TransportError,
    TransportErrorKind,
)
from .protocol import Protocol
from .protocol import create as create_protocol
from .protocol.json import JsonProtocol
from .transport import Transport, pipe
from .transport.memory import MemoryTransport
from .ttype import MessageType, TType
from .value import (
    Field,
    List,
    Map,
    MapEntry,
    Message,
    Scalar,
    Set,
    Struct,
    Value,
    new_bool,
    new_byte,
    new_double,
    new_i08,
    new_i16,
    new_i32,
    new_i64,
    new_string,
)

__version__ = '1.0.0'

__all__ = [
    'ApplicationError',
    'ApplicationErrorKind',
    'Field',
    'JsonProtocol',
    'List',
    'Map',
    'MapEntry',
    'MemoryTransport',
    'Message',
    'MessageType',
    'Protocol',
    'ProtocolError',
    'ProtocolErrorKind',
    'Scalar',
    'Set',
    'Struct',
    'TType',
    'ThriftError',
    'Transport',
    'TransportError',
    'TransportErrorKind',
    'Value',
    'create_protocol',
    'new_bool',
    'new_byte',
    'new_double',
    'new_i08',
    'new_i16',
    'new_i32',
    'new_i64',
    'new_string',
    'pipe',
]
