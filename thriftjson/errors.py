from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

from .ttype import TType

if TYPE_CHECKING:
    from .value import Struct


class TransportErrorKind(IntEnum):
    UNKNOWN = 0


class ProtocolErrorKind(IntEnum):
    UNKNOWN = 0
    INVALID_DATA = 1
    NEGATIVE_SIZE = 2
    SIZE_LIMIT = 3
    BAD_VERSION = 4
    NOT_IMPLEMENTED = 5


class ApplicationErrorKind(IntEnum):
    UNKNOWN = 0
    UNKNOWN_METHOD = 1  # client called a method unknown to the server
    INVALID_MESSAGE_TYPE = 2  # client passed an unsupported message type
    WRONG_METHOD_NAME = 3
    BAD_SEQUENCE_ID = 4
    MISSING_RESULT = 5  # handler did not supply the required result
    INTERNAL_ERROR = 6
    PROTOCOL_ERROR = 7  # protocol layer failed to (de)serialize
    INVALID_TRANSFORM = 8
    INVALID_PROTOCOL = 9  # protocol or version not supported
    UNSUPPORTED_CLIENT_TYPE = 10


class ThriftError(Exception):
    """Base class for all thriftjson exceptions."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(*(() if message is None else (message,)))
        self.message = message


class TransportError(ThriftError):
    """Raised for any error in the transport."""

    def __init__(
        self, kind: TransportErrorKind = TransportErrorKind.UNKNOWN, message: str | None = None
    ) -> None:
        super().__init__(message)
        self.kind = TransportErrorKind(kind)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.kind.name}, {self.message!r})'


class ProtocolError(ThriftError):
    """Raised for malformed or unsupported wire data."""

    def __init__(
        self, kind: ProtocolErrorKind = ProtocolErrorKind.UNKNOWN, message: str | None = None
    ) -> None:
        super().__init__(message)
        self.kind = ProtocolErrorKind(kind)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.kind.name}, {self.message!r})'

    @classmethod
    def invalid(cls, message: str) -> ProtocolError:
        return cls(ProtocolErrorKind.INVALID_DATA, message)

    @classmethod
    def required(cls) -> ProtocolError:
        """Return the error for a required field whose value is unset."""
        return cls.invalid('missing required field')


class ApplicationError(ThriftError):
    """An RPC level error that travels over the wire as a two-field struct.

    Field 1 holds the kind (I32) and field 2 the message (STRING). Both are
    optional: unset attributes are left out of the struct, and fields missing
    from a received struct leave the attribute as `None`.
    """

    def __init__(
        self,
        kind: ApplicationErrorKind | None = ApplicationErrorKind.UNKNOWN,
        message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = None if kind is None else ApplicationErrorKind(kind)

    def __repr__(self) -> str:
        kind = self.kind if self.kind is None else self.kind.name
        return f'{self.__class__.__name__}({kind}, {self.message!r})'

    @classmethod
    def from_struct(cls, data: Struct) -> ApplicationError:
        """Read an error from its struct form."""
        from .value import Field, Scalar

        kind = None
        message = None

        match data.get_field(1, TType.I32):
            case Field(value=Scalar(value=int() as code)):
                try:
                    kind = ApplicationErrorKind(code)
                except ValueError:
                    kind = ApplicationErrorKind.UNKNOWN

        match data.get_field(2, TType.STRING):
            case Field(value=Scalar(value=str() as text)):
                message = text

        return cls(kind, message)

    def to_struct(self) -> Struct:
        """Write this error as a struct."""
        from .value import Struct, new_i32, new_string

        fields = {}
        if self.kind is not None:
            fields[1] = new_i32(int(self.kind)).as_field()
        if self.message is not None:
            fields[2] = new_string(self.message).as_field()
        return Struct(fields)


class RegistryError(ThriftError):
    """Raised when a registry lookup or registration fails."""

