"""Protocol base classes and helpers."""

from __future__ import annotations

import abc
from typing import Any

from .. import registry
from ..registry import Registry
from ..transport import Transport
from ..value import Message, Struct

DEFAULT_PROTOCOL = 'json'


def create(name: str | Protocol, transport: Transport | None = None, **kwargs: Any) -> Protocol:
    """Return a protocol bound to *transport* by name, or pass through instances."""
    if isinstance(name, Protocol):
        return name
    if transport is None:
        raise TypeError('a transport is required to create a protocol')
    registry.init()
    cls = REGISTRY[name or DEFAULT_PROTOCOL]
    return cls(transport, **kwargs)


class Protocol(abc.ABC):
    """Base class for protocols that read and write values over a transport.

    A protocol instance serves a single flow: callers must not start a read
    or write before the previous one has completed.
    """

    NAME: str

    def __init_subclass__(cls) -> None:
        REGISTRY.register(cls.NAME, cls)

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    @abc.abstractmethod
    async def write_message(self, message: Message) -> None:
        """Encode a call envelope and write it to the transport."""
        raise NotImplementedError('abstract')

    @abc.abstractmethod
    async def write_struct(self, struct: Struct) -> None:
        """Encode a bare struct and write it to the transport."""
        raise NotImplementedError('abstract')

    @abc.abstractmethod
    async def read_message(self) -> Message:
        """Read and decode a call envelope."""
        raise NotImplementedError('abstract')

    @abc.abstractmethod
    async def read_struct(self) -> Struct:
        """Read and decode a bare struct."""
        raise NotImplementedError('abstract')


REGISTRY = Registry(__name__, Protocol)
