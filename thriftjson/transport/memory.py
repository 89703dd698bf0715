"""In-memory transport, for loopback use and tests."""

from __future__ import annotations

import asyncio
import contextlib

from .. import errors, logs, utils
from . import Transport

log = logs.get(__name__)

_CLOSED = object()


class MemoryTransport(Transport):
    """Queue backed transport.

    Messages written to a transport are read from its peer. A transport
    created without a peer is its own peer, so it reads back what it writes.
    Closing either end closes both; queued messages can still be read, after
    which reads raise `TransportError`.
    """

    def __init__(self, maxsize: int = 0, peer: MemoryTransport | None = None) -> None:
        self._inbox: asyncio.Queue[object] = asyncio.Queue(maxsize)
        self._peer = self
        self._closed = False
        if peer is not None:
            self._peer = peer
            peer._peer = self
        log.debug('opened: %s', self)

    @property
    def closed(self) -> bool:
        return self._closed

    async def read(self) -> str:
        if self._closed and self._inbox.empty():
            raise errors.TransportError(message='read from closed transport')

        data = await self._inbox.get()
        if data is _CLOSED:
            raise errors.TransportError(message='read from closed transport')

        if log.isEnabledFor(logs.DEBUG):
            log.debug('read: %s <- %s', utils.format.elide(data), self)
        return data

    async def write(self, data: str) -> None:
        if self._closed:
            raise errors.TransportError(message='write to closed transport')
        if not isinstance(data, str):
            raise errors.TransportError(message=f'text expected: {type(data).__name__}')

        if log.isEnabledFor(logs.DEBUG):
            log.debug('write: %s -> %s', utils.format.elide(data), self)
        await self._peer._inbox.put(data)

    def close(self) -> None:
        for end in {self, self._peer}:
            if end._closed:
                continue
            end._closed = True
            # a full queue means nobody is blocked in read
            with contextlib.suppress(asyncio.QueueFull):
                end._inbox.put_nowait(_CLOSED)
            log.debug('closed: %s', end)

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(0x{id(self):x})'
