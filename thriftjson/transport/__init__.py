"""Base transport abstraction.

A transport moves whole encoded messages. Framing, buffering and connection
handling all live behind `read` and `write`; protocols only see text.
"""

from __future__ import annotations

import abc
from types import TracebackType

from .. import logs

log = logs.get(__name__)


class Transport(abc.ABC):
    """Asynchronous message I/O used by a protocol."""

    @abc.abstractmethod
    async def read(self) -> str:
        """Return the next complete encoded message."""
        raise NotImplementedError('abstract')

    @abc.abstractmethod
    async def write(self, data: str) -> None:
        """Send a complete encoded message."""
        raise NotImplementedError('abstract')

    def close(self) -> None:
        """Release the underlying resource."""
        pass

    async def __aenter__(self) -> Transport:
        """Allow context-manager usage."""
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        """Close the transport when leaving an `async with` block."""
        self.close()


def pipe(maxsize: int = 0) -> tuple[Transport, Transport]:
    """Return two connected in-memory transports."""
    from .memory import MemoryTransport

    a = MemoryTransport(maxsize)
    b = MemoryTransport(maxsize, peer=a)
    return a, b
