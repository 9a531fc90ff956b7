"""Pool of reusable scratch buffers for frame encoding.

Buffers never leave the ``with`` block that acquired them: callers copy
whatever they need out of the buffer before the block exits.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

DEFAULT_POOL_SIZE = 16


class BufferPool:
    """A bounded, thread-safe stack of ``bytearray`` scratch buffers.

    Usage::

        pool = BufferPool()
        with pool.acquire() as buf:
            buf += b"payload"
            result = bytes(buf)
    """

    def __init__(self, max_size: int = DEFAULT_POOL_SIZE) -> None:
        if max_size < 0:
            raise ValueError(f"Pool size must be >= 0, got {max_size}")
        self._max_size = max_size
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._max_size

    def __len__(self) -> int:
        """Number of idle buffers currently held by the pool."""
        with self._lock:
            return len(self._free)

    def _take(self) -> bytearray:
        with self._lock:
            buf = self._free.pop() if self._free else bytearray()
        buf.clear()
        return buf

    def _give_back(self, buf: bytearray) -> None:
        with self._lock:
            if len(self._free) < self._max_size:
                self._free.append(buf)

    @contextmanager
    def acquire(self) -> Iterator[bytearray]:
        """Borrow an empty buffer for the duration of a ``with`` block.

        The buffer goes back to the pool when the block exits, whether it
        exits normally or by an exception.
        """
        buf = self._take()
        try:
            yield buf
        finally:
            self._give_back(buf)
