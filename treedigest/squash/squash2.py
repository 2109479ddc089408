"""Squash v2 — chained, order-dependent folding."""

from __future__ import annotations

from treedigest.config import SQUASH2_ALGO
from treedigest.hashing.hasher import Hasher
from treedigest.squash.base import SquashStrategy


class Squash2(SquashStrategy):
    """Append each blob to the buffer, then replace the buffer by its hash.

    The result depends on absorb order; walks must be sorted for it to be
    reproducible across enumeration orders.  Memory stays constant.
    """

    def __init__(self) -> None:
        self._buffer = b""

    @property
    def version(self) -> int:
        return 2

    def reset(self) -> None:
        self._buffer = b""

    def absorb(self, data: bytes) -> None:
        self._buffer = Hasher.hash_bytes(self._buffer + data, SQUASH2_ALGO).digest

    def finalize(self) -> bytes:
        return self._buffer
