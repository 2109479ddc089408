"""Squash v1 — order-independent folding."""

from __future__ import annotations

from treedigest.config import SQUASH1_ALGO
from treedigest.hashing.hasher import Hasher
from treedigest.squash.base import SquashStrategy


class Squash1(SquashStrategy):
    """Hash each blob, then sort and concatenate the hex strings.

    Sorting before concatenation makes the result invariant under
    traversal order.  Memory grows with the number of absorbed blobs.
    """

    def __init__(self) -> None:
        self._sums: list[str] = []

    @property
    def version(self) -> int:
        return 1

    def reset(self) -> None:
        self._sums.clear()

    def absorb(self, data: bytes) -> None:
        self._sums.append(Hasher.hash_bytes(data, SQUASH1_ALGO).hex)

    def finalize(self) -> bytes:
        return "".join(sorted(self._sums)).encode("ascii")

    def __len__(self) -> int:
        return len(self._sums)
