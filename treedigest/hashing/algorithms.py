"""Supported hash algorithms and the streaming :class:`Digest` wrapper."""

from __future__ import annotations

import enum
import hashlib

from treedigest.errors import UnsupportedAlgorithmError


class HashAlgorithm(str, enum.Enum):
    """Closed set of selectable algorithms.

    Values are the names accepted on the command line and by
    :func:`hashlib.new`.
    """

    MD5 = "md5"
    SHA1 = "sha1"
    SHA224 = "sha224"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"
    SHA512_224 = "sha512_224"
    SHA512_256 = "sha512_256"
    SHA3_224 = "sha3_224"
    SHA3_256 = "sha3_256"
    SHA3_384 = "sha3_384"
    SHA3_512 = "sha3_512"

    @classmethod
    def from_name(cls, name: str) -> HashAlgorithm:
        """Look up an algorithm by its exact (case-sensitive) name."""
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedAlgorithmError(
                f"Unsupported hash algorithm {name!r}; "
                f"available: {', '.join(available_algorithms())}"
            ) from None


def available_algorithms() -> list[str]:
    """Return the algorithm names in their canonical order."""
    return [a.value for a in HashAlgorithm]


class Digest:
    """One in-progress hash computation.

    ``update`` may be called any number of times; ``finalize`` consumes the
    state exactly once.
    """

    def __init__(self, algorithm: HashAlgorithm) -> None:
        self.algorithm = algorithm
        self._h = hashlib.new(algorithm.value)
        self._finalized = False

    @classmethod
    def new(cls, name: str | HashAlgorithm) -> Digest:
        if isinstance(name, HashAlgorithm):
            return cls(name)
        return cls(HashAlgorithm.from_name(name))

    @property
    def digest_size(self) -> int:
        return self._h.digest_size

    def update(self, data: bytes) -> None:
        if self._finalized:
            raise RuntimeError(f"{self.algorithm.value} digest already finalized")
        self._h.update(data)

    def finalize(self) -> bytes:
        if self._finalized:
            raise RuntimeError(f"{self.algorithm.value} digest already finalized")
        self._finalized = True
        return self._h.digest()
