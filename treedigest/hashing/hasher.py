"""Content hashing: files, byte strings, identity strings and hex sums."""

from __future__ import annotations

import io
import logging
import os
import string
from pathlib import Path
from typing import BinaryIO

from pydantic import BaseModel

from treedigest.config import BUFFER_SIZE, MIN_HEXSUM_LENGTH
from treedigest.errors import AccessError
from treedigest.hashing.algorithms import Digest, HashAlgorithm

logger = logging.getLogger(__name__)

_HEXDIGITS = frozenset(string.hexdigits)


class DigestResult(BaseModel):
    """Raw digest bytes plus the number of input bytes consumed."""

    digest: bytes
    written: int = 0

    @property
    def hex(self) -> str:
        return hex_sum(self.digest)


def hex_sum(digest: bytes) -> str:
    """Lowercase, zero-padded hex encoding of *digest*."""
    return digest.hex()


def is_valid_hexsum(text: str) -> bool:
    """Return True if *text* is an acceptable verification string.

    An optional ``0x`` prefix is allowed; the rest must be at least
    ``MIN_HEXSUM_LENGTH`` hex digits of either case.
    """
    s = text[2:] if text.startswith("0x") else text
    if len(s) < MIN_HEXSUM_LENGTH:
        return False
    return all(c in _HEXDIGITS for c in s)


def normalize_hexsum(text: str) -> str:
    """Strip a ``0x`` prefix and lowercase, for case-insensitive comparison."""
    s = text[2:] if text.startswith("0x") else text
    return s.lower()


class Hasher:
    """Stream byte sources through a selectable hash algorithm."""

    @staticmethod
    def hash_stream(
        stream: BinaryIO,
        algorithm: str | HashAlgorithm,
    ) -> DigestResult:
        """Hash everything readable from *stream* in ``BUFFER_SIZE`` chunks."""
        h = Digest.new(algorithm)
        written = 0
        while True:
            chunk = stream.read(BUFFER_SIZE)
            if not chunk:
                break
            written += len(chunk)
            h.update(chunk)
        return DigestResult(digest=h.finalize(), written=written)

    @staticmethod
    def hash_bytes(data: bytes, algorithm: str | HashAlgorithm) -> DigestResult:
        """Return the digest of an in-memory byte string."""
        return Hasher.hash_stream(io.BytesIO(data), algorithm)

    @staticmethod
    def hash_string(text: str, algorithm: str | HashAlgorithm) -> DigestResult:
        """Return the digest of *text* in the filesystem encoding.

        Path strings carrying surrogate escapes round-trip to their
        original bytes.
        """
        return Hasher.hash_bytes(os.fsencode(text), algorithm)

    @staticmethod
    def hash_file(path: str | Path, algorithm: str | HashAlgorithm) -> DigestResult:
        """Return the digest of the file (or device) content at *path*.

        The handle is opened, fully streamed and closed before returning.
        """
        try:
            with open(path, "rb") as f:
                return Hasher.hash_stream(f, algorithm)
        except OSError as exc:
            logger.debug("Could not hash %s", path, exc_info=True)
            raise AccessError(str(path), exc.strerror or str(exc)) from exc
