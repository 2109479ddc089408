"""Digest engine: algorithm selection and streaming content hashing."""

from treedigest.hashing.algorithms import Digest, HashAlgorithm, available_algorithms
from treedigest.hashing.hasher import (
    DigestResult,
    Hasher,
    hex_sum,
    is_valid_hexsum,
    normalize_hexsum,
)

__all__ = [
    "Digest",
    "DigestResult",
    "HashAlgorithm",
    "Hasher",
    "available_algorithms",
    "hex_sum",
    "is_valid_hexsum",
    "normalize_hexsum",
]
