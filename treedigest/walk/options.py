"""WalkOptions — the resolved option set consumed by the walker."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

from treedigest.config import DEFAULT_HASH_ALGO, DEFAULT_SQUASH_VERSION
from treedigest.errors import InvalidInputError
from treedigest.hashing.algorithms import HashAlgorithm
from treedigest.hashing.hasher import is_valid_hexsum, normalize_hexsum
from treedigest.squash.registry import available_versions


class WalkOptions(BaseModel):
    """Options for one or more tree walks.

    ``hash_verify`` is stored normalised (lowercase, no ``0x``) so that
    comparison against computed sums is case-insensitive.
    """

    hash_algo: str = DEFAULT_HASH_ALGO
    hash_verify: str = ""
    hash_only: bool = False
    ignore_dot: bool = False
    ignore_dot_dir: bool = False
    ignore_dot_file: bool = False
    ignore_symlink: bool = False
    follow_symlink: bool = True
    abs: bool = False
    swap: bool = False
    sort: bool = False
    squash: bool = False
    squash_version: int = DEFAULT_SQUASH_VERSION
    verbose: bool = False
    debug: bool = False

    @field_validator("hash_algo")
    @classmethod
    def check_hash_algo(cls, v: str) -> str:
        return HashAlgorithm.from_name(v).value

    @field_validator("hash_verify")
    @classmethod
    def check_hash_verify(cls, v: str) -> str:
        if not v:
            return ""
        if not is_valid_hexsum(v):
            raise InvalidInputError(f"Invalid verify string {v!r}")
        return normalize_hexsum(v)

    @field_validator("squash_version")
    @classmethod
    def check_squash_version(cls, v: int) -> int:
        if v not in available_versions():
            raise InvalidInputError(f"Unsupported squash version {v!r}")
        return v

    @property
    def algorithm(self) -> HashAlgorithm:
        return HashAlgorithm(self.hash_algo)

    def matches_verify(self, hex_digest: str) -> bool:
        """True when no verify string is set or *hex_digest* equals it."""
        return not self.hash_verify or self.hash_verify == hex_digest.lower()
