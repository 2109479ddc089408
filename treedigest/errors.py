"""Exception hierarchy for tree digest operations."""

from __future__ import annotations


class TreeDigestError(Exception):
    """Base class for every error raised by treedigest."""


class InvalidPathError(TreeDigestError):
    """Raised when a path cannot be represented as a valid path string."""


class AccessError(TreeDigestError):
    """Raised when metadata or content of a path cannot be read.

    The triggering :class:`OSError` is chained as ``__cause__``.
    """

    def __init__(self, path: str, message: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if message else path)


class UnsupportedAlgorithmError(TreeDigestError):
    """Raised when a hash algorithm name is not one of the supported set."""


class InvalidInputError(TreeDigestError):
    """Raised for an unusable root path or an invalid option value."""


class SymlinkChainError(TreeDigestError):
    """Raised when a fully resolved path still turns out to be a symlink."""
