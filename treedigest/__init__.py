"""treedigest — deterministic message digests of filesystem trees.

Prints one ``"<hex>  <path>"`` line per entry, or folds every entry into a
single squashed tree digest.

Usage::

    from treedigest import TreeWalker, WalkOptions

    walker = TreeWalker(WalkOptions(squash=True, sort=True))
    result = walker.walk("/path/to/tree")
    result.squash_digest
"""

from treedigest.config import VERSION_STRING
from treedigest.errors import (
    AccessError,
    InvalidInputError,
    InvalidPathError,
    SymlinkChainError,
    TreeDigestError,
    UnsupportedAlgorithmError,
)
from treedigest.fs import EntryKind, ResolvedEntry
from treedigest.hashing import Digest, DigestResult, HashAlgorithm, Hasher
from treedigest.settings import SettingsLoader
from treedigest.squash import Squash1, Squash2, SquashStrategy, new_squash
from treedigest.walk import StatCollector, TreeWalker, WalkOptions, WalkResult, digest_tree

__version__ = VERSION_STRING

__all__ = [
    "AccessError",
    "Digest",
    "DigestResult",
    "EntryKind",
    "HashAlgorithm",
    "Hasher",
    "InvalidInputError",
    "InvalidPathError",
    "ResolvedEntry",
    "SettingsLoader",
    "Squash1",
    "Squash2",
    "SquashStrategy",
    "StatCollector",
    "SymlinkChainError",
    "TreeDigestError",
    "TreeWalker",
    "UnsupportedAlgorithmError",
    "WalkOptions",
    "WalkResult",
    "__version__",
    "digest_tree",
    "new_squash",
]
