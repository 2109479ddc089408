"""Squash strategies: fold per-entry digests into a single tree digest."""

from treedigest.squash.base import SquashStrategy
from treedigest.squash.registry import available_versions, new_squash
from treedigest.squash.squash1 import Squash1
from treedigest.squash.squash2 import Squash2

__all__ = [
    "Squash1",
    "Squash2",
    "SquashStrategy",
    "available_versions",
    "new_squash",
]
