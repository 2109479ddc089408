"""Tree walking: options, ignore rules, statistics and the walker itself."""

from treedigest.walk.ignore import IgnorePolicy
from treedigest.walk.options import WalkOptions
from treedigest.walk.report import format_count, render_listing, render_summary
from treedigest.walk.stats import HASHED_KINDS, StatCollector, StatEntry
from treedigest.walk.walker import TreeWalker, WalkResult, digest_tree, iter_tree

__all__ = [
    "HASHED_KINDS",
    "IgnorePolicy",
    "StatCollector",
    "StatEntry",
    "TreeWalker",
    "WalkOptions",
    "WalkResult",
    "digest_tree",
    "format_count",
    "iter_tree",
    "render_listing",
    "render_summary",
]
