"""Look up a squash strategy by version number."""

from __future__ import annotations

import logging

from treedigest.config import DEFAULT_SQUASH_VERSION
from treedigest.errors import InvalidInputError
from treedigest.squash.base import SquashStrategy
from treedigest.squash.squash1 import Squash1
from treedigest.squash.squash2 import Squash2

logger = logging.getLogger(__name__)

_STRATEGIES: dict[int, type[SquashStrategy]] = {
    1: Squash1,
    2: Squash2,
}


def available_versions() -> list[int]:
    return sorted(_STRATEGIES)


def new_squash(version: int = DEFAULT_SQUASH_VERSION) -> SquashStrategy:
    """Return a fresh, empty strategy for *version*."""
    try:
        cls = _STRATEGIES[version]
    except KeyError:
        raise InvalidInputError(
            f"Unsupported squash version {version!r}; "
            f"available: {', '.join(str(v) for v in available_versions())}"
        ) from None
    logger.debug("Using squash v%d", version)
    return cls()
