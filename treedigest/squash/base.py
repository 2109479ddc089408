"""Abstract SquashStrategy interface."""

from __future__ import annotations

import abc

from treedigest.config import SQUASH_LABEL


class SquashStrategy(abc.ABC):
    """Folds per-entry identity+digest blobs into one running tree buffer.

    A strategy instance is owned by a single walk.  ``finalize`` returns the
    buffer as-is; the final pass with the user-selected algorithm happens
    outside the strategy.
    """

    @property
    @abc.abstractmethod
    def version(self) -> int:
        """Version number printed in the ``[squash][vN]`` tag."""

    @abc.abstractmethod
    def reset(self) -> None:
        """Discard everything absorbed so far."""

    @abc.abstractmethod
    def absorb(self, data: bytes) -> None:
        """Fold one blob into the buffer."""

    @abc.abstractmethod
    def finalize(self) -> bytes:
        """Return the current buffer bytes."""

    @property
    def tag(self) -> str:
        return f"[{SQUASH_LABEL}][v{self.version}]"
