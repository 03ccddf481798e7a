"""Platform blocking adapters.

Adapters receive resolved target lists and map platform-agnostic
identifiers onto OS blocking primitives (Screen Time shields, usage
stats overlays). Only an in-memory adapter ships here; real platform
adapters live outside this package.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..core.resolver import ResolvedTargets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockingChange:
    """Difference between two consecutive applications."""

    newly_blocked: tuple[str, ...]
    newly_accessible: tuple[str, ...]
    released: tuple[str, ...] = ()  # Blocked before, gone from the catalog now

    @property
    def is_empty(self) -> bool:
        return not (self.newly_blocked or self.newly_accessible or self.released)


@runtime_checkable
class BlockingAdapter(Protocol):
    """Protocol for platform blocking sinks."""

    @property
    def platform_name(self) -> str:
        """Return the name of the platform this adapter drives."""
        ...

    def apply(self, resolved: ResolvedTargets) -> BlockingChange:
        """Block and unblock targets to match the resolved lists."""
        ...


class BaseBlockingAdapter(ABC):
    """Base class that only forwards lists that actually changed."""

    def __init__(self):
        self._current: ResolvedTargets | None = None

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Return the name of the platform this adapter drives."""
        pass

    @abstractmethod
    def _block(self, identifiers: tuple[str, ...]) -> None:
        pass

    @abstractmethod
    def _unblock(self, identifiers: tuple[str, ...]) -> None:
        pass

    @property
    def current(self) -> ResolvedTargets | None:
        return self._current

    def apply(self, resolved: ResolvedTargets) -> BlockingChange:
        previous = self._current or ResolvedTargets(blocked=(), accessible=())
        previous_blocked = set(previous.blocked)
        previous_accessible = set(previous.accessible)
        listed = set(resolved.blocked) | set(resolved.accessible)

        change = BlockingChange(
            newly_blocked=tuple(i for i in resolved.blocked if i not in previous_blocked),
            newly_accessible=tuple(
                i for i in resolved.accessible if i not in previous_accessible
            ),
            released=tuple(i for i in previous.blocked if i not in listed),
        )

        if change.newly_blocked:
            self._block(change.newly_blocked)
        if change.newly_accessible:
            self._unblock(change.newly_accessible)
        if change.released:
            self._unblock(change.released)

        if not change.is_empty:
            logger.info(
                "%s: blocked %d, unblocked %d, released %d",
                self.platform_name,
                len(change.newly_blocked),
                len(change.newly_accessible),
                len(change.released),
            )

        self._current = resolved
        return change


class RecordingBlockingAdapter(BaseBlockingAdapter):
    """In-memory adapter that remembers every block/unblock it was asked for."""

    def __init__(self):
        super().__init__()
        self.history: list[tuple[str, tuple[str, ...]]] = []

    @property
    def platform_name(self) -> str:
        return "recording"

    @property
    def blocked(self) -> tuple[str, ...]:
        return self._current.blocked if self._current else ()

    @property
    def accessible(self) -> tuple[str, ...]:
        return self._current.accessible if self._current else ()

    def _block(self, identifiers: tuple[str, ...]) -> None:
        self.history.append(("block", identifiers))

    def _unblock(self, identifiers: tuple[str, ...]) -> None:
        self.history.append(("unblock", identifiers))
