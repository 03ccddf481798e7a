"""Target resolution: which catalog entries are blocked for a given state.

Resolution is a pure function of (state, catalog). It holds no
timestamps and never reads the clock; the controller supplies the state
and the caller supplies the catalog on every call.

The result is always two identifier lists, never a single "is blocked"
flag, so a per-target resolver can replace the all-or-nothing one without
changing consumers.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ..errors import MalformedTargetError
from ..models.state import AccessState
from ..models.target import BlockTarget


@dataclass(frozen=True)
class ResolvedTargets:
    """Blocked and accessible identifiers for one state."""

    blocked: tuple[str, ...]
    accessible: tuple[str, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "blocked": list(self.blocked),
            "accessible": list(self.accessible),
        }


@runtime_checkable
class TargetResolver(Protocol):
    """Protocol for blocking backends."""

    def resolve_blocked(
        self, state: AccessState, all_targets: Sequence[BlockTarget]
    ) -> list[str]:
        """Return identifiers that must be blocked in this state."""
        ...

    def resolve_accessible(
        self, state: AccessState, all_targets: Sequence[BlockTarget]
    ) -> list[str]:
        """Return identifiers that are accessible in this state."""
        ...

    def resolve(
        self, state: AccessState, all_targets: Sequence[BlockTarget]
    ) -> ResolvedTargets:
        """Return both lists at once."""
        ...


def validate_catalog(all_targets: Iterable[BlockTarget]) -> list[str]:
    """Return catalog identifiers in order, rejecting bad or duplicate ones.

    Raises:
        MalformedTargetError: If an identifier is not a string, is blank or
            appears twice
    """
    identifiers = []
    seen: set[str] = set()

    for position, target in enumerate(all_targets):
        identifier = target.platform_agnostic_identifier
        if not isinstance(identifier, str):
            raise MalformedTargetError(
                f"Target at position {position} has a non-string identifier: {identifier!r}"
            )
        if not identifier.strip():
            raise MalformedTargetError(
                f"Target at position {position} has an empty identifier"
            )
        if identifier in seen:
            raise MalformedTargetError(f"Duplicate target identifier: {identifier}")
        seen.add(identifier)
        identifiers.append(identifier)

    return identifiers


class AllOrNothingResolver:
    """Blocks the whole catalog unless the state is UNLOCKED."""

    def resolve_blocked(
        self, state: AccessState, all_targets: Sequence[BlockTarget]
    ) -> list[str]:
        return list(self.resolve(state, all_targets).blocked)

    def resolve_accessible(
        self, state: AccessState, all_targets: Sequence[BlockTarget]
    ) -> list[str]:
        return list(self.resolve(state, all_targets).accessible)

    def resolve(
        self, state: AccessState, all_targets: Sequence[BlockTarget]
    ) -> ResolvedTargets:
        identifiers = tuple(validate_catalog(all_targets))

        if state == AccessState.UNLOCKED:
            return ResolvedTargets(blocked=(), accessible=identifiers)
        if state in (AccessState.LOCKED, AccessState.EARNING, AccessState.EXPIRED):
            return ResolvedTargets(blocked=identifiers, accessible=())

        raise ValueError(f"Unknown access state: {state!r}")


def resolve_targets(
    state: AccessState,
    all_targets: Sequence[BlockTarget],
    resolver: TargetResolver | None = None,
) -> ResolvedTargets:
    """Resolve the catalog for a state with the given (or default) resolver."""
    if resolver is None:
        resolver = AllOrNothingResolver()
    return resolver.resolve(state, all_targets)
