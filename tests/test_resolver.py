"""Tests for target resolution."""

import pytest

from pushin.core.resolver import (
    AllOrNothingResolver,
    ResolvedTargets,
    TargetResolver,
    resolve_targets,
    validate_catalog,
)
from pushin.errors import MalformedTargetError
from pushin.models.state import AccessState
from pushin.models.target import BlockTarget

BLOCKING_STATES = [AccessState.LOCKED, AccessState.EARNING, AccessState.EXPIRED]


class TestAllOrNothingResolver:
    """Tests for the all-or-nothing rule table."""

    @pytest.mark.parametrize("state", BLOCKING_STATES)
    def test_blocking_states_block_all(self, state, catalog):
        """Test LOCKED, EARNING and EXPIRED block the whole catalog."""
        resolved = AllOrNothingResolver().resolve(state, catalog)
        assert resolved.blocked == ("com.example.a", "com.example.b", "social")
        assert resolved.accessible == ()

    def test_unlocked_opens_all(self, catalog):
        """Test UNLOCKED makes the whole catalog accessible."""
        resolved = AllOrNothingResolver().resolve(AccessState.UNLOCKED, catalog)
        assert resolved.blocked == ()
        assert resolved.accessible == ("com.example.a", "com.example.b", "social")

    @pytest.mark.parametrize("state", list(AccessState))
    @pytest.mark.parametrize("size", [0, 1, 3, 25])
    def test_exhaustive_partition(self, state, size):
        """Test lists are disjoint and together cover the catalog."""
        targets = [BlockTarget(f"com.example.app{i}") for i in range(size)]
        resolved = AllOrNothingResolver().resolve(state, targets)

        blocked = set(resolved.blocked)
        accessible = set(resolved.accessible)
        assert len(resolved.blocked) + len(resolved.accessible) == size
        assert blocked.isdisjoint(accessible)
        assert blocked | accessible == {t.platform_agnostic_identifier for t in targets}

    @pytest.mark.parametrize("state", list(AccessState))
    def test_empty_catalog(self, state):
        """Test an empty catalog yields two empty lists."""
        assert AllOrNothingResolver().resolve(state, []) == ResolvedTargets((), ())

    def test_list_helpers_match_resolve(self, catalog):
        """Test resolve_blocked/resolve_accessible return plain lists."""
        resolver = AllOrNothingResolver()
        assert resolver.resolve_blocked(AccessState.EARNING, catalog) == [
            "com.example.a",
            "com.example.b",
            "social",
        ]
        assert resolver.resolve_accessible(AccessState.EARNING, catalog) == []

    def test_satisfies_protocol(self):
        """Test the shipped resolver implements TargetResolver."""
        assert isinstance(AllOrNothingResolver(), TargetResolver)

    def test_follows_catalog_passed_at_query_time(self, catalog):
        """Test targets added between calls are picked up."""
        resolver = AllOrNothingResolver()
        first = resolver.resolve(AccessState.UNLOCKED, catalog)
        second = resolver.resolve(
            AccessState.UNLOCKED, catalog + [BlockTarget("com.example.new")]
        )
        assert len(first.accessible) == 3
        assert second.accessible[-1] == "com.example.new"


class TestCatalogValidation:
    """Tests for malformed catalogs."""

    def test_duplicate_identifier_rejected(self):
        """Test duplicates fail instead of being deduplicated."""
        targets = [BlockTarget("com.example.a"), BlockTarget("com.example.a", "Again")]
        with pytest.raises(MalformedTargetError, match="Duplicate"):
            AllOrNothingResolver().resolve(AccessState.LOCKED, targets)

    @pytest.mark.parametrize("identifier", ["", "   "])
    def test_empty_identifier_rejected(self, identifier):
        """Test blank identifiers are rejected."""
        with pytest.raises(MalformedTargetError, match="position 1"):
            validate_catalog([BlockTarget("com.example.a"), BlockTarget(identifier)])

    @pytest.mark.parametrize("identifier", [123, None])
    def test_non_string_identifier_rejected(self, identifier):
        """Test identifiers of the wrong type fail validation."""
        with pytest.raises(MalformedTargetError, match="non-string identifier"):
            validate_catalog([BlockTarget(identifier)])

    def test_validate_preserves_order(self, catalog):
        """Test identifiers come back in catalog order."""
        assert validate_catalog(catalog) == ["com.example.a", "com.example.b", "social"]


class TestResolveTargets:
    """Tests for the resolve_targets helper."""

    def test_defaults_to_all_or_nothing(self, catalog):
        """Test the default resolver is used when none is given."""
        resolved = resolve_targets(AccessState.UNLOCKED, catalog)
        assert resolved.to_dict() == {
            "blocked": [],
            "accessible": ["com.example.a", "com.example.b", "social"],
        }

    def test_custom_resolver(self, catalog):
        """Test a per-target resolver can stand in for the default."""

        class KeepCategoriesBlocked:
            def resolve_blocked(self, state, all_targets):
                return list(self.resolve(state, all_targets).blocked)

            def resolve_accessible(self, state, all_targets):
                return list(self.resolve(state, all_targets).accessible)

            def resolve(self, state, all_targets):
                if state != AccessState.UNLOCKED:
                    return AllOrNothingResolver().resolve(state, all_targets)
                blocked = tuple(
                    t.platform_agnostic_identifier
                    for t in all_targets
                    if t.kind.value == "category"
                )
                accessible = tuple(
                    t.platform_agnostic_identifier
                    for t in all_targets
                    if t.kind.value != "category"
                )
                return ResolvedTargets(blocked, accessible)

        resolver = KeepCategoriesBlocked()
        assert isinstance(resolver, TargetResolver)

        resolved = resolve_targets(AccessState.UNLOCKED, catalog, resolver)
        assert resolved.blocked == ("social",)
        assert resolved.accessible == ("com.example.a", "com.example.b")
