"""Tests for ZoneResolver."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from zone_placer.errors import (
    ConfigConflictError,
    ConfigParseError,
    SelectorValidationError,
    UnsatisfiableError,
)
from zone_placer.resolver import ZoneResolver, parse_zone_list
from zone_placer.selector import REGION_KEY, ZONE_KEY, LabelSelector, LabelSelectorRequirement
from zone_placer.topology import StaticTopology

_TOPOLOGY = StaticTopology(
    zones={
        "us-east-1a": "us-east-1",
        "us-east-1b": "us-east-1",
        "us-east-1c": "us-east-1",
        "us-west-2a": "us-west-2",
        "us-west-2b": "us-west-2",
        "eu-west-1a": "eu-west-1",
    }
)


def _expr(key: str, operator: str, *values: str) -> LabelSelectorRequirement:
    return LabelSelectorRequirement(key=key, operator=operator, values=list(values))


def _resolver(selector: LabelSelector | None = None) -> ZoneResolver:
    return ZoneResolver.from_topology(selector, _TOPOLOGY)


class TestParseZoneList:
    def test_parses_and_strips(self) -> None:
        assert parse_zone_list("us-east-1a, us-east-1b ,us-east-1c") == frozenset(
            {"us-east-1a", "us-east-1b", "us-east-1c"}
        )

    def test_single(self) -> None:
        assert parse_zone_list("us-east-1a") == frozenset({"us-east-1a"})

    def test_duplicates_collapse(self) -> None:
        assert parse_zone_list("a,a,b") == frozenset({"a", "b"})

    @pytest.mark.parametrize("value", ["", "a,,b", "a, ,b", "a,", ",a"])
    def test_empty_token(self, value: str) -> None:
        with pytest.raises(ConfigParseError, match="must not contain an empty zone"):
            parse_zone_list(value)


class TestOverrides:
    def test_zone_then_zones_conflicts(self) -> None:
        resolver = _resolver()
        resolver.set_zone("us-east-1a")
        with pytest.raises(ConfigConflictError, match="must not be used at the same time"):
            resolver.set_zones("us-east-1a,us-east-1b")

    def test_zones_then_zone_conflicts(self) -> None:
        resolver = _resolver()
        resolver.set_zones("us-east-1a,us-east-1b")
        with pytest.raises(ConfigConflictError):
            resolver.set_zone("us-east-1a")

    def test_bad_zones_rejected(self) -> None:
        resolver = _resolver()
        with pytest.raises(ConfigParseError):
            resolver.set_zones("us-east-1a,,us-east-1b")
        # A rejected list leaves no override behind.
        resolver.set_zone("us-east-1a")
        assert resolver.resolve() == frozenset({"us-east-1a"})

    def test_zone_override_skips_listing(self) -> None:
        list_zones = MagicMock(return_value={"a", "b"})
        resolver = ZoneResolver(None, list_zones, MagicMock())
        resolver.set_zone("a")
        assert resolver.resolve() == frozenset({"a"})
        list_zones.assert_not_called()

    def test_zone_override_may_name_unlisted_zone(self) -> None:
        resolver = _resolver()
        resolver.set_zones("zone-x,zone-y")
        assert resolver.resolve() == frozenset({"zone-x", "zone-y"})


class TestEmptySelector:
    @pytest.mark.parametrize("selector", [None, LabelSelector()])
    def test_all_zones(self, selector: LabelSelector | None) -> None:
        assert _resolver(selector).resolve() == _TOPOLOGY.list_zones()

    def test_override_returned_unchanged(self) -> None:
        resolver = _resolver(LabelSelector())
        resolver.set_zones("us-east-1a,us-west-2a")
        assert resolver.resolve() == frozenset({"us-east-1a", "us-west-2a"})


class TestValidation:
    def test_bad_key_fails_before_lookups(self) -> None:
        zone_to_region = MagicMock()
        selector = LabelSelector(match_labels={"rack": "r1"})
        resolver = ZoneResolver(selector, MagicMock(return_value={"a"}), zone_to_region)

        with pytest.raises(SelectorValidationError, match="rack"):
            resolver.resolve()
        zone_to_region.assert_not_called()

    def test_in_without_values(self) -> None:
        resolver = _resolver(LabelSelector(match_expressions=[_expr(ZONE_KEY, "In")]))
        with pytest.raises(SelectorValidationError):
            resolver.resolve()


class TestMatchLabels:
    def test_zone_label(self) -> None:
        selector = LabelSelector(match_labels={ZONE_KEY: "us-west-2b"})
        assert _resolver(selector).resolve() == frozenset({"us-west-2b"})

    def test_region_label(self) -> None:
        selector = LabelSelector(match_labels={REGION_KEY: "us-west-2"})
        assert _resolver(selector).resolve() == frozenset({"us-west-2a", "us-west-2b"})

    def test_zone_and_region_label(self) -> None:
        selector = LabelSelector(match_labels={ZONE_KEY: "us-east-1a", REGION_KEY: "us-east-1"})
        assert _resolver(selector).resolve() == frozenset({"us-east-1a"})

    def test_zone_label_outside_override(self) -> None:
        resolver = _resolver(LabelSelector(match_labels={ZONE_KEY: "eu-west-1a"}))
        resolver.set_zones("us-east-1a,us-east-1b")
        with pytest.raises(UnsatisfiableError, match="cannot be satisfied"):
            resolver.resolve()


class TestMatchExpressions:
    def test_in_zone_with_admin_zones(self) -> None:
        resolver = _resolver(
            LabelSelector(match_expressions=[_expr(ZONE_KEY, "In", "us-east-1a", "us-east-1b")])
        )
        resolver.set_zones("us-east-1a,us-east-1b,us-east-1c")
        assert resolver.resolve() == frozenset({"us-east-1a", "us-east-1b"})

    def test_in_zone_expressions_are_anded(self) -> None:
        selector = LabelSelector(
            match_expressions=[
                _expr(ZONE_KEY, "In", "us-east-1a", "us-east-1b", "us-west-2a"),
                _expr(ZONE_KEY, "In", "us-west-2a", "eu-west-1a"),
            ]
        )
        assert _resolver(selector).resolve() == frozenset({"us-west-2a"})

    def test_not_in_zone(self) -> None:
        resolver = ZoneResolver(
            LabelSelector(match_expressions=[_expr(ZONE_KEY, "NotIn", "b")]),
            lambda: {"a", "b", "c", "d"},
            MagicMock(),
        )
        assert resolver.resolve() == frozenset({"a", "c", "d"})

    def test_in_region_unions_regions(self) -> None:
        selector = LabelSelector(
            match_expressions=[_expr(REGION_KEY, "In", "us-west-2", "eu-west-1")]
        )
        assert _resolver(selector).resolve() == frozenset(
            {"us-west-2a", "us-west-2b", "eu-west-1a"}
        )

    def test_in_region_expressions_are_anded(self) -> None:
        selector = LabelSelector(
            match_expressions=[
                _expr(REGION_KEY, "In", "us-west-2", "eu-west-1"),
                _expr(REGION_KEY, "In", "eu-west-1", "us-east-1"),
            ]
        )
        assert _resolver(selector).resolve() == frozenset({"eu-west-1a"})

    def test_in_region_without_zones_is_unsatisfiable(self) -> None:
        selector = LabelSelector(match_expressions=[_expr(REGION_KEY, "In", "ap-south-1")])
        with pytest.raises(UnsatisfiableError):
            _resolver(selector).resolve()

    def test_not_in_region(self) -> None:
        selector = LabelSelector(
            match_expressions=[_expr(REGION_KEY, "NotIn", "us-east-1", "us-west-2")]
        )
        assert _resolver(selector).resolve() == frozenset({"eu-west-1a"})

    def test_in_then_not_in(self) -> None:
        selector = LabelSelector(
            match_expressions=[
                _expr(ZONE_KEY, "NotIn", "us-east-1a"),
                _expr(REGION_KEY, "In", "us-east-1"),
            ]
        )
        assert _resolver(selector).resolve() == frozenset({"us-east-1b", "us-east-1c"})

    def test_everything_excluded(self) -> None:
        selector = LabelSelector(
            match_expressions=[
                _expr(REGION_KEY, "In", "eu-west-1"),
                _expr(ZONE_KEY, "NotIn", "eu-west-1a"),
            ]
        )
        with pytest.raises(UnsatisfiableError):
            _resolver(selector).resolve()


class TestCaching:
    def test_index_built_once_across_region_constraints(self) -> None:
        zone_to_region = MagicMock(side_effect=_TOPOLOGY.zone_to_region)
        list_zones = MagicMock(side_effect=_TOPOLOGY.list_zones)
        selector = LabelSelector(
            match_labels={REGION_KEY: "us-east-1"},
            match_expressions=[
                _expr(REGION_KEY, "In", "us-east-1", "us-west-2"),
                _expr(REGION_KEY, "NotIn", "eu-west-1"),
            ],
        )
        resolver = ZoneResolver(selector, list_zones, zone_to_region)

        assert resolver.resolve() == frozenset({"us-east-1a", "us-east-1b", "us-east-1c"})
        list_zones.assert_called_once_with()
        assert zone_to_region.call_count == len(_TOPOLOGY.zones)

    def test_resolve_is_repeatable(self) -> None:
        zone_to_region = MagicMock(side_effect=_TOPOLOGY.zone_to_region)
        selector = LabelSelector(match_labels={REGION_KEY: "us-west-2"})
        resolver = ZoneResolver(selector, _TOPOLOGY.list_zones, zone_to_region)

        assert resolver.resolve() == resolver.resolve()
        assert zone_to_region.call_count == len(_TOPOLOGY.zones)

    def test_zone_only_selector_skips_region_lookups(self) -> None:
        zone_to_region = MagicMock()
        selector = LabelSelector(match_expressions=[_expr(ZONE_KEY, "In", "us-east-1a")])
        resolver = ZoneResolver(selector, _TOPOLOGY.list_zones, zone_to_region)

        assert resolver.resolve() == frozenset({"us-east-1a"})
        zone_to_region.assert_not_called()


class TestExternalFailures:
    def test_list_zones_failure_propagates(self) -> None:
        resolver = ZoneResolver(None, MagicMock(side_effect=ConnectionError("refused")), MagicMock())
        with pytest.raises(ConnectionError, match="refused"):
            resolver.resolve()

    def test_zone_to_region_failure_propagates(self) -> None:
        selector = LabelSelector(match_labels={REGION_KEY: "us-east-1"})
        resolver = ZoneResolver(
            selector, _TOPOLOGY.list_zones, MagicMock(side_effect=TimeoutError("slow"))
        )
        with pytest.raises(TimeoutError, match="slow"):
            resolver.resolve()
