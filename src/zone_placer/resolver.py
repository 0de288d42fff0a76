"""Eligible zone resolution for a single claim."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Self

from zone_placer.errors import ConfigConflictError, ConfigParseError, UnsatisfiableError
from zone_placer.selector import (
    REGION_KEY,
    ZONE_KEY,
    Operator,
    match_expressions,
    match_label,
    validate_selector,
)
from zone_placer.topology import RegionZoneIndex

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from zone_placer.selector import LabelSelector
    from zone_placer.topology import ZoneTopology

logger = logging.getLogger(__name__)


def parse_zone_list(value: str) -> frozenset[str]:
    """Parse a comma separated zone list; whitespace around zones is ignored.

    Raises:
        ConfigParseError: If any entry is empty.
    """
    zones: set[str] = set()
    for token in value.split(","):
        zone = token.strip()
        if not zone:
            raise ConfigParseError(value)
        zones.add(zone)
    return frozenset(zones)


class ZoneResolver:
    """Intersect admin zone overrides, available zones and a claim selector.

    One resolver serves one claim and is not shared. Constraints apply in a
    fixed order: zone label, region label, ``In`` zone expressions, ``In``
    region expressions, ``NotIn`` zone expressions, ``NotIn`` region
    expressions. Each expression is its own pass, so two ``In`` expressions
    on the same key behave as an AND of two OR-groups.

    Examples:
        resolver = ZoneResolver(claim.selector, cloud.list_zones, cloud.zone_to_region)
        resolver.set_zones("us-east-1a,us-east-1b")
        zones = resolver.resolve()
    """

    def __init__(
        self,
        selector: LabelSelector | None,
        list_zones: Callable[[], Iterable[str]],
        zone_to_region: Callable[[str], str],
    ) -> None:
        self.selector = selector
        self.index = RegionZoneIndex(list_zones, zone_to_region)
        self._zone: str | None = None
        self._zones: frozenset[str] | None = None

    @classmethod
    def from_topology(cls, selector: LabelSelector | None, topology: ZoneTopology) -> Self:
        return cls(selector, topology.list_zones, topology.zone_to_region)

    def set_zone(self, zone: str) -> None:
        """Restrict placement to a single admin-configured zone."""
        if self._zones is not None:
            raise ConfigConflictError
        self._zone = zone

    def set_zones(self, zones: str) -> None:
        """Restrict placement to a comma separated list of admin-configured zones."""
        if self._zone is not None:
            raise ConfigConflictError
        self._zones = parse_zone_list(zones)

    def _initial_zones(self) -> frozenset[str]:
        if self._zone is not None:
            return frozenset({self._zone})
        if self._zones is not None:
            return self._zones
        return self.index.all_zones()

    def resolve(self) -> frozenset[str]:
        """Return the zones satisfying the admin overrides and the claim selector.

        Raises:
            SelectorValidationError: If the selector is malformed.
            UnsatisfiableError: If no zone is left after applying every constraint.
        """
        zones = self._initial_zones()
        if validate_selector(self.selector):
            return zones

        zone_label = match_label(self.selector, ZONE_KEY)
        if zone_label is not None:
            zones = zones & {zone_label}

        region_label = match_label(self.selector, REGION_KEY)
        if region_label is not None:
            zones = zones & self.index.zones_for_region(region_label)

        zone_sets = match_expressions(self.selector, ZONE_KEY, Operator.IN)
        if zone_sets is not None:
            for zone_set in zone_sets:
                zones = zones & zone_set

        region_sets = match_expressions(self.selector, REGION_KEY, Operator.IN)
        if region_sets is not None:
            for region_set in region_sets:
                zones = zones & self.index.zones_for_regions(region_set)

        zone_sets = match_expressions(self.selector, ZONE_KEY, Operator.NOT_IN)
        if zone_sets is not None:
            for zone_set in zone_sets:
                zones = zones - zone_set

        region_sets = match_expressions(self.selector, REGION_KEY, Operator.NOT_IN)
        if region_sets is not None:
            for region_set in region_sets:
                zones = zones - self.index.zones_for_regions(region_set)

        if not zones:
            raise UnsatisfiableError(
                "could not find availability zone: combination of StorageClass parameters "
                "and selector of this claim cannot be satisfied by this cluster"
            )
        logger.debug("Resolved eligible zones: %s", sorted(zones))
        return zones
