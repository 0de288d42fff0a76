"""Cluster topology lookups and the cached region -> zones index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from pydantic import BaseModel, ConfigDict

from zone_placer.errors import TopologyLookupError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


class ZoneTopology(Protocol):
    """Protocol for topology providers.

    Providers list the zones usable in the cluster and map a single zone to
    its region. There is no bulk region -> zones lookup.
    """

    def list_zones(self) -> Iterable[str]:
        """Return every zone currently usable in the cluster."""
        ...

    def zone_to_region(self, zone: str) -> str:
        """Return the region *zone* belongs to."""
        ...


class StaticTopology(BaseModel):
    """Topology declared up front as a zone -> region mapping.

    Examples:
        topology = StaticTopology(zones={"us-east-1a": "us-east-1", "eu-west-1a": "eu-west-1"})
        resolver = ZoneResolver.from_topology(selector, topology)
    """

    model_config = ConfigDict(extra="forbid")

    zones: dict[str, str]

    def list_zones(self) -> frozenset[str]:
        return frozenset(self.zones)

    def zone_to_region(self, zone: str) -> str:
        try:
            return self.zones[zone]
        except KeyError as e:
            raise TopologyLookupError(zone) from e


class RegionZoneIndex:
    """Compute-once view over the two topology lookups.

    ``all_zones()`` caches the zone listing and ``zones_for_region()`` builds
    the full region -> zones map on first use by looking up every zone's
    region. Failures of either lookup propagate unchanged and leave the
    corresponding cache empty, so a later call tries again.
    """

    def __init__(
        self,
        list_zones: Callable[[], Iterable[str]],
        zone_to_region: Callable[[str], str],
    ) -> None:
        self._list_zones = list_zones
        self._zone_to_region = zone_to_region
        self._all_zones: frozenset[str] | None = None
        self._region_to_zones: dict[str, frozenset[str]] | None = None

    @property
    def is_built(self) -> bool:
        return self._region_to_zones is not None

    def all_zones(self) -> frozenset[str]:
        if self._all_zones is None:
            self._all_zones = frozenset(self._list_zones())
            logger.debug("Listed %d available zone(s)", len(self._all_zones))
        return self._all_zones

    def zones_for_region(self, region: str) -> frozenset[str]:
        """Zones in *region*; empty when the cluster has none there."""
        return self._index().get(region, frozenset())

    def zones_for_regions(self, regions: Iterable[str]) -> frozenset[str]:
        zones: frozenset[str] = frozenset()
        for region in regions:
            zones = zones | self.zones_for_region(region)
        return zones

    def _index(self) -> dict[str, frozenset[str]]:
        if self._region_to_zones is not None:
            return self._region_to_zones

        grouped: dict[str, set[str]] = {}
        for zone in self.all_zones():
            try:
                region = self._zone_to_region(zone)
            except Exception:
                logger.debug("Failed to convert zone %s to a region", zone)
                raise
            grouped.setdefault(region, set()).add(zone)

        self._region_to_zones = {region: frozenset(zones) for region, zones in grouped.items()}
        logger.debug("Built region index: %d region(s)", len(self._region_to_zones))
        return self._region_to_zones
