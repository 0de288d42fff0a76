"""YAML configuration loading and convenience placement API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from zone_placer.config.loader import ConfigError, load_config
from zone_placer.config.schema import Config, StorageClassParameters, VolumeClaim
from zone_placer.picker import choose_zone
from zone_placer.resolver import ZoneResolver
from zone_placer.types import Placement

if TYPE_CHECKING:
    from pathlib import Path

    from zone_placer.topology import ZoneTopology

__all__ = [
    "Config",
    "ConfigError",
    "StorageClassParameters",
    "VolumeClaim",
    "load",
    "load_config",
    "place",
    "place_all",
    "resolver_for",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def resolver_for(
    config: Config, claim: VolumeClaim, *, topology: ZoneTopology | None = None
) -> ZoneResolver:
    """Build a ``ZoneResolver`` for *claim* from the config's storage class parameters.

    *topology* overrides the static topology declared in the config.
    """
    if topology is None:
        topology = config.topology
    if topology is None:
        raise ConfigError("topology is required (declare it in YAML or pass one in)")
    resolver = ZoneResolver.from_topology(claim.selector, topology)
    params = config.storage_class
    if params.zone is not None:
        resolver.set_zone(params.zone)
    if params.zones is not None:
        resolver.set_zones(params.zones)
    return resolver


def place(
    config: Config, claim: VolumeClaim | str, *, topology: ZoneTopology | None = None
) -> Placement:
    """Resolve the eligible zones for *claim* and pick one of them."""
    if isinstance(claim, str):
        claim = config.claim(claim)
    zones = resolver_for(config, claim, topology=topology).resolve()
    return Placement(claim=claim.name, zones=sorted(zones), zone=choose_zone(zones, claim.name))


def place_all(config: Config, *, topology: ZoneTopology | None = None) -> list[Placement]:
    """Place every claim declared in the config, in declaration order."""
    return [place(config, claim, topology=topology) for claim in config.claims]
