"""Zone and region placement for dynamically provisioned volumes."""

from zone_placer.errors import (
    ConfigConflictError,
    ConfigError,
    ConfigParseError,
    QuantityParseError,
    SelectorValidationError,
    TopologyLookupError,
    UnsatisfiableError,
    ZonePlacementError,
)
from zone_placer.picker import choose_zone
from zone_placer.resolver import ZoneResolver, parse_zone_list
from zone_placer.selector import (
    REGION_KEY,
    ZONE_KEY,
    LabelSelector,
    LabelSelectorRequirement,
    Operator,
)
from zone_placer.topology import RegionZoneIndex, StaticTopology, ZoneTopology
from zone_placer.types import Placement
from zone_placer.volume import (
    calculate_timeout_for_volume,
    generate_volume_name,
    parse_quantity,
    round_up_size,
    round_up_to_gib,
)

__version__ = "0.1.0"

__all__ = [
    "REGION_KEY",
    "ZONE_KEY",
    "ConfigConflictError",
    "ConfigError",
    "ConfigParseError",
    "LabelSelector",
    "LabelSelectorRequirement",
    "Operator",
    "Placement",
    "QuantityParseError",
    "RegionZoneIndex",
    "SelectorValidationError",
    "StaticTopology",
    "TopologyLookupError",
    "UnsatisfiableError",
    "ZonePlacementError",
    "ZoneResolver",
    "ZoneTopology",
    "__version__",
    "calculate_timeout_for_volume",
    "choose_zone",
    "generate_volume_name",
    "parse_quantity",
    "parse_zone_list",
    "round_up_size",
    "round_up_to_gib",
]
