"""Zone placement error types."""

from __future__ import annotations


class ZonePlacementError(Exception):
    """Base exception for zone placement errors."""


class ConfigConflictError(ZonePlacementError):
    """Raised when both the ``zone`` and ``zones`` overrides are configured."""

    def __init__(self) -> None:
        super().__init__(
            "both zone and zones StorageClass parameters must not be used at the same time"
        )


class ConfigParseError(ZonePlacementError):
    """Raised when a comma separated zone list cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"comma separated list of zones ({value!r}) must not contain an empty zone"
        )
        self.value = value


class SelectorValidationError(ZonePlacementError):
    """Raised when a claim selector uses a key, operator or value count we don't support."""

    def __init__(self, message: str, *, key: str, operator: str | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.operator = operator


class TopologyLookupError(ZonePlacementError, LookupError):
    """Raised by a static topology asked about a zone it does not know."""

    def __init__(self, zone: str) -> None:
        super().__init__(f"zone {zone!r} is not part of the topology")
        self.zone = zone


class UnsatisfiableError(ZonePlacementError):
    """No zone satisfies the combined constraints."""


class QuantityParseError(ZonePlacementError, ValueError):
    """Raised when a storage quantity string is malformed."""

    def __init__(self, value: str) -> None:
        super().__init__(f"invalid storage quantity: {value!r}")
        self.value = value


class ConfigError(ZonePlacementError):
    """Raised for configuration loading / validation errors."""
