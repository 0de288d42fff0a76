"""Configuration models for YAML-based placement."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from zone_placer.errors import ConfigError
from zone_placer.selector import (
    LabelSelector,  # noqa: TC001 — Pydantic needs this at runtime
)
from zone_placer.topology import (
    StaticTopology,  # noqa: TC001 — Pydantic needs this at runtime
)


class StorageClassParameters(BaseSettings):
    """Admin zone restrictions from the provisioning template.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``ZONE_PLACER_`` prefix.  Constructor kwargs take precedence.
    ``zone`` and ``zones`` are mutually exclusive; the conflict surfaces when
    a resolver is configured from them.
    """

    model_config = SettingsConfigDict(env_prefix="ZONE_PLACER_", extra="forbid")

    zone: str | None = None
    zones: str | None = None


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


class VolumeClaim(BaseModel):
    """A storage request to place: its name drives the hash, its selector narrows zones."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    selector: LabelSelector | None = None


class Config(BaseModel):
    """Placement configuration, validated directly from YAML."""

    model_config = ConfigDict(extra="forbid")

    storage_class: StorageClassParameters = Field(default_factory=StorageClassParameters)
    topology: StaticTopology | None = None
    claims: Annotated[list[VolumeClaim], BeforeValidator(_none_to_list)] = []
    config_dir: Path = Path()

    def claim(self, name: str) -> VolumeClaim:
        for c in self.claims:
            if c.name == name:
                return c
        raise ConfigError(f"claim {name!r} is not declared")
