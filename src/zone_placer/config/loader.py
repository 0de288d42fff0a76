"""YAML configuration file loader."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML

from zone_placer.config.schema import Config
from zone_placer.errors import ConfigError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from zone_placer.config.schema import VolumeClaim


# Field name → environment variable.
_STORAGE_CLASS_ENV_MAP: dict[str, str] = {
    "zone": "ZONE_PLACER_ZONE",
    "zones": "ZONE_PLACER_ZONES",
}


def _resolve_storage_class(raw_storage_class: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Resolve storage class parameters from YAML, env vars, and ``.env`` file.

    Priority (highest wins): YAML > env vars > ``.env`` file. ``zone`` and
    ``zones`` are one override, so both come from the highest source that
    sets either of them. Fields outside the env map are passed through
    untouched for validation.
    """
    resolved: dict[str, Any] = dict(raw_storage_class)
    if any(raw_storage_class.get(field) is not None for field in _STORAGE_CLASS_ENV_MAP):
        return resolved

    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    for source in (os.environ, dotenv_vals):
        found = {
            field: source[env_key]
            for field, env_key in _STORAGE_CLASS_ENV_MAP.items()
            if source.get(env_key) is not None
        }
        if found:
            resolved.update(found)
            break

    return resolved


def _validate_unique_names(claims: list[VolumeClaim]) -> list[str]:
    """Check that no two claims share the same name."""
    seen: dict[str, int] = {}  # name → first index
    errors: list[str] = []
    for i, c in enumerate(claims):
        if c.name in seen:
            errors.append(
                f"Duplicate claim name '{c.name}': "
                f"found at claims[{seen[c.name]}] and claims[{i}]"
            )
        else:
            seen[c.name] = i
    return errors


def load_config(path: Path | str) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    Raises:
        ConfigError: On YAML parse errors or validation failures.
    """
    path = Path(path)

    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    try:
        storage_class = raw.get("storage_class") or {}
        if isinstance(storage_class, dict):
            raw["storage_class"] = _resolve_storage_class(storage_class, path.parent)
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    config.config_dir = path.parent

    errors = _validate_unique_names(config.claims)
    if errors:
        raise ConfigError("\n".join(errors))

    logger.info("Loaded config from %s (%d claims)", path, len(config.claims))
    return config
