"""Crop sensitivity profiles and their YAML overrides."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from harvest_guard.core.config import settings

logger = logging.getLogger(__name__)


class CropProfile(BaseModel):
    """Multipliers applied by the risk scorer for one crop type."""

    humidity_factor: float = 1.0
    temperature_factor: float = 1.0
    storage_sensitivity: float = 1.0


class CropProfileFile(BaseModel):
    """Layout of config/crop_profiles.yml."""

    profiles: dict[str, CropProfile] = Field(default_factory=dict)


DEFAULT_PROFILE = CropProfile()

BUILTIN_PROFILES: dict[str, CropProfile] = {
    "Paddy/Rice": CropProfile(humidity_factor=1.2, temperature_factor=1.0, storage_sensitivity=1.1),
    "Rice": CropProfile(humidity_factor=1.2, temperature_factor=1.0, storage_sensitivity=1.1),
    "Wheat": CropProfile(humidity_factor=1.0, temperature_factor=0.9, storage_sensitivity=1.0),
    "Maize": CropProfile(humidity_factor=1.1, temperature_factor=1.0, storage_sensitivity=1.05),
}


class CropProfileTable:
    """Lookup of crop type to profile; unknown crops get neutral factors."""

    def __init__(self, profiles: dict[str, CropProfile] | None = None) -> None:
        self._profiles = dict(BUILTIN_PROFILES if profiles is None else profiles)
        self._folded = {name.casefold(): profile for name, profile in self._profiles.items()}

    def get(self, crop_type: str | None) -> CropProfile:
        if not crop_type:
            return DEFAULT_PROFILE
        profile = self._profiles.get(crop_type)
        if profile is None:
            profile = self._folded.get(crop_type.strip().casefold(), DEFAULT_PROFILE)
        return profile

    def names(self) -> list[str]:
        return sorted(self._profiles)


def load_crop_profiles(path: str | Path | None = None) -> CropProfileTable:
    """Return the built-in table merged with overrides from ``path`` when present."""

    config_path = Path(path or settings.crop_profiles_path)
    profiles = dict(BUILTIN_PROFILES)
    if not config_path.exists():
        logger.debug("No crop profile overrides at %s", config_path)
        return CropProfileTable(profiles)

    try:
        raw: Any = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        parsed = CropProfileFile.model_validate(raw)
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        logger.warning("Ignoring invalid crop profile file %s: %s", config_path, exc)
        return CropProfileTable(profiles)

    profiles.update(parsed.profiles)
    logger.info("Loaded %d crop profile overrides from %s", len(parsed.profiles), config_path)
    return CropProfileTable(profiles)


__all__ = [
    "CropProfile",
    "CropProfileTable",
    "BUILTIN_PROFILES",
    "DEFAULT_PROFILE",
    "load_crop_profiles",
]
