"""Configuration models and helpers for SacredStar settings."""

from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Dict, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

CURRENT_SETTINGS_SCHEMA_VERSION = 1
CONFIG_FILENAME = "config.yaml"

# -------------------- Settings Schema --------------------


class EphemerisCfg(BaseModel):
    """Swiss Ephemeris source configuration."""

    path: Optional[str] = None
    sidereal_mode: Literal["lahiri", "krishnamurti", "raman", "fagan_bradley"] = "lahiri"
    node: Literal["true", "mean"] = "true"
    cache_size: int = 4096

    @field_validator("cache_size", mode="before")
    @classmethod
    def _cap_cache_size(cls, value: int) -> int:
        numeric = int(value)
        return max(0, min(1_000_000, numeric))


_DEFAULT_ORBS: Dict[str, float] = {
    "conjunction": 5.0,
    "sextile": 3.0,
    "square": 5.0,
    "trine": 5.0,
    "opposition": 5.0,
}
_NOMINALS: Dict[str, float] = {
    "conjunction": 0.0,
    "sextile": 60.0,
    "square": 90.0,
    "trine": 120.0,
    "opposition": 180.0,
}


class AspectsCfg(BaseModel):
    """Aspect orb tolerances in degrees."""

    orbs: Dict[str, float] = Field(default_factory=lambda: dict(_DEFAULT_ORBS))
    lunation_orb: float = 13.0

    @field_validator("orbs", mode="before")
    @classmethod
    def _cap_orbs(cls, value: Dict[str, float]) -> Dict[str, float]:
        merged = dict(_DEFAULT_ORBS)
        for key, orb in (value or {}).items():
            name = str(key).lower()
            if name not in _NOMINALS:
                raise ValueError(f"unknown aspect '{key}'")
            merged[name] = max(0.0, min(15.0, float(orb)))
        return merged

    @field_validator("lunation_orb", mode="before")
    @classmethod
    def _cap_lunation_orb(cls, value: float) -> float:
        numeric = float(value)
        return max(0.0, min(30.0, numeric))

    @model_validator(mode="after")
    def _windows_disjoint(self) -> "AspectsCfg":
        ordered = sorted(_NOMINALS.items(), key=lambda item: item[1])
        for (left, left_deg), (right, right_deg) in zip(ordered, ordered[1:]):
            if left_deg + self.orbs[left] >= right_deg - self.orbs[right]:
                raise ValueError(f"orb windows for {left} and {right} overlap")
        return self


class SearchCfg(BaseModel):
    """Edge-search tolerances shared by transits and dasha anchoring."""

    ingress_epsilon_deg: float = 0.1
    aspect_epsilon_deg: float = 1.0
    resolution_minutes: float = 60.0
    max_steps: int = 1000
    max_iterations: int = 64

    @field_validator("ingress_epsilon_deg", "aspect_epsilon_deg", mode="before")
    @classmethod
    def _cap_epsilon(cls, value: float) -> float:
        numeric = float(value)
        return max(1e-6, min(5.0, numeric))

    @field_validator("resolution_minutes", mode="before")
    @classmethod
    def _cap_resolution(cls, value: float) -> float:
        numeric = float(value)
        return max(0.01, min(24 * 60.0, numeric))

    @field_validator("max_steps", "max_iterations", mode="before")
    @classmethod
    def _cap_counts(cls, value: int) -> int:
        numeric = int(value)
        return max(1, min(10_000, numeric))


class DashaCfg(BaseModel):
    """Nakshatra anchoring parameters for the dasha tree."""

    sidereal_month_days: float = 27.326
    correction_window_days: float = 1.0
    correction_epsilon_deg: float = 0.001
    correction_resolution_seconds: float = 1.0

    @field_validator("correction_window_days", mode="before")
    @classmethod
    def _cap_window(cls, value: float) -> float:
        numeric = float(value)
        return max(0.1, min(5.0, numeric))

    @field_validator("correction_epsilon_deg", mode="before")
    @classmethod
    def _cap_correction_epsilon(cls, value: float) -> float:
        numeric = float(value)
        return max(1e-6, min(1.0, numeric))

    @field_validator("correction_resolution_seconds", mode="before")
    @classmethod
    def _cap_correction_resolution(cls, value: float) -> float:
        numeric = float(value)
        return max(0.01, min(3600.0, numeric))


class ObservabilityCfg(BaseModel):
    """Logging and metrics controls."""

    log_level: str = "INFO"
    metrics_enabled: bool = True


class Settings(BaseModel):
    """Top-level settings model persisted on disk."""

    schema_version: int = Field(
        default=CURRENT_SETTINGS_SCHEMA_VERSION,
        ge=1,
        description="Version marker for persisted configuration payloads.",
    )
    ephemeris: EphemerisCfg = Field(default_factory=EphemerisCfg)
    aspects: AspectsCfg = Field(default_factory=AspectsCfg)
    search: SearchCfg = Field(default_factory=SearchCfg)
    dasha: DashaCfg = Field(default_factory=DashaCfg)
    observability: ObservabilityCfg = Field(default_factory=ObservabilityCfg)


def get_config_home() -> Path:
    """Return the directory where settings should be stored."""

    return Path(os.environ.get("SACREDSTAR_HOME", str(Path.home() / ".sacredstar")))


def config_path() -> Path:
    """Return the full path to the configuration file, creating directories as needed."""

    home = get_config_home()
    home.mkdir(parents=True, exist_ok=True)
    return home / CONFIG_FILENAME


def default_settings() -> Settings:
    return Settings()


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Persist the given settings to disk as YAML."""

    target_path = Path(path) if path else config_path()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    data = settings.model_dump()
    with target_path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False, allow_unicode=True)
    return target_path


def _coerce_schema_version(raw: object) -> int:
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 1
    return max(1, value)


def _upgrade_settings_payload(
    data: dict[str, object], *, schema_version: int
) -> tuple[dict[str, object], bool]:
    """Apply in-place upgrades required for older settings payloads."""

    upgraded = deepcopy(data)
    version = max(1, schema_version)
    changed = False

    if version < CURRENT_SETTINGS_SCHEMA_VERSION:
        version = CURRENT_SETTINGS_SCHEMA_VERSION
        changed = True

    if upgraded.get("schema_version") != version:
        upgraded["schema_version"] = version
        changed = True

    return upgraded, changed


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from disk, creating defaults if missing."""

    source_path = Path(path) if path else config_path()
    if not source_path.exists():
        settings = default_settings()
        save_settings(settings, source_path)
        return settings
    with source_path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, dict):
        raw = {}
    schema_version = _coerce_schema_version(raw.get("schema_version"))
    data, upgraded = _upgrade_settings_payload(raw, schema_version=schema_version)
    settings = Settings(**data)
    if upgraded:
        save_settings(settings, source_path)
    return settings
