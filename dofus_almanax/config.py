"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      committed static defaults
  2. ``config/local.toml``        optional local overrides (gitignored)
  3. ``.env``                     local env overrides (gitignored)
  4. Environment variables        ``DOFUS_ALMANAX_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI and the aggregation entry point receive an ``AppConfig`` instance,
never raw dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from dofus_almanax.models.preferences import DEFAULT_LEVEL, SOURCE_LANGUAGE

# ── Sub-config models ─────────────────────────────────────────────────────────


class ApiConfig(BaseModel):
    """Upstream data provider endpoints.

    Both providers are public dofusdu.de APIs: the primary one serves the
    current game data, the secondary one the older game version whose item
    images are often of better quality.
    """

    model_config = ConfigDict(frozen=True)

    primary_base_url: str = "https://api.dofusdu.de/dofus3/v1"
    secondary_base_url: str = "https://api.dofusdu.de/dofus2"
    range_size: int = 7
    timeout_seconds: float = 10.0

    @field_validator("primary_base_url", "secondary_base_url")
    @classmethod
    def normalize_base_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Base URL must be http(s), got '{v}'.")
        return v.rstrip("/")

    @field_validator("range_size")
    @classmethod
    def validate_range_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"range_size must be positive, got {v}.")
        return v


class PreferencesConfig(BaseModel):
    """Defaults applied when the user never chose a level or language."""

    model_config = ConfigDict(frozen=True)

    default_level: int = DEFAULT_LEVEL
    default_language: str = SOURCE_LANGUAGE
    supported_languages: list[str] = ["fr", "en", "de", "es", "pt"]
    store_path: str = "data/preferences.json"

    @field_validator("default_level")
    @classmethod
    def validate_level(cls, v: int) -> int:
        if not 1 <= v <= 200:
            raise ValueError(f"default_level must be in [1, 200], got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    api: ApiConfig = ApiConfig()
    preferences: PreferencesConfig = PreferencesConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply DOFUS_ALMANAX_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply DOFUS_ALMANAX_* env vars to the raw config dict.

    Supported overrides:
      DOFUS_ALMANAX_PRIMARY_BASE_URL    → raw["api"]["primary_base_url"]
      DOFUS_ALMANAX_SECONDARY_BASE_URL  → raw["api"]["secondary_base_url"]
      DOFUS_ALMANAX_LANGUAGE            → raw["preferences"]["default_language"]
      DOFUS_ALMANAX_LOG_LEVEL           → raw["logging"]["level"]
      DOFUS_ALMANAX_DEBUG               → raw["debug"]
    """
    if primary := os.environ.get("DOFUS_ALMANAX_PRIMARY_BASE_URL"):
        raw.setdefault("api", {})["primary_base_url"] = primary

    if secondary := os.environ.get("DOFUS_ALMANAX_SECONDARY_BASE_URL"):
        raw.setdefault("api", {})["secondary_base_url"] = secondary

    if language := os.environ.get("DOFUS_ALMANAX_LANGUAGE"):
        raw.setdefault("preferences", {})["default_language"] = language

    if log_level := os.environ.get("DOFUS_ALMANAX_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("DOFUS_ALMANAX_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        api=ApiConfig(**raw.get("api", {})),
        preferences=PreferencesConfig(**raw.get("preferences", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
