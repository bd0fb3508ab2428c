"""
STARCATALOG Configuration

Configuration models for the star catalog engine, validated with pydantic and
loaded from YAML. Values are resolved in this order (later wins):

    1. Model defaults
    2. First configuration file found (or the explicit path given)
    3. Environment variables STARCATALOG_<SECTION>_<FIELD>

Usage:
    from starcatalog.config import load_config

    config = load_config()                      # auto-discover
    config = load_config("/etc/starcatalog.yaml")
    print(config.catalogs.basedir)
"""

import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from starcatalog.exceptions import ConfigurationError

ENV_PREFIX = "STARCATALOG_"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Section Models
# =============================================================================

class CatalogPaths(BaseModel):
    """Location of the catalog files on disk.

    The merged file backend expects the subdirectories bsc, hipparcos, sao,
    tycho2 and u4 below basedir; the deep sky catalogs live in ngcic, pgc
    and stellarium below deepsky_dir.
    """
    basedir: str = "/usr/local/starcatalogs"
    deepsky_dir: str = "/usr/local/starcatalogs/deepsky"


class MergeConfig(BaseModel):
    """Cutover magnitudes of the merged file backend."""
    bsc_cutover: float = Field(default=4.5, ge=-30.0, le=30.0)
    hipparcos_cutover: float = Field(default=7.0, ge=-30.0, le=30.0)
    tycho2_cutover: float = Field(default=10.0, ge=-30.0, le=30.0)

    @model_validator(mode="after")
    def _check_order(self) -> "MergeConfig":
        if not (self.bsc_cutover <= self.hipparcos_cutover <= self.tycho2_cutover):
            raise ValueError(
                "cutover magnitudes must increase from BSC to Tycho-2"
            )
        return self


class DatabaseConfig(BaseModel):
    """SQLite star database settings."""
    path: str = "starcatalog.db"
    log_interval: int = Field(default=100000, ge=1)


class StarCatalogConfig(BaseModel):
    """Master configuration of the star catalog engine."""
    catalogs: CatalogPaths = Field(default_factory=CatalogPaths)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    log_level: LogLevel = "INFO"
    log_file: Optional[str] = None


# =============================================================================
# Loading
# =============================================================================

def get_config_paths() -> list[Path]:
    """Return the configuration file locations, in search order."""
    return [
        Path("./starcatalog.yaml"),
        Path.home() / ".starcatalog" / "config.yaml",
        Path("/etc/starcatalog/config.yaml"),
    ]


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in configuration file: {e}", config_file=str(path)
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Invalid YAML in configuration file: top level must be a mapping",
            config_file=str(path),
        )
    return data


def _coerce(value: str, current: Any) -> Any:
    """Convert an environment string to the type of the current value."""
    if isinstance(current, bool):
        return value.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    defaults = StarCatalogConfig().model_dump()
    for section, fields in defaults.items():
        if not isinstance(fields, dict):
            key = f"{ENV_PREFIX}{section.upper()}"
            if key in os.environ:
                data[section] = _coerce(os.environ[key], fields)
            continue
        # an empty section in the file means all defaults
        if data.get(section, {}) is None:
            data[section] = {}
        if not isinstance(data.get(section, {}), dict):
            raise ConfigurationError(
                f"Configuration section '{section}' must be a mapping",
                config_key=section,
            )
        for name, default in fields.items():
            key = f"{ENV_PREFIX}{section.upper()}_{name.upper()}"
            if key not in os.environ:
                continue
            current = data.get(section, {}).get(name, default)
            try:
                value = _coerce(os.environ[key], current)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value in environment variable {key}",
                    config_key=f"{section}.{name}",
                ) from e
            data.setdefault(section, {})[name] = value
    return data


def load_config(path: Optional[str | Path] = None) -> StarCatalogConfig:
    """Load and validate the configuration.

    Args:
        path: Explicit configuration file. If None, the first existing file
              from get_config_paths() is used; without one, defaults apply.

    Returns:
        Validated StarCatalogConfig

    Raises:
        ConfigurationError: file not found, invalid YAML, or validation failed
    """
    data: dict[str, Any] = {}
    source: Optional[Path] = None

    if path is not None:
        source = Path(path)
        if not source.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {source}", config_file=str(source)
            )
    else:
        for candidate in get_config_paths():
            if candidate.is_file():
                source = candidate
                break

    if source is not None:
        data = _read_yaml(source)

    data = _apply_env_overrides(data)

    try:
        return StarCatalogConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed: {e}",
            config_file=str(source) if source else None,
        ) from e
