"""
Configuration management for pkgverify.

Handles loading, validation, and access to verifier configuration.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from pkgverify.verifier.models import OSType


# Default configuration paths
DEFAULT_CONFIG_PATH = Path("/etc/pkgverify/pkgverify.yaml")
DEFAULT_DATABASE_URI = "sqlite:////var/lib/pkgverify/baseline.db"

DATABASE_URI_ENV = "PKGVERIFY_DATABASE_URI"
CONFIG_PATH_ENV = "PKGVERIFY_CONFIG"

CONFIG_SEARCH_PATHS = (
    DEFAULT_CONFIG_PATH,
    Path("config/pkgverify.yaml"),
    Path("pkgverify.yaml"),
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class DatabaseConfig:
    """Baseline store settings."""

    uri: str | None = None
    echo: bool = False
    pool_pre_ping: bool = True

    def __post_init__(self) -> None:
        # Load URI from environment if not set
        if self.uri is None:
            self.uri = os.environ.get(DATABASE_URI_ENV, DEFAULT_DATABASE_URI)

    def engine_options(self) -> dict[str, Any]:
        """Keyword arguments for BaselineStore.open()."""
        return {"echo": self.echo, "pool_pre_ping": self.pool_pre_ping}


@dataclass
class VerifierConfig:
    """Compliance verifier settings."""

    version_independent_os_types: list[str] = field(
        default_factory=lambda: [OSType.ANDROID.value]
    )

    def os_types(self) -> frozenset[OSType]:
        """
        Get the version-independent OS types.

        Raises:
            ValueError: If an unknown OS type is named
        """
        return frozenset(
            OSType.from_name(name) for name in self.version_independent_os_types
        )


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "info"
    format: str = LOG_FORMAT


@dataclass
class PkgVerifyConfig:
    """Main configuration container."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    verifier: VerifierConfig = field(default_factory=VerifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PkgVerifyConfig:
        """Create configuration from dictionary."""
        return cls(
            database=DatabaseConfig(**data.get("database", {})),
            verifier=VerifierConfig(**data.get("verifier", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )


def find_config() -> Path | None:
    """
    Locate the configuration file.

    PKGVERIFY_CONFIG wins over the search paths, even when it names a
    file that does not exist, so a typo is reported instead of ignored.
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)
    return next((p for p in CONFIG_SEARCH_PATHS if p.exists()), None)


def load_config(path: str | Path | None = None) -> PkgVerifyConfig:
    """
    Load configuration from YAML file.

    Without a file the defaults apply; the database URI then comes from
    PKGVERIFY_DATABASE_URI, or the packaged SQLite path when that is unset.
    A file that leaves out database.uri gets the same fallback.

    Args:
        path: Path to configuration file. If None, uses find_config().

    Returns:
        PkgVerifyConfig instance with loaded settings.

    Raises:
        FileNotFoundError: If the chosen config file is not found.
        yaml.YAMLError: If config file is invalid YAML.
        TypeError: If a section contains an unknown key.
    """
    path = Path(path) if path is not None else find_config()
    if path is None:
        return PkgVerifyConfig()

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return PkgVerifyConfig.from_dict(data)


def validate_config(config: PkgVerifyConfig) -> list[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate.

    Returns:
        List of error messages. Empty list if valid.
    """
    errors: list[str] = []

    valid_log_levels = {"debug", "info", "warning", "error"}
    if config.logging.level not in valid_log_levels:
        errors.append(f"Invalid log level: {config.logging.level}")

    if not config.database.uri:
        errors.append("Database URI is required")

    for name in config.verifier.version_independent_os_types:
        try:
            OSType.from_name(name)
        except ValueError as e:
            errors.append(str(e))

    return errors


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging based on config."""
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=config.format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
