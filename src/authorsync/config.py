"""Configuration management for authorsync.

Example configuration file::

    version: "1.0"
    identity:
      min_confidence: 0.7
      rerank_canonical: true
      exclude_emails:
        - "*@localhost"
        - "ci@${COMPANY_DOMAIN}"
    output:
      comments: false
      format: json
"""

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from .core.clustering import DEFAULT_MIN_CONFIDENCE
from .errors import ConfigurationError
from .models import Identity

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "json")
MIN_CONFIDENCE_ENV = "AUTHORSYNC_MIN_CONFIDENCE"


@dataclass
class IdentityConfig:
    """Identity clustering configuration."""

    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    rerank_canonical: bool = True
    exclude_emails: list[str] = field(default_factory=list)

    def is_excluded(self, identity: Identity) -> bool:
        """Check an identity's email against the exclusion globs (case-insensitive)."""
        email = identity.email.lower()
        return any(fnmatch.fnmatchcase(email, pattern.lower()) for pattern in self.exclude_emails)


@dataclass
class OutputConfig:
    """Output rendering configuration."""

    comments: bool = True
    format: str = "text"


@dataclass
class Config:
    """Top-level configuration."""

    identity: IdentityConfig = field(default_factory=IdentityConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    config_path: Optional[Path] = None

    def filter_identities(self, identities: list[Identity]) -> list[Identity]:
        """Drop identities whose email matches an exclusion pattern."""
        kept = [identity for identity in identities if not self.identity.is_excluded(identity)]
        dropped = len(identities) - len(kept)
        if dropped:
            logger.info(f"Excluded {dropped} identities by email pattern")
        return kept


class ConfigLoader:
    """Load and validate configuration from YAML files."""

    SUPPORTED_VERSIONS = ("1", "1.0")

    @classmethod
    def default(cls) -> Config:
        """Configuration used when no file is given (environment still applies)."""
        config = Config()
        cls._apply_environment_overrides(config)
        cls._validate(config)
        return config

    @classmethod
    def load(cls, config_path: Union[Path, str]) -> Config:
        """Load configuration from YAML file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Loaded and validated configuration

        Raises:
            ConfigurationError: If the file is missing, unparseable or invalid
        """
        config_path = Path(config_path)

        cls._load_environment(config_path)
        data = cls._load_yaml(config_path)
        cls._validate_version(data, config_path)
        data = cls._resolve_config_dict(data)

        identity_data = cls._section(data, "identity", config_path)
        output_data = cls._section(data, "output", config_path)

        try:
            config = Config(
                identity=IdentityConfig(
                    min_confidence=float(
                        identity_data.get("min_confidence", DEFAULT_MIN_CONFIDENCE)
                    ),
                    rerank_canonical=bool(identity_data.get("rerank_canonical", True)),
                    exclude_emails=list(identity_data.get("exclude_emails") or []),
                ),
                output=OutputConfig(
                    comments=bool(output_data.get("comments", True)),
                    format=str(output_data.get("format", "text")),
                ),
                config_path=config_path,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration value: {e}", config_path) from e

        cls._apply_environment_overrides(config)
        cls._validate(config)
        logger.debug(f"Loaded configuration from {config_path}")
        return config

    @classmethod
    def _load_environment(cls, config_path: Path) -> None:
        """Load .env then .env.local from the config directory, later files winning."""
        loaded_any = False
        for env_file in (config_path.parent / ".env", config_path.parent / ".env.local"):
            if env_file.exists():
                load_dotenv(env_file, override=True)
                logger.debug(f"Loaded environment variables from {env_file}")
                loaded_any = True

        if not loaded_any:
            logger.debug("No .env file found next to configuration")

    @classmethod
    def _load_yaml(cls, config_path: Path) -> dict[str, Any]:
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML syntax: {e}",
                config_path,
                suggestion="Check indentation and quoting in the configuration file.",
            ) from e
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {config_path}", config_path
            ) from e
        except PermissionError as e:
            raise ConfigurationError(
                f"Permission denied reading configuration file: {config_path}", config_path
            ) from e

        if data is None:
            # An empty file means "all defaults"
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration must be a YAML mapping",
                config_path,
                suggestion="Start the file with keys such as 'identity:' or 'output:'.",
            )
        return data

    @classmethod
    def _validate_version(cls, data: dict[str, Any], config_path: Path) -> None:
        version = str(data.get("version", "1.0"))
        if version not in cls.SUPPORTED_VERSIONS:
            raise ConfigurationError(
                f"Unsupported configuration version: {version}",
                config_path,
                suggestion=f"Supported versions: {', '.join(cls.SUPPORTED_VERSIONS)}",
            )

    @staticmethod
    def _section(data: dict[str, Any], name: str, config_path: Path) -> dict[str, Any]:
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"'{name}' section must be a mapping", config_path)
        return section

    @staticmethod
    def _resolve_env_var(value: str) -> str:
        """Resolve a ``${VAR}`` reference, leaving other strings untouched."""
        if value.startswith("${") and value.endswith("}"):
            return os.environ.get(value[2:-1], "")
        return os.path.expandvars(value) if "${" in value else value

    @classmethod
    def _resolve_config_dict(cls, data: Any) -> Any:
        """Recursively resolve environment variable references."""
        if isinstance(data, dict):
            return {key: cls._resolve_config_dict(value) for key, value in data.items()}
        if isinstance(data, list):
            return [cls._resolve_config_dict(item) for item in data]
        if isinstance(data, str):
            return cls._resolve_env_var(data)
        return data

    @staticmethod
    def _apply_environment_overrides(config: Config) -> None:
        override = os.environ.get(MIN_CONFIDENCE_ENV)
        if not override:
            return
        try:
            config.identity.min_confidence = float(override)
        except ValueError as e:
            raise ConfigurationError(
                f"{MIN_CONFIDENCE_ENV} must be a number, got '{override}'"
            ) from e
        logger.debug(f"min_confidence overridden from environment: {override}")

    @staticmethod
    def _validate(config: Config) -> None:
        if not 0.0 <= config.identity.min_confidence <= 1.0:
            raise ConfigurationError(
                f"min_confidence must be between 0 and 1, got {config.identity.min_confidence}",
                config.config_path,
            )
        if config.output.format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Unknown output format '{config.output.format}'",
                config.config_path,
                suggestion=f"Use one of: {', '.join(OUTPUT_FORMATS)}",
            )
