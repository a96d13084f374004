"""Configuration management using Pydantic for validation."""

from pathlib import Path
from typing import Any, Dict, Literal

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LuisConfig(BaseSettings):
    """LUIS application and authoring endpoint configuration."""

    model_config = SettingsConfigDict(env_prefix="LUIS_", case_sensitive=False)

    app_id: str = Field(default="")
    programmatic_key: str = Field(default="")
    region: str = Field(default="westus")
    # Formatted with {region}; override to point at a proxy or another cloud.
    endpoint: str = Field(default="https://{region}.api.cognitive.microsoft.com/luis/api/v2.0")
    timeout: float = 30.0
    max_retries: int = 2

    @property
    def base_url(self) -> str:
        return self.endpoint.format(region=self.region).rstrip("/")


class SyncConfig(BaseSettings):
    """Sync engine configuration."""

    version_id: str = "1.0"
    schema_version: str = "2.1.0"
    fingerprint_key: str = "nlu/luis/updateMetadata"
    poll_interval_seconds: float = 1.0
    max_poll_attempts: int | None = None
    is_production: bool = False

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        """Validate poll interval is positive."""
        if v <= 0:
            raise ValueError("poll_interval_seconds must be positive")
        return v

    @field_validator("max_poll_attempts")
    @classmethod
    def validate_max_poll_attempts(cls, v: int | None) -> int | None:
        """Validate the optional poll ceiling."""
        if v is not None and v < 1:
            raise ValueError("max_poll_attempts must be at least 1 when set")
        return v


class CorpusConfig(BaseSettings):
    """Local corpus and state file locations."""

    intents_path: Path = Field(default=Path("data/intents"))
    fingerprint_path: Path = Field(default=Path("data/state/fingerprints.json"))
    entity_registry_path: Path | None = Field(default=None)


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["json", "text"] = "text"
    file: str | None = "logs/nlusync.log"
    rotation: str = "10 MB"
    retention: str = "1 week"


class Config(BaseSettings):
    """Main configuration class."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
    )

    # Configuration sections
    luis: LuisConfig = Field(default_factory=LuisConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    corpus: CorpusConfig = Field(default_factory=CorpusConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def _deep_merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
        """Deep-merge two dicts (overrides win).

        This is used to apply environment-derived overrides on top of YAML defaults.
        """
        merged: Dict[str, Any] = dict(base)
        for key, value in overrides.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge_dict(merged[key], value)
            else:
                merged[key] = value
        return merged

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "Config":
        """Load configuration from YAML file and environment variables.

        Precedence (highest to lowest):
        1) Environment variables / .env
        2) YAML file
        3) Model defaults

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance with loaded settings

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML file is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path) as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError(f"YAML config root must be a mapping/dict: {yaml_path}")

        # Nested BaseSettings with their own env_prefix (LuisConfig reads LUIS_*)
        # are not populated through the parent model, so their env overrides are
        # computed separately and merged under "luis".
        env_overrides = cls().model_dump(exclude_defaults=True)

        luis_env_overrides = LuisConfig().model_dump(exclude_defaults=True)
        if luis_env_overrides:
            yaml_luis = yaml_config.get("luis", {})
            env_overrides["luis"] = cls._deep_merge_dict(
                yaml_luis if isinstance(yaml_luis, dict) else {},
                luis_env_overrides,
            )

        merged = cls._deep_merge_dict(yaml_config, env_overrides)

        return cls(**merged)

    def validate_config(self) -> None:
        """Validate configuration settings.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.luis.app_id:
            raise ValueError("LUIS app id required (luis.app_id or LUIS_APP_ID)")
        if not self.luis.programmatic_key:
            raise ValueError(
                "LUIS programmatic key required (luis.programmatic_key or LUIS_PROGRAMMATIC_KEY)"
            )

        self.corpus.fingerprint_path.parent.mkdir(parents=True, exist_ok=True)


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create global configuration instance.

    Returns:
        Global Config instance

    Raises:
        RuntimeError: If configuration hasn't been initialized
    """
    global _config
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call load_config() first.")
    return _config


def load_config(yaml_path: str | Path = "config/config.yaml") -> Config:
    """Load and validate configuration.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        Loaded and validated Config instance
    """
    global _config
    _config = Config.from_yaml(yaml_path)
    _config.validate_config()
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
