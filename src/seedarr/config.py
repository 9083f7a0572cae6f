"""Configuration management for Seedarr."""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from seedarr.exceptions import ConfigError

DEFAULT_CONFIG_ENV = "SEEDARR_CONFIG_PATH"
DEFAULT_CONFIG_PATH = "./config.yaml"

# Tags land between dots in release names
TAG_PATTERN = re.compile(r"^[A-Za-z0-9.]+$")


def _validate_tag(value: str) -> str:
    if not TAG_PATTERN.match(value) or value.startswith(".") or value.endswith("."):
        raise ValueError(f"Tag '{value}' may only contain letters, digits and inner dots")
    return value


class TitleStrategy(str, Enum):
    """How the title slot of a release name is chosen."""

    ORIGINAL_IF_EN_ELSE_LOCAL = "original_if_en_else_local"
    ALWAYS_LOCAL = "always_local"
    # Only reachable through the deprecated use_original_title flag
    ALWAYS_ORIGINAL = "always_original"


class PathMapping(BaseModel):
    """Path mapping for Radarr integration."""

    remote: str = Field(..., description="Path prefix as reported by Radarr")
    local: str = Field(..., description="Local path prefix on this host")


class RegionalDubTag(BaseModel):
    """Audio track title marker for a regional dub variant."""

    pattern: str = Field(..., description="Case-insensitive substring to look for")
    tag: str = Field(..., description="Token appended to the release name")

    @field_validator("tag")
    @classmethod
    def validate_tag(cls, v: str) -> str:
        """Reject tags that would break the dotted name."""
        return _validate_tag(v)


class MediaConfig(BaseModel):
    """Media naming and export configuration."""

    title_strategy: Optional[TitleStrategy] = Field(
        default=None, description="Title selection strategy"
    )
    use_original_title: Optional[bool] = Field(
        default=None,
        description="Deprecated: only honoured when title_strategy is not set",
    )
    enable_mediainfo_cache: bool = Field(
        default=True, description="Cache mediainfo output next to each video"
    )
    seed_path: Optional[str] = Field(default=None, description="Root of the export tree")
    append_no_tag_on_missing_group: bool = Field(
        default=False, description="Append -NoTag when the release group is missing"
    )

    @model_validator(mode="after")
    def resolve_title_strategy(self) -> "MediaConfig":
        """Collapse the strategy field and the legacy flag into one value."""
        if self.title_strategy is None:
            if self.use_original_title is True:
                self.title_strategy = TitleStrategy.ALWAYS_ORIGINAL
            elif self.use_original_title is False:
                self.title_strategy = TitleStrategy.ALWAYS_LOCAL
            else:
                self.title_strategy = TitleStrategy.ORIGINAL_IF_EN_ELSE_LOCAL
        return self


class LanguageConfig(BaseModel):
    """Language tagging policy for release names."""

    dub_language: str = Field(default="fr", description="Target dub language code")
    dub_tag: str = Field(default="VF", description="Tag for a dub-only release")
    multi_tag: str = Field(default="MULTi", description="Tag for multi-language audio")
    subtitled_original_tag: str = Field(
        default="VOSTFR", description="Tag for original-language-only audio"
    )
    subtitled_original_languages: List[str] = Field(
        default=["en"],
        description="Languages tagged as subtitled original when the original language is unknown",
    )
    regional_dub_tags: List[RegionalDubTag] = Field(
        default_factory=lambda: [
            RegionalDubTag(pattern="VFF", tag="VFF"),
            RegionalDubTag(pattern="VFQ", tag="VFQ"),
            RegionalDubTag(pattern="VFI", tag="VFI"),
        ],
        description="Audio track title markers for regional dubs, in output order",
    )

    @field_validator("dub_tag", "multi_tag", "subtitled_original_tag")
    @classmethod
    def validate_tags(cls, v: str) -> str:
        """Reject tags that would break the dotted name."""
        return _validate_tag(v)


class TorrentConfig(BaseModel):
    """Torrent packaging configuration."""

    announce_url: Optional[str] = Field(default=None, description="Tracker announce URL")
    private: bool = Field(default=True, description="Mark torrents as private")
    output_dir: Optional[str] = Field(
        default=None, description="Directory for .torrent files (defaults to the scene dir)"
    )
    dry_run: bool = Field(default=False, description="Export files but skip torrent creation")


class RadarrConfig(BaseModel):
    """Radarr API configuration."""

    base_url: str = Field(default="http://localhost:7878", description="Radarr base URL")
    api_key: Optional[str] = Field(default=None, description="Radarr API key")
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout")
    path_mappings: List[PathMapping] = Field(
        default_factory=list, description="Radarr to local path mappings"
    )
    limit: Optional[int] = Field(
        default=None, description="Only process the first N movies with a file"
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise base URL."""
        return v.rstrip("/")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: str = Field(default="./logs/seedarr.log", description="Log output path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    media: MediaConfig = Field(default_factory=MediaConfig, description="Media configuration")
    language: LanguageConfig = Field(
        default_factory=LanguageConfig, description="Language tagging policy"
    )
    torrent: TorrentConfig = Field(
        default_factory=TorrentConfig, description="Torrent configuration"
    )
    radarr: RadarrConfig = Field(default_factory=RadarrConfig, description="Radarr configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively substitute environment variables in configuration.

        Replaces ${VAR_NAME} with os.environ['VAR_NAME'].
        """
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Resolution order: explicit path, then $SEEDARR_CONFIG_PATH, then
    ./config.yaml if present, then built-in defaults.

    Args:
        path: Optional path to configuration file

    Returns:
        Config instance

    Raises:
        ConfigError: If the file is missing or invalid
    """
    if path is None:
        path = os.environ.get(DEFAULT_CONFIG_ENV)
    if path is None and Path(DEFAULT_CONFIG_PATH).exists():
        path = DEFAULT_CONFIG_PATH
    if path is None:
        return Config.from_defaults()

    try:
        return Config.from_yaml(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Invalid configuration {path}: {e}") from e
