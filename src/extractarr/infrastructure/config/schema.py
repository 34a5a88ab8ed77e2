"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from extractarr.infrastructure.http.constants import DEFAULT_USER_AGENT

from .defaults import DEFAULT_CACHE_FAMILIES

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]
CacheBackendName = Literal["memory", "diskcache"]
DefaultPolicy = Literal["first", "quality"]


def _normalize_path(value: Any) -> Path:
    """
    Normalize a path-like value without causing filesystem side-effects.

    This function MUST NOT create directories or files.
    """
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class CacheFamilyConfig(BaseModel):
    """Bounds of one Cache Store (one per operation family)."""

    max_size: int = Field(default=20, description="Max entries before FIFO eviction.")
    max_age_seconds: int = Field(
        default=24 * 3600, description="Entries older than this are purged."
    )

    @field_validator("max_size", "max_age_seconds")
    @classmethod
    def _validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache bounds must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/cache/provider/anilist).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    app_name: str = Field(default="extractarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Per-request timeout in seconds.",
    )
    http_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="Default User-Agent for outgoing requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Cache (YAML section: cache.*)
    cache_backend: CacheBackendName = Field(
        default="memory",
        validation_alias=AliasChoices(
            "cache_backend",
            AliasPath("cache", "backend"),
        ),
        description="Storage behind the cache stores: 'memory' or 'diskcache'.",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/extractarr"),
        validation_alias=AliasChoices(
            "cache_dir",
            AliasPath("cache", "dir"),
        ),
        description="Diskcache directory (only when backend=diskcache).",
    )
    cache_families: dict[str, CacheFamilyConfig] = Field(
        default_factory=dict,
        validation_alias=AliasChoices(
            "cache_families",
            AliasPath("cache", "families"),
        ),
        description="Per operation family cache bounds.",
    )

    # Provider (YAML section: provider.*)
    provider_base_url: str = Field(
        default="https://aniworld.to",
        validation_alias=AliasChoices(
            "provider_base_url",
            AliasPath("provider", "base_url"),
        ),
        description="Catalog site base URL.",
    )
    provider_page_size: int = Field(
        default=24,
        validation_alias=AliasChoices(
            "provider_page_size",
            AliasPath("provider", "page_size"),
        ),
        description="Items per page for client-side paginated listings.",
    )
    provider_default_policy: DefaultPolicy = Field(
        default="first",
        validation_alias=AliasChoices(
            "provider_default_policy",
            AliasPath("provider", "default_policy"),
        ),
        description="How the default stream is chosen: first found or best quality.",
    )

    # AniList (YAML section: anilist.*)
    anilist_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "anilist_enabled",
            AliasPath("anilist", "enabled"),
        ),
        description="Enrich anime details with AniList artwork.",
    )
    anilist_url: str = Field(
        default="https://graphql.anilist.co",
        validation_alias=AliasChoices(
            "anilist_url",
            AliasPath("anilist", "url"),
        ),
        description="AniList GraphQL endpoint.",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("provider_page_size")
    @classmethod
    def _validate_page_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("provider_page_size must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        for family, bounds in DEFAULT_CACHE_FAMILIES.items():
            self.cache_families.setdefault(family, CacheFamilyConfig(**bounds))
        return self


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read EXTRACTARR_* variables, keeps
    only the ones that are set and merges them over YAML/defaults.

    Supported env var examples (flat, explicit):
    - EXTRACTARR_HTTP_TIMEOUT_SECONDS
    - EXTRACTARR_LOG_LEVEL
    - EXTRACTARR_CACHE_BACKEND
    - EXTRACTARR_ANILIST_ENABLED
    """

    model_config = SettingsConfigDict(
        env_prefix="EXTRACTARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_backend: Optional[CacheBackendName] = None
    cache_dir: Optional[Path] = None

    provider_base_url: Optional[str] = None
    provider_page_size: Optional[int] = None
    provider_default_policy: Optional[DefaultPolicy] = None

    anilist_enabled: Optional[bool] = None
    anilist_url: Optional[str] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
