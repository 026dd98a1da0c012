"""Configuration management for mcpkit servers."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcpkit.version import __version__

DEFAULT_PROTOCOL_VERSIONS = ["2025-06-18", "2025-03-26", "2024-11-05"]

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class McpKitConfig(BaseSettings):
    """Server configuration with environment variable support."""

    # Server identity
    server_name: str = Field(default="mcpkit-server", min_length=1)
    server_version: str = Field(default=__version__, min_length=1)

    # Protocol negotiation
    supported_protocol_versions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PROTOCOL_VERSIONS)
    )
    tools_list_changed: bool = Field(default=True)
    prompts_list_changed: bool = Field(default=True)
    resources_list_changed: bool = Field(default=True)

    # Dispatch
    handler_timeout: float | None = Field(default=None, gt=0)
    max_concurrency: int = Field(default=1, ge=1, le=64)
    max_line_bytes: int = Field(default=4 * 1024 * 1024, ge=1024)

    # Logging configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="WARNING")
    log_file: Path | None = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="MCPKIT_",
        extra="ignore",
        validate_assignment=True
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {sorted(LOG_LEVELS)}")
        return level

    @field_validator("supported_protocol_versions")
    @classmethod
    def validate_protocol_versions(cls, v: list[str]) -> list[str]:
        """Require at least one protocol version, dropping duplicates in order."""
        versions = list(dict.fromkeys(item.strip() for item in v if item.strip()))
        if not versions:
            raise ValueError("At least one supported protocol version is required")
        return versions
