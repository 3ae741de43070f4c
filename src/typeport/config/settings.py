"""Configuration settings for Typeport."""

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_WEB_SOCKET = "127.0.0.1:23625"


class FontConfig(BaseModel):
    """Configuration for font discovery and resolution."""

    profile_version: str = Field(
        default="v1beta",
        description="Version tag of the font profile handed to resolvers",
    )
    generic_family_prefixes: list[str] = Field(
        default_factory=lambda: ["Noto", "NewCM", "NewComputerModern"],
        description="Family prefixes replaced by the full name during inference",
    )
    font_paths: list[Path] = Field(
        default_factory=list,
        description="Additional directories searched for font files",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Max discovery worker threads (None = auto)",
    )


class ExportConfig(BaseModel):
    """Configuration for the export pipeline."""

    output: str = Field(
        default="",
        description="Output base location (empty = entry file directory)",
    )
    formats: list[str] = Field(
        default_factory=list,
        description="Requested format tags (empty = pdf and json)",
    )
    web_socket: str = Field(
        default="",
        description="Streaming endpoint address (host:port)",
    )
    default_web_socket: str = Field(
        default=DEFAULT_WEB_SOCKET,
        description="Streaming endpoint used when web_socket is requested without an address",
    )


class RenderConfig(BaseModel):
    """Configuration for page rasterization."""

    pixel_per_pt: float = Field(
        default=1.0,
        gt=0.0,
        le=64.0,
        description="Output pixels per typographic point",
    )
    fill: str = Field(
        default="ffffff",
        description="Background fill as a hexadecimal RGB(A) string",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class TypeportSettings(BaseModel):
    """Main application settings."""

    fonts: FontConfig = Field(default_factory=FontConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> TypeportSettings:
    """Get default application settings."""
    return TypeportSettings()
