"""Configuration management for typeport.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- FontConfig: Font discovery settings
- ExportConfig: Export pipeline settings
- RenderConfig: Rasterization settings
- LoggingConfig: Logging settings
- TypeportSettings: Main application settings
"""

from typeport.config.settings import (
    DEFAULT_WEB_SOCKET,
    ExportConfig,
    FontConfig,
    LoggingConfig,
    RenderConfig,
    TypeportSettings,
    get_default_settings,
)

__all__ = [
    "DEFAULT_WEB_SOCKET",
    "ExportConfig",
    "FontConfig",
    "LoggingConfig",
    "RenderConfig",
    "TypeportSettings",
    "get_default_settings",
]
