"""Utility functions for typeport.

This module provides utility functions including:

- Logging setup and configuration
- Export run statistics
"""

from typeport.utils.logging import (
    ExportLogger,
    ExportStats,
    configure_logging,
)

__all__ = [
    "ExportLogger",
    "ExportStats",
    "configure_logging",
]
