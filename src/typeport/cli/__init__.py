"""Command-line interface for typeport.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Export an artifact to the requested formats
- Render the first page of an artifact to PNG
- List the faces found in font directories
"""

from typeport.cli.app import cli, main

__all__ = ["cli", "main"]
