"""
CLI module for the platform extraction engine.

Provides command-line interface using Typer:
- extract: Extract items from a saved page or a URL
- platforms: List supported platforms
- config: Configuration management
"""

from platform_extract.cli.main import app

__all__ = ["app"]
