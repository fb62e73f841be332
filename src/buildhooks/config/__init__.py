"""
Configuration module for buildhooks.

Uses pydantic-settings for environment variable loading.
"""

from buildhooks.config.settings import Settings
from buildhooks.config.sources import ConfigFileError

__all__ = ["ConfigFileError", "Settings"]
