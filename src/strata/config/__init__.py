"""
Configuration module for Strata.

Uses pydantic-settings for environment variable loading.
"""

from strata.config.settings import (
    Settings,
    get_settings,
    reset_settings,
    use_settings,
)

__all__ = ["Settings", "get_settings", "reset_settings", "use_settings"]
