"""
Configuration module for the best-price router.

This module provides configuration management and settings
for the best-price router.
"""

from .settings import Settings, get_settings, reload_settings

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
]
