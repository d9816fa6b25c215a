"""
Configuration module exports.
"""

from bddreport.config.settings import DEFAULT_METADATA, Settings, get_settings

__all__ = [
    "Settings",
    "DEFAULT_METADATA",
    "get_settings",
]
