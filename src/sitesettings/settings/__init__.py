"""Configuration for the site settings tools.

This package provides:
- UserSettings: settings loaded from sitesettings.yaml
"""

from .user import UserSettings

__all__ = ["UserSettings"]
