"""Configuration helpers for data sources and saved views."""

from .profile import ViewProfile
from .settings import ConfigError, Settings

__all__ = [
    "ConfigError",
    "Settings",
    "ViewProfile",
]
