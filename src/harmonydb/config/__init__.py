"""Configuration module for harmonydb."""

from .settings import DatabaseSettings, LoggingSettings, Settings, get_settings

__all__ = ["DatabaseSettings", "LoggingSettings", "Settings", "get_settings"]
