"""Configuration module for application settings."""

from .settings import Settings, get_settings
from .logger import APP_LOGGER, setup_logger, get_logger

__all__ = ["APP_LOGGER", "Settings", "get_settings", "setup_logger", "get_logger"]
