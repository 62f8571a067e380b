"""Configuration module for the feedback board."""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
