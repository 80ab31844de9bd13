"""Core configuration, errors and security helpers."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
