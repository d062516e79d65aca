"""Configuration module for imgcache."""

from .settings import (
    HttpSettings,
    ObservabilitySettings,
    ProcessingSettings,
    Settings,
    StorageSettings,
    get_settings,
)

__all__ = [
    "HttpSettings",
    "ObservabilitySettings",
    "ProcessingSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
]
