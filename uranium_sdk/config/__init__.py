"""Configuration module for SDK settings."""

from .settings import settings, Settings, SDK_VERSION
from .http import get_api_client, get_storage_client

__all__ = [
    "settings",
    "Settings",
    "SDK_VERSION",
    "get_api_client",
    "get_storage_client",
]
