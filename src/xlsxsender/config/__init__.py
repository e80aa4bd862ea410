"""Configuration package for xlsx-sender."""

from .loader import get_config, load_settings, reload_config
from .models import LoggingSettings, ScanSettings, TransferSettings
from .settings import Settings

__all__ = [
    "LoggingSettings",
    "ScanSettings",
    "Settings",
    "TransferSettings",
    "get_config",
    "load_settings",
    "reload_config",
]
