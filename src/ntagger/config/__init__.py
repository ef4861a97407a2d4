"""Config module exports."""

from ntagger.config.loader import load_config
from ntagger.config.models import (
    AtlasConfig,
    DiscoveryConfig,
    LoggingConfig,
    NtaggerConfig,
    TagsConfig,
)

__all__ = [
    "load_config",
    "NtaggerConfig",
    "AtlasConfig",
    "DiscoveryConfig",
    "LoggingConfig",
    "TagsConfig",
]
