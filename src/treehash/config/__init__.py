"""Configuration models and loaders for treehash."""

from .loader import ConfigError, DEFAULT_CONFIG_PATH, dump_config, load_config
from .models import HashingConfig, ManifestConfig, RuntimeConfig, TreeHashConfig

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "HashingConfig",
    "ManifestConfig",
    "RuntimeConfig",
    "TreeHashConfig",
    "dump_config",
    "load_config",
]
