"""Configuration loading, schema, and defaults."""

from diffsieve.config.loader import ConfigError, load_config
from diffsieve.config.schema import DiffSieveConfig, OutputConfig, ReviewConfig

__all__ = [
    "ConfigError",
    "DiffSieveConfig",
    "OutputConfig",
    "ReviewConfig",
    "load_config",
]
