"""Configuration loading for terraform-wheels."""

from terraform_wheels.config.loader import ConfigError, find_config_path, load_config
from terraform_wheels.config.schema import (
    LoggingConfig,
    PluginsConfig,
    TerraformConfig,
    UpgradeConfig,
    WheelsConfig,
)

__all__ = [
    "ConfigError",
    "LoggingConfig",
    "PluginsConfig",
    "TerraformConfig",
    "UpgradeConfig",
    "WheelsConfig",
    "find_config_path",
    "load_config",
]
