"""Configuration loading and validation."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from terraform_wheels.config.schema import WheelsConfig

CONFIG_ENV_VAR = "TFW_CONFIG"
PROJECT_CONFIG_NAME = ".terraform-wheels.yaml"
DEFAULT_CONFIG_PATH = Path.home() / ".terraform-wheels" / "config.yaml"


class ConfigError(Exception):
    """Configuration loading or validation error."""


def find_config_path(cwd: Optional[Path] = None) -> Path:
    """Pick the config file to use.

    Order: ``$TFW_CONFIG``, ``./.terraform-wheels.yaml``, then
    ``~/.terraform-wheels/config.yaml``. The returned path may not exist.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()

    project_path = (cwd or Path.cwd()) / PROJECT_CONFIG_NAME
    if project_path.exists():
        return project_path

    return DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> WheelsConfig:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to config file. If None, uses :func:`find_config_path`.
              If file doesn't exist, returns default config.

    Returns:
        Validated configuration object

    Raises:
        ConfigError: If config file exists but is invalid
    """
    if path is None:
        path = find_config_path()

    if not path.exists():
        return WheelsConfig()

    try:
        with open(path, "r") as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            return WheelsConfig()

        return WheelsConfig(**config_data)

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e
