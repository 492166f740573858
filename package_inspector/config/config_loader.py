"""Loading and saving of package inspector configuration files."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

import yaml

from .data_models import InspectorConfig

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Configuration file cannot be read or holds invalid settings"""
    pass


def load_config(path: Optional[Union[str, Path]] = None) -> InspectorConfig:
    """Load configuration from a JSON or YAML file.

    Args:
        path: Configuration file. None or a missing file gives the defaults.

    Returns:
        InspectorConfig

    Raises:
        ConfigurationError: file is malformed or contains invalid settings
    """
    if path is None:
        return InspectorConfig.default()

    config_path = Path(path)
    if not config_path.exists():
        logger.info(f"[Config] No configuration file at {config_path}, using defaults")
        return InspectorConfig.default()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if config_path.suffix.lower() in ('.yaml', '.yml'):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Error parsing configuration {config_path}: {e}") from e
    except IOError as e:
        raise ConfigurationError(f"Error reading configuration {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration {config_path} must contain a mapping")

    config = InspectorConfig.from_dict(data)
    errors = config.validate()
    if errors:
        raise ConfigurationError(f"Invalid configuration {config_path}: " + "; ".join(errors))

    logger.info(f"[Config] Loaded configuration from {config_path}")
    return config


def save_config(config: InspectorConfig, path: Union[str, Path]) -> Path:
    """Write configuration as JSON.

    Args:
        config: Configuration to save
        path: Target file; parent directories are created

    Returns:
        Path of the written file
    """
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info(f"[Config] Saved configuration to {config_path}")
    return config_path
