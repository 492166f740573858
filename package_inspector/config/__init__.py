"""Configuration management module for the package inspector."""

from .config_loader import ConfigurationError, load_config, save_config
from .data_models import InspectorConfig

__all__ = ['ConfigurationError', 'InspectorConfig', 'load_config', 'save_config']
