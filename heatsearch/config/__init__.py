"""Configuration for heatsearch."""

from heatsearch.config.loader import get_config_path, load_config, save_config
from heatsearch.config.schema import Config, GoogleSearchConfig

__all__ = ["Config", "GoogleSearchConfig", "load_config", "save_config", "get_config_path"]
