"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

KNOWN_KEYS = {
    'endpoint',
    'expected_language',
    'coverage',
    'coverage_mode',
    'request_timeout',
    'log_dir',
    'log_file',
}

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        An empty file yields an empty dictionary. Unknown keys are kept but logged.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
            logger.error(f"Configuration path is not a file: {config_path}")
            raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except OSError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if config is None:
            logger.warning(f"Configuration file {config_path} is empty. Using defaults.")
            return {}
        if not isinstance(config, dict):
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")

        unknown = sorted(set(config) - KNOWN_KEYS, key=str)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys in {config_path}: {', '.join(map(str, unknown))}")
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config
