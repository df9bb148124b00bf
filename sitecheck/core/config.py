"""Configuration management for the Company Website Tracker."""

import os
import logging
import yaml
from typing import Dict, Any
from dotenv import load_dotenv

from sitecheck.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

MIN_API_KEY_LENGTH = 10


class Config:
    """Configuration manager for the application."""

    REQUIRED_SECTIONS = ['search', 'directory', 'pipeline', 'storage', 'logging']

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file
        """
        env_api_key = os.getenv('LANGSEARCH_API_KEY')
        dotenv_path = os.path.join(os.getcwd(), '.env')

        load_dotenv()  # Load environment variables from .env file
        self.config_path = config_path

        api_key_after_dotenv = os.getenv('LANGSEARCH_API_KEY')
        if env_api_key:
            logger.debug("API key loaded from environment variable")
        elif api_key_after_dotenv:
            logger.debug(f"API key loaded from .env file: {dotenv_path}")

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        try:
            with open(self.config_path, 'r') as file:
                config = yaml.safe_load(file) or {}
        except FileNotFoundError:
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML configuration: {e}")
        return self._process_env_variables(config)

    def _process_env_variables(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Process ``${VAR}`` and ``${VAR:-default}`` placeholders in configuration."""
        def process_value(value):
            if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
                env_var = value[2:-1]
                default = None
                if ':-' in env_var:
                    env_var, default = env_var.split(':-', 1)
                env_value = os.getenv(env_var, default)
                if env_value is None:
                    raise ConfigurationError(f"Environment variable not set: {env_var}")
                return env_value
            elif isinstance(value, dict):
                return {k: process_value(v) for k, v in value.items()}
            elif isinstance(value, list):
                return [process_value(item) for item in value]
            return value

        return process_value(config)  # type: ignore

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation.

        Args:
            key_path: Dot-separated key path (e.g., 'pipeline.min_delay_ms')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    @property
    def search_config(self) -> Dict[str, Any]:
        """Get search configuration section."""
        return self._config.get('search', {})

    @property
    def directory_config(self) -> Dict[str, Any]:
        """Get business directory configuration section."""
        return self._config.get('directory', {})

    @property
    def pipeline_config(self) -> Dict[str, Any]:
        """Get pipeline configuration section."""
        return self._config.get('pipeline', {})

    @property
    def storage_config(self) -> Dict[str, Any]:
        """Get storage configuration section."""
        return self._config.get('storage', {})

    @property
    def logging_config(self) -> Dict[str, Any]:
        """Get logging configuration section."""
        return self._config.get('logging', {})

    def get_all(self) -> Dict[str, Any]:
        """Get entire configuration as dictionary.

        Returns:
            Complete configuration dictionary
        """
        return self._config.copy()

    def validate(self) -> bool:
        """Validate configuration completeness.

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If configuration is invalid
        """
        for section in self.REQUIRED_SECTIONS:
            if section not in self._config:
                raise ConfigurationError(f"Missing configuration section: {section}")

        api_key = str(self.search_config.get('api_key') or '')
        if len(api_key.strip()) < MIN_API_KEY_LENGTH:
            raise ConfigurationError(
                "LangSearch API key is required but not properly configured. "
                "Please set the LANGSEARCH_API_KEY environment variable. "
                "Get your free API key from: https://langsearch.com/api-keys"
            )

        pipeline = self.pipeline_config
        if int(pipeline.get('max_api_calls', 0)) <= 0:
            raise ConfigurationError("Pipeline max_api_calls must be positive")

        if int(pipeline.get('min_delay_ms', 0)) < 0:
            raise ConfigurationError("Pipeline min_delay_ms cannot be negative")

        if not self.storage_config.get('database'):
            raise ConfigurationError("Storage database path is required")

        return True
