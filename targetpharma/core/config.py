"""
Configuration Management for the Target Pharmacology widget

Environment-based configuration with validation. Widget options that are not
given explicitly (API location, credentials, page size) fall back to these
values.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from enum import Enum
import logging

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_APP_URL = "https://beta.openphacts.org/1.5"


class Environment(Enum):
    """Deployment environments."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Config:
    """
    Configuration manager with environment-based settings.

    Supports configuration via:
    1. Environment variables
    2. Configuration files
    3. Default values
    """

    def __init__(self, env: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            env: Environment name (development, staging, production, testing)
        """
        env_name = env or os.getenv('TARGETPHARMA_ENV', 'development')
        try:
            self.env = Environment(env_name)
        except ValueError:
            raise ConfigurationError(
                'environment',
                f"Unknown environment: {env_name}"
            )
        self._config = self._load_config()
        self._validate()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment."""
        config = {
            'environment': self.env.value,

            # Search API
            'app_url': os.getenv('OPS_APP_URL', DEFAULT_APP_URL),
            'app_id': os.getenv('OPS_APP_ID'),
            'app_key': os.getenv('OPS_APP_KEY'),
            'timeout': float(os.getenv('OPS_TIMEOUT', '30')),

            # Paging
            'page_size': int(os.getenv('OPS_PAGE_SIZE', '50')),

            # Logging
            'log_level': os.getenv('LOG_LEVEL', 'INFO'),
            'log_file': os.getenv('LOG_FILE'),
            'structured_logging': os.getenv('STRUCTURED_LOGGING', 'false').lower() == 'true',
        }

        if self.env == Environment.PRODUCTION:
            config.update(self._get_production_overrides())
        elif self.env == Environment.TESTING:
            config.update(self._get_testing_overrides())

        return config

    def _get_production_overrides(self) -> Dict[str, Any]:
        """Get production-specific configuration overrides."""
        return {
            'log_level': 'WARNING',
            'structured_logging': True,
        }

    def _get_testing_overrides(self) -> Dict[str, Any]:
        """Get testing-specific configuration overrides."""
        return {
            'log_level': 'DEBUG',
            'timeout': 5.0,
        }

    def _validate(self):
        """Validate configuration parameters."""
        errors = []

        if not self._config.get('app_url'):
            errors.append("app_url must not be empty")

        if self._config['timeout'] <= 0:
            errors.append("timeout must be positive")

        if self._config['page_size'] < 1:
            errors.append("page_size must be at least 1")

        if self._config['log_level'].upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"unknown log_level: {self._config['log_level']}")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            raise ConfigurationError('config', error_msg)

        logger.debug(f"Configuration validated for {self.env.value} environment")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using dict-like access."""
        return self._config[key]

    def __getattr__(self, key: str) -> Any:
        """Get configuration value using attribute access."""
        if key.startswith('_'):
            return object.__getattribute__(self, key)
        return self._config.get(key)

    def to_dict(self) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        return self._config.copy()

    def save_to_file(self, filepath: str):
        """Save configuration to JSON file. Credentials are not written."""
        data = {k: v for k, v in self._config.items() if k not in ('app_id', 'app_key')}
        with open(filepath, 'w') as f:
            json.dump(data, f, indent=2)
        logger.info(f"Configuration saved to {filepath}")

    @classmethod
    def from_file(cls, filepath: str, env: Optional[str] = None) -> 'Config':
        """Load configuration from JSON file on top of environment defaults."""
        path = Path(filepath)
        try:
            with open(path, 'r') as f:
                config_data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError('config_file', f"Configuration file not found: {filepath}",
                                     config_file=filepath)
        except json.JSONDecodeError as e:
            raise ConfigurationError('config_file', f"Invalid JSON in configuration file: {e}",
                                     config_file=filepath)

        instance = cls(env)
        instance._config.update(config_data)
        instance._validate()
        return instance
