"""
Configuration Loader

Loads and validates formatter configuration from YAML files with environment variable substitution.
"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any
import re
import logging

from ecslog.flattener import get_path


ENV_VAR_PATTERN = re.compile(r'\$\{([^}:]+)(?::-([^}]*))?\}')


class ConfigLoader:
    """
    Loads configuration from YAML files with environment variable support.

    Supports:
    - Environment variable substitution ${VAR_NAME} and ${VAR_NAME:-default}
    - Dot-notation lookups
    - Validation
    """

    REQUIRED_SECTIONS = ('schema', 'formatter')

    def __init__(self, config_path: str):
        """
        Initialize config loader.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = Path(config_path)
        self.logger = logging.getLogger(self.__class__.__name__)
        self.config: Dict[str, Any] = {}

    def load(self) -> Dict[str, Any]:
        """
        Load configuration from file.

        Returns:
            Configuration dictionary
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        try:
            content = self.config_path.read_text(encoding='utf-8')
            content = self._substituteEnvVars(content)
            self.config = yaml.safe_load(content) or {}

            self.logger.info(f"Configuration loaded from {self.config_path}")
            return self.config

        except Exception as e:
            self.logger.error(f"Error loading configuration: {e}")
            raise

    def _substituteEnvVars(self, content: str) -> str:
        """Replace ${VAR} and ${VAR:-fallback} with environment values."""

        def replacer(match):
            name, fallback = match.group(1), match.group(2)
            value = os.environ.get(name, fallback)
            if value is None:
                self.logger.warning(f"Environment variable not found: {name}")
                return match.group(0)
            return value

        return ENV_VAR_PATTERN.sub(replacer, content)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dotted key, e.g. "schema.source".

        Missing keys and explicit nulls both return default.
        """
        value = get_path(self.config, key)
        return default if value is None else value

    def validate(self) -> bool:
        for section in self.REQUIRED_SECTIONS:
            if section not in self.config:
                self.logger.error(f"Missing required configuration section: {section}")
                return False

        return True
