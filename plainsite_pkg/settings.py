#!/usr/bin/env python3
"""
Settings loader for Plainsite static site generator.
Supports configuration from plainsite.yml, plainsite.yaml, or plainsite.json files.
"""

import os
import json
import logging
import yaml
from typing import Dict, Any, Optional

from .core import DEFAULT_CONTENT_EXTENSIONS

logger = logging.getLogger('Plainsite')


class PlainsiteSettings:
    """Load and manage Plainsite configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'content': 'content',
        'template': 'template.tpl',
        'output': 'output',
        'assets': None,
        'output_extension': '.html',
        'content_extensions': list(DEFAULT_CONTENT_EXTENSIONS),
        'parallel_threshold': 12,
        'workers': None,
        'log_dir': 'logs',
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['plainsite.yml', 'plainsite.yaml', 'plainsite.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings

        Raises:
            ValueError: If the configuration file is malformed
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            loaded_settings = self._load_config_file(config_file)
            if loaded_settings:
                if not isinstance(loaded_settings, dict):
                    raise ValueError(f"Configuration file {config_file} must contain a mapping")
                # Merge with defaults, giving preference to loaded settings
                self.settings.update(loaded_settings)
                logger.debug(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        if file_ext not in ['.yml', '.yaml', '.json']:
            raise ValueError(f"Unsupported config file format: {file_ext}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    return yaml.safe_load(f) or {}
                return json.load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        if file_format not in ['yml', 'yaml', 'json']:
            raise ValueError(f"Unsupported config file format: {file_format}")

        filename = f'plainsite.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        with open(config_path, 'w', encoding='utf-8') as f:
            if file_format in ['yml', 'yaml']:
                # Custom YAML output with comments
                f.write("# Plainsite Configuration File\n\n")
                f.write("# Build settings\n")
                f.write("content: content\n")
                f.write("template: template.tpl\n")
                f.write("output: output\n")
                f.write("assets: assets\n\n")
                f.write("# Files\n")
                f.write("output_extension: .html\n")
                f.write("content_extensions:\n")
                for ext in DEFAULT_CONTENT_EXTENSIONS:
                    f.write(f"  - {ext}\n")
                f.write("\n# Processing\n")
                f.write("parallel_threshold: 12  # files needed before using worker processes\n")
                f.write("workers: null  # defaults to the number of CPUs\n")
                f.write("log_dir: logs\n")
            else:
                sample_config = dict(self.DEFAULT_SETTINGS, assets='assets')
                json.dump(sample_config, f, indent=2)

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None:
                if key == 'content_extensions' and isinstance(value, str):
                    # Convert comma-separated string to list
                    merged[key] = [ext.strip() for ext in value.split(',') if ext.strip()]
                else:
                    merged[key] = value

        return merged
