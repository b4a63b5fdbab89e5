#!/usr/bin/env python3

"""
Configuration management for transcript unification.

Centralized configuration with support for file-based configuration
and environment variable overrides.
"""

import os
import json
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any

import yaml

from .exceptions import ConfigurationError

# Characters that would break GTF/GFF attribute syntax
FORBIDDEN_LABEL_CHARS = set(' \t;="')


@dataclass
class UnifierConfig:
    """Centralized configuration for tuni."""

    # Labelling
    label_prefix: str = "tuni_"
    label_attribute: str = "tuni_id"
    output_tag: str = "tuni"

    # Performance settings
    memory_limit_mb: int = 4096
    enable_memory_monitoring: bool = True
    intern_strings: bool = True

    # Output settings
    generate_reports: bool = False

    # Advanced settings
    debug_mode: bool = False

    @classmethod
    def from_file(cls, config_path: str) -> 'UnifierConfig':
        """Load configuration from file (JSON or YAML)."""
        return cls.from_dict(read_config_file(config_path))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'UnifierConfig':
        """Create configuration from dictionary."""
        try:
            return cls(**known_fields(config_dict))
        except TypeError as e:
            raise ConfigurationError(f"Invalid configuration parameters: {e}")

    @classmethod
    def from_env(cls) -> 'UnifierConfig':
        """Load configuration from environment variables."""
        config = cls()

        def to_bool(value: str) -> bool:
            return value.lower() in ('true', '1', 'yes')

        env_mappings = {
            'TUNI_LABEL_PREFIX': ('label_prefix', str),
            'TUNI_LABEL_ATTRIBUTE': ('label_attribute', str),
            'TUNI_OUTPUT_TAG': ('output_tag', str),
            'TUNI_MEMORY_LIMIT_MB': ('memory_limit_mb', int),
            'TUNI_ENABLE_MEMORY_MONITORING': ('enable_memory_monitoring', to_bool),
            'TUNI_INTERN_STRINGS': ('intern_strings', to_bool),
            'TUNI_GENERATE_REPORTS': ('generate_reports', to_bool),
            'TUNI_DEBUG_MODE': ('debug_mode', to_bool),
        }

        for env_var, (field_name, converter) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value:
                try:
                    setattr(config, field_name, converter(env_value))
                except (ValueError, TypeError) as e:
                    raise ConfigurationError(f"Invalid environment variable {env_var}: {e}")

        config.validate()
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to file."""
        config_dict = self.to_dict()

        try:
            with open(config_path, 'w') as f:
                if config_path.lower().endswith(('.yaml', '.yml')):
                    yaml.safe_dump(config_dict, f, default_flow_style=False)
                else:
                    json.dump(config_dict, f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Error saving configuration: {e}")

    def validate(self) -> None:
        """Validate configuration parameters."""
        for field_name in ('label_prefix', 'label_attribute', 'output_tag'):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value:
                raise ConfigurationError(f"{field_name} must be a non-empty string")
            if FORBIDDEN_LABEL_CHARS & set(value):
                raise ConfigurationError(
                    f"{field_name} must not contain whitespace, ';', '=' or '\"': {value!r}")

        if not isinstance(self.memory_limit_mb, int) or self.memory_limit_mb < 100:
            raise ConfigurationError("memory_limit_mb must be >= 100")

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.validate()


def load_config(config_path: Optional[str] = None,
                use_env: bool = True) -> UnifierConfig:
    """
    Load configuration with priority: file > environment > defaults.

    Args:
        config_path: Path to configuration file (optional)
        use_env: Whether to load environment variables

    Returns:
        UnifierConfig: Loaded configuration
    """
    config = UnifierConfig()

    if use_env:
        env_config = UnifierConfig.from_env()
        # Merge non-default values from environment
        for field_name in UnifierConfig.__dataclass_fields__:
            env_value = getattr(env_config, field_name)
            if env_value != getattr(config, field_name):
                setattr(config, field_name, env_value)

    if config_path:
        # Only the keys present in the file override the environment
        for field_name, value in known_fields(read_config_file(config_path)).items():
            setattr(config, field_name, value)
        config.validate()

    return config


def read_config_file(config_path: str) -> Dict[str, Any]:
    """Read the raw mapping from a JSON or YAML configuration file."""
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            if config_path.lower().endswith(('.yaml', '.yml')):
                config_data = yaml.safe_load(f)
            else:
                config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file format: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML configuration file format: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config_data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {config_path}")

    return config_data


def known_fields(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys that are not UnifierConfig fields."""
    known_keys = set(UnifierConfig.__dataclass_fields__.keys())
    return {k: v for k, v in config_dict.items() if k in known_keys}
