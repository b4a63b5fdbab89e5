#!/usr/bin/env python3

"""
Unit tests for configuration management.

Tests the configuration loading, validation, and environment
variable handling functionality.
"""

import unittest
import tempfile
import os
import json
import sys
from unittest.mock import patch

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from tuni.core.config import UnifierConfig, load_config
from tuni.core.exceptions import ConfigurationError


class TestUnifierConfig(unittest.TestCase):
    """Test UnifierConfig class."""

    def test_default_config(self):
        """Test default configuration values."""
        config = UnifierConfig()

        self.assertEqual(config.label_prefix, "tuni_")
        self.assertEqual(config.label_attribute, "tuni_id")
        self.assertEqual(config.output_tag, "tuni")
        self.assertEqual(config.memory_limit_mb, 4096)
        self.assertTrue(config.enable_memory_monitoring)
        self.assertTrue(config.intern_strings)
        self.assertFalse(config.generate_reports)
        self.assertFalse(config.debug_mode)

    def test_config_validation(self):
        """Test configuration validation."""
        config = UnifierConfig()
        config.validate()  # Should not raise

        invalid = [
            {"label_prefix": ""},
            {"label_prefix": "tuni id"},
            {"label_attribute": "tuni;id"},
            {"label_attribute": 'tuni"id'},
            {"output_tag": "a=b"},
            {"memory_limit_mb": 50},
        ]
        for kwargs in invalid:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ConfigurationError):
                    UnifierConfig(**kwargs)

    def test_config_from_dict(self):
        """Test creating config from dictionary."""
        config_dict = {
            "label_prefix": "merged_",
            "memory_limit_mb": 8192,
            "debug_mode": True,
            "unknown_key": "ignored"  # Should be filtered out
        }

        config = UnifierConfig.from_dict(config_dict)

        self.assertEqual(config.label_prefix, "merged_")
        self.assertEqual(config.memory_limit_mb, 8192)
        self.assertTrue(config.debug_mode)
        # Default values for unspecified parameters
        self.assertEqual(config.label_attribute, "tuni_id")

    def test_config_to_dict(self):
        """Test converting config to dictionary."""
        config = UnifierConfig(memory_limit_mb=8192, debug_mode=True)
        config_dict = config.to_dict()

        self.assertIsInstance(config_dict, dict)
        self.assertEqual(config_dict["memory_limit_mb"], 8192)
        self.assertTrue(config_dict["debug_mode"])
        self.assertIn("label_prefix", config_dict)

    def test_config_from_json_file(self):
        """Test loading config from JSON file."""
        config_data = {
            "label_attribute": "unified_id",
            "generate_reports": True,
        }

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump(config_data, f)
            config_path = f.name

        try:
            config = UnifierConfig.from_file(config_path)

            self.assertEqual(config.label_attribute, "unified_id")
            self.assertTrue(config.generate_reports)
            self.assertEqual(config.label_prefix, "tuni_")
        finally:
            os.unlink(config_path)

    def test_config_from_yaml_file(self):
        """Test loading config from YAML file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("label_prefix: sample_\nmemory_limit_mb: 2048\n")
            config_path = f.name

        try:
            config = UnifierConfig.from_file(config_path)

            self.assertEqual(config.label_prefix, "sample_")
            self.assertEqual(config.memory_limit_mb, 2048)
        finally:
            os.unlink(config_path)

    def test_config_from_nonexistent_file(self):
        """Test error handling for nonexistent config file."""
        with self.assertRaises(ConfigurationError):
            UnifierConfig.from_file("/nonexistent/config.json")

    def test_config_from_invalid_json(self):
        """Test error handling for invalid JSON."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            f.write("{ invalid json }")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                UnifierConfig.from_file(config_path)
        finally:
            os.unlink(config_path)

    def test_config_from_non_mapping_yaml(self):
        """Test error handling for YAML that is not a mapping."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yml', delete=False) as f:
            f.write("- just\n- a list\n")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                UnifierConfig.from_file(config_path)
        finally:
            os.unlink(config_path)

    def test_config_save_to_file(self):
        """Test saving config to JSON and YAML files."""
        config = UnifierConfig(memory_limit_mb=2048, debug_mode=True)

        for suffix in ('.json', '.yaml'):
            with tempfile.NamedTemporaryFile(mode='w', suffix=suffix, delete=False) as f:
                config_path = f.name

            try:
                config.save_to_file(config_path)

                loaded_config = UnifierConfig.from_file(config_path)
                self.assertEqual(loaded_config, config)
            finally:
                if os.path.exists(config_path):
                    os.unlink(config_path)

    def test_config_from_env(self):
        """Test loading config from environment variables."""
        env_vars = {
            'TUNI_LABEL_PREFIX': 'env_',
            'TUNI_MEMORY_LIMIT_MB': '2048',
            'TUNI_GENERATE_REPORTS': 'yes',
            'TUNI_DEBUG_MODE': 'true',
        }

        with patch.dict(os.environ, env_vars):
            config = UnifierConfig.from_env()

        self.assertEqual(config.label_prefix, "env_")
        self.assertEqual(config.memory_limit_mb, 2048)
        self.assertTrue(config.generate_reports)
        self.assertTrue(config.debug_mode)
        # Default for unspecified
        self.assertEqual(config.output_tag, "tuni")

    def test_config_from_env_invalid_values(self):
        """Test error handling for invalid environment values."""
        with patch.dict(os.environ, {'TUNI_MEMORY_LIMIT_MB': 'invalid'}):
            with self.assertRaises(ConfigurationError):
                UnifierConfig.from_env()

        with patch.dict(os.environ, {'TUNI_LABEL_ATTRIBUTE': 'tuni id'}):
            with self.assertRaises(ConfigurationError):
                UnifierConfig.from_env()


class TestLoadConfig(unittest.TestCase):
    """Test the load_config function."""

    def test_load_default_config(self):
        """Test loading default configuration."""
        with patch.dict(os.environ, {}, clear=True):
            config = load_config()

        self.assertEqual(config, UnifierConfig())

    def test_load_config_with_file(self):
        """Test loading config with file override."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"label_prefix": "file_"}, f)
            config_path = f.name

        try:
            config = load_config(config_path=config_path, use_env=False)

            self.assertEqual(config.label_prefix, "file_")
            self.assertEqual(config.memory_limit_mb, 4096)
        finally:
            os.unlink(config_path)

    def test_load_config_priority(self):
        """Test configuration loading priority: file > env > defaults."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"memory_limit_mb": 1024}, f)
            config_path = f.name

        try:
            with patch.dict(os.environ, {'TUNI_MEMORY_LIMIT_MB': '2048'}):
                config = load_config(config_path=config_path, use_env=True)

            # File should override environment
            self.assertEqual(config.memory_limit_mb, 1024)
        finally:
            os.unlink(config_path)

    def test_load_config_file_keeps_other_env_values(self):
        """A file overrides only the keys it sets."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            json.dump({"debug_mode": True}, f)
            config_path = f.name

        try:
            with patch.dict(os.environ, {'TUNI_LABEL_PREFIX': 'env_', 'TUNI_INTERN_STRINGS': 'false'}):
                config = load_config(config_path=config_path, use_env=True)

            self.assertEqual(config.label_prefix, "env_")
            self.assertFalse(config.intern_strings)
            self.assertTrue(config.debug_mode)
        finally:
            os.unlink(config_path)

    def test_load_config_invalid_file_value(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write("output_tag: 'a b'\n")
            config_path = f.name

        try:
            with self.assertRaises(ConfigurationError):
                load_config(config_path=config_path, use_env=False)
        finally:
            os.unlink(config_path)

    def test_load_config_env(self):
        with patch.dict(os.environ, {'TUNI_OUTPUT_TAG': 'unified'}):
            self.assertEqual(load_config(use_env=True).output_tag, "unified")

    def test_load_config_no_env(self):
        """Test loading config without environment variables."""
        with patch.dict(os.environ, {'TUNI_MEMORY_LIMIT_MB': '2048'}):
            config = load_config(use_env=False)

        self.assertEqual(config.memory_limit_mb, 4096)


if __name__ == '__main__':
    unittest.main()
