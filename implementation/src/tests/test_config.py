"""
Tests for config.py module.

Tests:
- PlantConfig validation
- PlantConfig.from_env overrides
- load_config file handling
- load_layout fallbacks
"""

import json
import logging
import os
import sys
from dataclasses import FrozenInstanceError

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant.config import PlantConfig, default_config_path, load_config
from plant.layout import Layout, load_layout


# =============================================================================
# Test PlantConfig
# =============================================================================

class TestPlantConfig:
    """Tests for PlantConfig dataclass."""

    def test_defaults(self):
        config = PlantConfig()
        assert config.tick_seconds == 1.0
        assert config.seed is None
        assert config.steamer_drain_pipe == "condenser"
        assert config.muse_preset is None
        assert config.log_level == "INFO"

    def test_is_frozen(self):
        config = PlantConfig()
        with pytest.raises(FrozenInstanceError):
            config.seed = 4

    def test_rejects_non_positive_tick(self):
        with pytest.raises(ValueError):
            PlantConfig(tick_seconds=0)

    def test_rejects_unknown_drain(self):
        with pytest.raises(ValueError):
            PlantConfig(steamer_drain_pipe="river")

    def test_default_path(self):
        path = default_config_path()
        assert path.name == "plant.json"
        assert path.parent.name == "implementation"


# =============================================================================
# Test from_env
# =============================================================================

class TestFromEnv:
    """Tests for environment overrides."""

    def test_empty_environment_keeps_base(self):
        base = PlantConfig(seed=9)
        assert PlantConfig.from_env(base, environ={}) is base

    def test_all_variables(self):
        config = PlantConfig.from_env(environ={
            "TMI_TICK_SECONDS": "0.5",
            "TMI_SEED": "1979",
            "TMI_STEAMER_DRAIN": " Feedwater ",
            "TMI_MUSE": "yes",
            "TMI_LOG_LEVEL": "debug",
        })
        assert config.tick_seconds == 0.5
        assert config.seed == 1979
        assert config.steamer_drain_pipe == "feedwater"
        assert config.muse_preset is True
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("value,expected", [("0", False), ("off", False), ("TRUE", True)])
    def test_muse_flag(self, value, expected):
        assert PlantConfig.from_env(environ={"TMI_MUSE": value}).muse_preset is expected

    def test_bad_boolean_raises(self):
        with pytest.raises(ValueError):
            PlantConfig.from_env(environ={"TMI_MUSE": "maybe"})

    def test_bad_drain_raises(self):
        with pytest.raises(ValueError):
            PlantConfig.from_env(environ={"TMI_STEAMER_DRAIN": "river"})


# =============================================================================
# Test load_config
# =============================================================================

class TestLoadConfig:
    """Tests for load_config function."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.json", environ={})
        assert config == PlantConfig()

    def test_reads_file(self, tmp_path):
        path = tmp_path / "plant.json"
        path.write_text(json.dumps({"seed": 5, "steamer_drain_pipe": "feedwater"}))
        config = load_config(path, environ={})
        assert config.seed == 5
        assert config.steamer_drain_pipe == "feedwater"

    def test_environment_wins_over_file(self, tmp_path):
        path = tmp_path / "plant.json"
        path.write_text(json.dumps({"seed": 5, "tick_seconds": 2.0}))
        config = load_config(path, environ={"TMI_SEED": "6"})
        assert config.seed == 6
        assert config.tick_seconds == 2.0

    def test_unreadable_file_warns_and_uses_defaults(self, tmp_path, caplog):
        path = tmp_path / "plant.json"
        path.write_text("{not json")
        with caplog.at_level(logging.WARNING, logger="plant.config"):
            config = load_config(path, environ={})
        assert config == PlantConfig()
        assert "ignoring unreadable config" in caplog.text

    def test_unknown_key_warns(self, tmp_path, caplog):
        path = tmp_path / "plant.json"
        path.write_text(json.dumps({"reactor": "chernobyl"}))
        with caplog.at_level(logging.WARNING, logger="plant.config"):
            config = load_config(path, environ={})
        assert config == PlantConfig()
        assert "ignoring unreadable config" in caplog.text

    def test_invalid_value_raises(self, tmp_path):
        path = tmp_path / "plant.json"
        path.write_text(json.dumps({"tick_seconds": 0}))
        with pytest.raises(ValueError):
            load_config(path, environ={})


# =============================================================================
# Test load_layout
# =============================================================================

class TestLoadLayout:
    """Window geometry falls back to defaults the same way the engine config does."""

    def test_missing_file(self, tmp_path):
        assert load_layout(tmp_path / "layout.json") == Layout()

    def test_partial_override(self, tmp_path):
        path = tmp_path / "layout.json"
        path.write_text(json.dumps({"window_width": 1280, "font_size": 16}))
        layout = load_layout(path)
        assert layout.window_width == 1280
        assert layout.font_size == 16
        assert layout.window_height == Layout().window_height

    @pytest.mark.parametrize("content", ["{broken", json.dumps({"sprites": True})])
    def test_bad_file(self, tmp_path, content):
        path = tmp_path / "layout.json"
        path.write_text(content)
        assert load_layout(path) == Layout()
