"""
Tests for logging_utils module.
"""

import io
import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant.logging_utils import (
    ROOT_LOGGER,
    configure_logging,
    get_logger,
    reset_logging,
    set_level,
    set_verbose,
)


@pytest.fixture(autouse=True)
def restore_plant_logger():
    root = logging.getLogger(ROOT_LOGGER)
    level = root.level
    yield
    root.setLevel(level)


class TestGetLogger:
    """Test get_logger function."""

    def test_returns_logger(self):
        assert isinstance(get_logger("test_module"), logging.Logger)

    def test_module_names_kept(self):
        assert get_logger("plant.lifecycle").name == "plant.lifecycle"

    def test_other_names_prefixed(self):
        assert get_logger("mymodule").name == "plant.mymodule"

    def test_multiple_calls_same_logger(self):
        assert get_logger("same_module") is get_logger("same_module")


class TestConfigureLogging:
    """Test configure_logging function."""

    def test_configures_once(self):
        root = logging.getLogger(ROOT_LOGGER)
        initial_handlers = len(root.handlers)

        configure_logging()
        configure_logging()
        configure_logging()

        assert len(root.handlers) <= initial_handlers + 1

    def test_custom_stream(self):
        stream = io.StringIO()
        reset_logging()
        try:
            configure_logging(level="DEBUG", stream=stream)
            get_logger("plant.test").debug("valve %s stuck", "K")
            assert "valve K stuck" in stream.getvalue()
            assert "[DEBUG] plant.test" in stream.getvalue()
        finally:
            reset_logging()
            configure_logging()


class TestSetLevel:
    """Test set_level and set_verbose."""

    def test_by_name(self):
        set_level("warning")
        assert logging.getLogger(ROOT_LOGGER).level == logging.WARNING

    def test_by_number(self):
        set_level(logging.ERROR)
        assert logging.getLogger(ROOT_LOGGER).level == logging.ERROR

    def test_unknown_name_falls_back_to_info(self):
        set_level("chatty")
        assert logging.getLogger(ROOT_LOGGER).level == logging.INFO

    def test_set_verbose_true(self):
        set_verbose(True)
        assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG

    def test_set_verbose_false(self):
        set_verbose(False)
        assert logging.getLogger(ROOT_LOGGER).level == logging.INFO
