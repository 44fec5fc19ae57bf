"""Tests for the logging dictConfig builder."""

import logging

from calendar_assistant.core.logging_config import QUIET_LOGGERS, get_logging_config


def test_level_name_is_normalised():
    config = get_logging_config("debug")

    assert config["loggers"][""]["level"] == "DEBUG"
    assert config["handlers"]["console"]["level"] == "DEBUG"


def test_noisy_libraries_are_capped_at_warning():
    config = get_logging_config(logging.DEBUG)

    for name in QUIET_LOGGERS:
        assert config["loggers"][name]["level"] == logging.WARNING
        assert config["loggers"][name]["propagate"] is False
