"""Tests for the log level taken from the environment."""

import logging

import pytest

from monday_items.platform.logging_config import log_level_from_env, setup_logging


@pytest.mark.parametrize(
    "environ,expected",
    [
        ({}, logging.INFO),
        ({"MONDAY_LOG_LEVEL": ""}, logging.INFO),
        ({"MONDAY_LOG_LEVEL": "DEBUG"}, logging.DEBUG),
        ({"MONDAY_LOG_LEVEL": " warning "}, logging.WARNING),
        ({"MONDAY_LOG_LEVEL": "15"}, 15),
        ({"MONDAY_LOG_LEVEL": "chatty"}, logging.INFO),
    ],
)
def test_log_level_from_env(environ, expected):
    assert log_level_from_env(environ) == expected


def test_setup_logging_reads_environment(monkeypatch):
    root = logging.getLogger()
    previous = root.level
    monkeypatch.setenv("MONDAY_LOG_LEVEL", "DEBUG")
    try:
        setup_logging()
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        root.setLevel(previous)
