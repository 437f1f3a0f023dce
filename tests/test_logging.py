import logging

import pytest

from chathub.core.logging import APP_LOGGER, setup_logging


@pytest.fixture
def app_logger():
    logger = logging.getLogger(APP_LOGGER)
    saved = (logger.level, list(logger.handlers), logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.setLevel(saved[0])
    logger.handlers[:] = saved[1]
    logger.propagate = saved[2]


def test_level_applies_to_hub_loggers(app_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert setup_logging() is app_logger
    assert app_logger.level == logging.DEBUG
    assert logging.getLogger("chathub.services.room_hub").getEffectiveLevel() == logging.DEBUG


def test_explicit_level_wins_over_env(app_logger, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    setup_logging("warning")
    assert app_logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info(app_logger):
    setup_logging("chatty")
    assert app_logger.level == logging.INFO


def test_handler_attached_at_most_once(app_logger):
    root = logging.getLogger()
    saved = list(root.handlers)
    root.handlers.clear()
    try:
        setup_logging()
        setup_logging()
    finally:
        root.handlers[:] = saved
    assert len(app_logger.handlers) == 1
    assert app_logger.propagate is False


def test_defers_to_configured_root_logger(app_logger):
    root = logging.getLogger()
    marker = logging.NullHandler()
    root.addHandler(marker)
    try:
        setup_logging()
    finally:
        root.removeHandler(marker)
    assert app_logger.handlers == []
