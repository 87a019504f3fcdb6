import logging

import pytest

from opstate.utils.log import LOGGER_NAME
from opstate.utils.log import configure_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level = list(logger.handlers), logger.level
    logger.handlers = []
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


def test_level_from_settings(clean_logger, monkeypatch):
    from opstate.config import get_settings

    monkeypatch.setenv("LOG_LEVEL", "warning")
    get_settings.cache_clear()

    logger = configure_logging()

    assert logger is clean_logger
    assert logger.level == logging.WARNING


def test_handler_added_once(clean_logger):
    configure_logging("DEBUG")
    configure_logging("INFO")

    assert len(clean_logger.handlers) == 1
    assert clean_logger.level == logging.INFO


def test_unknown_level(clean_logger):
    with pytest.raises(ValueError):
        configure_logging("LOUD")
