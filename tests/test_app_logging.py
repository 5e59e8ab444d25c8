"""Tests for logging configuration."""

import logging

from platemate.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("platemate")
    logger.handlers.clear()

    configure_logging()
    configure_logging()

    assert len(logger.handlers) == 1
    assert logger.propagate is False
