"""Test setup_logging."""
import logging

from calculator_client.common.logger import logger, setup_logging


def test_setup_logging_is_idempotent() -> None:
    """Calling it twice installs a single handler."""
    setup_logging()
    setup_logging()
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_setup_logging_verbose() -> None:
    """Verbose mode logs envelopes at DEBUG level."""
    setup_logging(verbose=True)
    assert logger.level == logging.DEBUG
