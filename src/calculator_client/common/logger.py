"""Package-wide logger."""
import logging
import sys

LOGGER_NAME = "calculator_client"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger: logging.Logger = logging.getLogger(LOGGER_NAME)


def setup_logging(verbose: bool = False) -> None:
    """
    Attach a stderr handler to the package logger.

    Calling it again only updates the level, so the entrypoint and tests can
    both call it without duplicating output.

    :param bool verbose: Log envelopes at DEBUG level when True
    """
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
