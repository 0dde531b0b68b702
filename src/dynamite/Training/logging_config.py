"""
Logging for command line runs.

Library modules only ever ask for logging.getLogger(__name__), so
everything they emit lands under the 'dynamite' logger. Nothing is
printed until setup_logging attaches handlers to it.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Routes the 'dynamite' logger to stderr and, optionally, a file.
    Calling it again replaces the handlers of the previous call.

    Args:
        level: Threshold for the logger and every handler it gets.
        log_file: Where to also write the run log. Overwritten if present.
    """
    logger = logging.getLogger("dynamite")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.debug("Logging to %s", log_file if log_file else "stderr only")
