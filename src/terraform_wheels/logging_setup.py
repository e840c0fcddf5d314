"""Diagnostic logging configuration."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV_VAR = "TFW_LOG_LEVEL"


def setup_logging(level: str = "WARNING") -> None:
    """Send terraform_wheels log records to stderr through rich.

    ``$TFW_LOG_LEVEL`` overrides ``level`` when set.
    """
    level = os.environ.get(LOG_LEVEL_ENV_VAR, level).upper()

    logger = logging.getLogger("terraform_wheels")
    logger.setLevel(level)
    # Re-running setup must not stack handlers
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
