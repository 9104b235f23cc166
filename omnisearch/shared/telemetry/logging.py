"""Logging configuration for the search engine."""

import logging
import sys

from omnisearch.core.config import get_settings

_PACKAGE_LOGGER = "omnisearch"


def setup_logging() -> None:
    """Configure logging for processes embedding the search engine.

    The omnisearch logger is DEBUG when settings.debug is True, otherwise INFO.
    SQL statement logging stays at WARNING unless settings.database_echo is set
    (SQLAlchemy then logs statements itself). Output goes to stdout.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger(_PACKAGE_LOGGER).setLevel(log_level)
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module name.

    Args:
        name: Usually __name__ of the calling module.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)
