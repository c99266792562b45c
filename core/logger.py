"""
==========================================
Logging setup for the CQL client tooling.
==========================================

One place to configure the root logger: a coloured console handler with
level emojis and an optional UTF-8 log file. Library modules only call
``logging.getLogger(__name__)``; the command-line entry point calls
``setup_logging()`` once at start.

Example:
    >>> from core.logger import get_logger, setup_logging
    >>>
    >>> setup_logging(log_level='DEBUG', log_file='cql.log')
    >>> logger = get_logger(__name__)
    >>> logger.info("Connected")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from core.config import config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Console formatter that tints the level name and prefixes an emoji.

    Attributes:
        COLORS: ANSI colour code per level name
        EMOJI: Emoji marker per level name
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    EMOJI = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '🔥',
    }

    def format(self, record):
        """Format a record without leaking colour codes into other handlers.

        Args:
            record: LogRecord instance to format

        Returns:
            Formatted message with ANSI colours and emoji
        """
        original_levelname = record.levelname
        record.emoji = self.EMOJI.get(original_levelname, '')
        color = self.COLORS.get(original_levelname)
        if color:
            record.levelname = f"{color}{original_levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Get a named logger, optionally overriding its level.

    Args:
        name: Logger name (normally ``__name__``)
        level: Optional level name (DEBUG/INFO/WARNING/ERROR/CRITICAL)

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)

    if level:
        logger.setLevel(getattr(logging, level.upper()))

    return logger


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    console_output: bool = True,
    use_colors: bool = True
) -> None:
    """Configure the root logger.

    Replaces any handlers already installed on the root logger, so calling
    it twice does not duplicate output.

    Args:
        log_level: Level name; defaults to ``LOG_LEVEL`` from configuration
        log_file: Optional file name; defaults to ``LOG_FILE`` from configuration
        log_dir: Directory for ``log_file``; defaults to the project ``logs/`` dir
        console_output: Emit to stdout
        use_colors: Use ColoredFormatter for the console handler

    Example:
        >>> setup_logging(log_level='INFO')
        >>> setup_logging(log_level='DEBUG', log_file='cql.log', log_dir='/tmp')
    """
    level = getattr(logging, (log_level or config.project.log_level).upper())
    log_file = log_file or config.project.log_file

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if use_colors:
            console_handler.setFormatter(
                ColoredFormatter('%(emoji)s ' + LOG_FORMAT, datefmt=DATE_FORMAT)
            )
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_dir) if log_dir else config.project.logs_dir
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path / log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    # The driver is chatty at INFO about topology changes
    logging.getLogger('cassandra').setLevel(max(level, logging.WARNING))
