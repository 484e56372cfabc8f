"""Logging setup for the Bad QB League tools.

Library modules log to children of the 'badqb' logger and never configure
handlers themselves; entry points call setup_logging() once.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

# Chatty third-party loggers capped at WARNING unless running at DEBUG
NOISY_LIBRARIES = ('urllib3', 'nflreadpy', 'httpx')


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    log_to_file: bool = False,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the 'badqb' logger.

    Console output goes to stderr so that standings tables printed on
    stdout stay clean. Calling this again replaces earlier handlers.

    Args:
        level: Level as a number or name ('DEBUG', 'INFO', ...)
        log_dir: Directory for log files (default: ./logs)
        log_to_file: Also write a timestamped badqb_YYYYmmdd_HHMMSS.log file
        log_to_console: Log to stderr

    Returns:
        Configured 'badqb' logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f'Unknown log level: {level}')

    logger = logging.getLogger('badqb')
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_to_file:
        log_dir = Path(log_dir) if log_dir is not None else Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'badqb_{datetime.now():%Y%m%d_%H%M%S}.log'

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S',
            )
        )
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))
        logger.addHandler(console_handler)

    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    return logger


def get_logger(module: Optional[str] = None) -> logging.Logger:
    """The 'badqb' logger, or its child for a module (get_logger('standings') -> 'badqb.standings')."""
    return logging.getLogger(f'badqb.{module}' if module else 'badqb')
