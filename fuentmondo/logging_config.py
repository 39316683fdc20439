"""Logging setup for the report CLI."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    console: bool = True,
) -> logging.Logger:
    """
    Configure the 'fuentmondo' logger that every engine module logs under.

    Args:
        level: Logging level (default: INFO)
        log_dir: When given, also write a timestamped log file there
        console: Whether to log to stdout (default: True)

    Returns:
        The configured 'fuentmondo' logger

    Example:
        setup_logging(logging.DEBUG, log_dir=Path('logs'))
    """
    logger = logging.getLogger('fuentmondo')
    logger.setLevel(level)
    logger.handlers = []

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'fuentmondo_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    return logger


def get_logger(name: str = 'fuentmondo') -> logging.Logger:
    """Return a logger under the 'fuentmondo' hierarchy."""
    if name != 'fuentmondo' and not name.startswith('fuentmondo.'):
        name = f'fuentmondo.{name}'
    return logging.getLogger(name)
