"""Loguru setup shared by every command."""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

DEFAULT_COMPONENT = 'uniform-sso-migrate'

CONSOLE_FORMAT = (
    '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
    '<level>{level: <8}</level> | '
    '<cyan>{extra[component]}</cyan> | '
    '<level>{message}</level>'
)
FILE_FORMAT = (
    '{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[component]} | {message}'
)

LOG_ROTATION = '10 MB'
LOG_RETENTION = '30 days'


def _handler_options(level: str) -> Dict[str, Any]:
    # Tracebacks never render local values
    return {'level': level.upper(), 'backtrace': True, 'diagnose': False}


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Replace loguru's handlers with a console handler and an optional file.

    Components log through ``logger.bind(component=...)``; records without a
    bound component are labelled with the tool name.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path, rotated and gzip-compressed
        log_format: Optional console format overriding ``CONSOLE_FORMAT``
    """
    logger.remove()
    logger.configure(extra={'component': DEFAULT_COMPONENT})

    logger.add(
        sys.stderr,
        format=log_format or CONSOLE_FORMAT,
        colorize=True,
        **_handler_options(level),
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=FILE_FORMAT,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            compression='gz',
            encoding='utf-8',
            **_handler_options(level),
        )

    logger.debug(f'Logging to stderr at {level.upper()}')
    if log_file:
        logger.info(f'Writing log file: {log_file}')
