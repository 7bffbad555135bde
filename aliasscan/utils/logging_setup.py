"""Centralized logging configuration for aliasscan.

Library modules only call ``get_logger``. Handlers are attached by
``setup_logging``, which the CLI calls once per command: a console handler
on stderr at the requested level and, optionally, a rotating JSON log file
that always records DEBUG and up.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

CONSOLE_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for machine-readable log files."""

    # Record attributes copied into the payload when a caller passes them via ``extra``
    CONTEXT_KEYS = ('operation', 'duration')

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'location': f"{record.module}:{record.funcName}:{record.lineno}",
            'message': record.getMessage(),
        }
        for key in self.CONTEXT_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        payload.update(getattr(record, 'extra_fields', {}))

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """Plain text formatter that colors the level name on a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: Optional[bool] = None):
        super().__init__(CONSOLE_FORMAT, datefmt=DATE_FORMAT)
        self.use_color = sys.stderr.isatty() if use_color is None else use_color

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname)
        if not self.use_color or color is None:
            return super().format(record)

        # Color a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _file_handler(log_file: Union[str, Path], json_format: bool) -> logging.Handler:
    log_file = Path(log_file)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8',
    )
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter(use_color=False))
    handler.setLevel(logging.DEBUG)
    return handler


def setup_logging(
    name: str = 'aliasscan',
    level: str = 'WARNING',
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    json_format: bool = True,
) -> logging.Logger:
    """
    Configure the ``aliasscan`` logger, replacing any handlers set earlier.

    Args:
        name: Logger name
        level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives every record from DEBUG up
            (rotated at 10MB)
        console: Enable console output on stderr
        json_format: Write the log file as JSON lines

    Returns:
        Configured logger instance
    """
    console_level = getattr(logging, level.upper())

    logger = logging.getLogger(name)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(console_handler)

    if log_file is not None:
        logger.addHandler(_file_handler(log_file, json_format))

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger under the ``aliasscan`` hierarchy.

    Library modules never attach handlers themselves; the package logger
    carries a ``NullHandler`` until an application calls ``setup_logging``.
    """
    return logging.getLogger(name)


def log_operation(logger: logging.Logger, operation: str, **context):
    """Log the start of ``operation`` at DEBUG with ``context`` as structured fields."""
    logger.debug(f"Starting operation: {operation}", extra={'operation': operation, 'extra_fields': context})
