"""
Structured logging for the location framework.

Every record carries the component that emitted it and, optionally, a small
context (user id, location id, search token) rendered as key=value pairs:

    [14:30:01.512] [ℹ️  INFO  ] [registry    ] Saved location 'Lima, Peru' user=user-1
"""

import logging
import sys
from typing import Any, Dict, Optional
from pathlib import Path
from datetime import datetime


ROOT_LOGGER_NAME = 'location_framework'

# Chatty transport loggers pulled in by supabase (httpx) and aiohttp
NOISY_LIBRARIES = ("httpx", "httpcore", "hpack", "aiohttp.access")


class StructuredFormatter(logging.Formatter):
    """Single-line records: time, level, component, message, context."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    EMOJIS = {
        'DEBUG': '🔍',
        'INFO': 'ℹ️ ',
        'WARNING': '⚠️ ',
        'ERROR': '❌',
        'CRITICAL': '💀'
    }

    def __init__(self, use_colors: bool = True, use_emojis: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.use_emojis = use_emojis

    def _level(self, levelname: str) -> str:
        label = f"{self.EMOJIS.get(levelname, '')} {levelname}" if self.use_emojis else levelname
        label = f"{label:10}"
        if self.use_colors and sys.stdout.isatty():
            label = f"{self.COLORS.get(levelname, '')}{label}{self.RESET}"
        return label

    @staticmethod
    def _context(record: logging.LogRecord) -> str:
        context = getattr(record, 'context', None) or {}
        return ' '.join(f"{key}={value}" for key, value in context.items())

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S.%f')[:-3]
        component = getattr(record, 'component', record.name.rsplit('.', 1)[-1])

        line = f"[{timestamp}] [{self._level(record.levelname)}] [{component:12}] {record.getMessage()}"
        context = self._context(record)
        if context:
            line = f"{line} {context}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class ComponentLogger:
    """
    Logger wrapper that stamps records with a component name.

    bind() returns a copy that also attaches context to every record, so an
    operation can log several lines about the same user or location without
    repeating ids in each message.
    """

    def __init__(self, logger: logging.Logger, component: str,
                 context: Optional[Dict[str, Any]] = None):
        self.logger = logger
        self.component = component
        self.context = dict(context or {})

    def bind(self, **context: Any) -> "ComponentLogger":
        merged = dict(self.context)
        merged.update({key: value for key, value in context.items() if value is not None})
        return ComponentLogger(self.logger, self.component, merged)

    def _log(self, level: int, msg: str, *args, **kwargs):
        extra = kwargs.get('extra', {})
        extra['component'] = self.component
        extra['context'] = self.context
        kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: str, *args, **kwargs):
        self._log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        kwargs['exc_info'] = True
        self._log(logging.ERROR, msg, *args, **kwargs)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    use_colors: bool = True,
    use_emojis: bool = True
) -> logging.Logger:
    """
    Configure the framework logger.

    Args:
        level: Log level name
        log_file: Optional path; file output is plain (no colors or emojis)
        use_colors: ANSI colors on a TTY
        use_emojis: Emoji level prefixes on the console

    Returns:
        The framework's root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        StructuredFormatter(use_colors=use_colors, use_emojis=use_emojis)
    )
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter(use_colors=False, use_emojis=False))
        logger.addHandler(file_handler)

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


def get_logger(component: str) -> ComponentLogger:
    """Component logger under the framework root (e.g. "search", "registry")."""
    return ComponentLogger(logging.getLogger(ROOT_LOGGER_NAME), component)
