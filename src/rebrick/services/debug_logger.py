"""
Debug Logging Service
=====================
Logging helpers for the rebrick client with:
- Named module loggers under the ``rebrick`` namespace
- Opt-in console/file handlers (library code never touches the root logger)
- PII filtering for API keys, passwords and user tokens
- Network request and exception logging
"""

import logging
import re
import traceback
from pathlib import Path
from typing import Optional, Union

ROOT_LOGGER_NAME = "rebrick"


class PIIFilter(logging.Filter):
    """Filter to redact credentials from log messages"""

    # Patterns to redact
    PII_PATTERNS = [
        (r'(password)["\']?\s*[:=]\s*["\']?([^"\'&\s,}]+)', r'\1=***REDACTED***'),
        (r'(api[_-]?key)["\']?\s*[:=]\s*["\']?([^"\'&\s,}]+)', r'\1=***REDACTED***'),
        (r'(user[_-]?token)["\']?\s*[:=]\s*["\']?([^"\'&\s,}]+)', r'\1=***REDACTED***'),
        (r'(authorization)["\']?\s*[:=]\s*["\']?(Key\s+)?([^"\'&\s,}]+)', r'\1=***REDACTED***'),
        (r'(Key\s+)([A-Za-z0-9\-_.]{8,})', r'\1***REDACTED***'),
        # Rebrickable puts the user token in the path of every users/ endpoint
        (r'(users/)([A-Fa-f0-9]{32,})', r'\1***REDACTED***'),
    ]

    def filter(self, record):
        msg = record.getMessage()
        for pattern, replacement in self.PII_PATTERNS:
            msg = re.sub(pattern, replacement, msg, flags=re.IGNORECASE)
        record.msg = msg
        record.args = ()
        return True


_handlers = []


def init_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the ``rebrick`` logger.

    Safe to call more than once: handlers installed by a previous call are
    replaced rather than duplicated.

    Args:
        level: Logging level name or number
        log_file: Optional path of a log file to write alongside the console

    Returns:
        The configured ``rebrick`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    # Remove handlers from a previous init
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.addFilter(PIIFilter())
    console_handler.setFormatter(logging.Formatter('%(levelname)s | %(name)s | %(message)s'))
    _handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(PIIFilter())
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        _handlers.append(file_handler)

    for handler in _handlers:
        logger.addHandler(handler)

    # Reduce verbosity for noisy third-party loggers
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.debug(f"Logging initialised at level {logging.getLevelName(level)}")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module, namespaced under ``rebrick``"""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


# Network logging utilities
def log_request(logger: logging.Logger, method: str, url: str, status: int = None):
    """Log an HTTP request with PII filtering"""
    # Redact auth endpoints
    if any(x in url.lower() for x in ['_token', 'login', 'password']):
        url = re.sub(r'\?.*', '?***PARAMS_REDACTED***', url)

    if status:
        level = logging.DEBUG if 200 <= status < 400 else logging.WARNING
        logger.log(level, f"HTTP {method} {url} - {status}")
    else:
        logger.debug(f"HTTP {method} {url} - Sending...")


def log_exception(logger: logging.Logger, exc: BaseException, context: str = ""):
    """Log an exception, with its traceback at debug level"""
    logger.error(f"EXCEPTION in {context}: {exc!r}")
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.debug(f"Traceback:\n{tb}")
