"""Structured logging with sensitive data redaction."""

import logging
import json
import re
from datetime import datetime, timezone
import os

from delivery_scraper.core.config import settings

class SensitiveDataFilter(logging.Filter):
    """Filter to redact sensitive information from logs."""

    SENSITIVE_PATTERNS = [
        (r'(api[_-]?key["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', r'\1***REDACTED***'),
        (r'(x-api-key["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', r'\1***REDACTED***'),
        (r'(token["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', r'\1***REDACTED***'),
        (r'(secret["\']?\s*[:=]\s*["\']?)([^"\'}\s]+)', r'\1***REDACTED***'),
        (r'(authorization:\s*bearer\s+)(\S+)', r'\1***REDACTED***'),
        (r'sk_live_[a-zA-Z0-9]+', 'sk_live_***REDACTED***'),
    ]

    def _redact(self, value: str) -> str:
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            value = re.sub(pattern, replacement, value, flags=re.IGNORECASE)
        return value

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact sensitive data from log message."""
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)

        # Also redact from args if present
        if isinstance(record.args, tuple) and record.args:
            record.args = tuple(
                self._redact(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )

        return True

class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    STRUCTURED_FIELDS = [
        'request_id', 'step', 'url', 'selector', 'status',
        'duration_ms', 'count', 'kind', 'method', 'strategy',
    ]

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key in self.STRUCTURED_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)

def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler

def setup_logger(
    name: str = "delivery_scraper",
    level: str = "INFO",
    log_file: str = None,
    json_format: bool = True
) -> logging.Logger:
    """
    Setup structured logger with sensitive data filtering.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for logging
        json_format: Whether to use JSON formatting

    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.addFilter(SensitiveDataFilter())

    # Reconfiguring replaces handlers instead of stacking them
    logger.handlers = []

    console_formatter = JSONFormatter() if json_format else logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger.addHandler(_handler(logging.StreamHandler(), log_level, console_formatter))

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        logger.addHandler(_handler(logging.FileHandler(log_file), log_level, JSONFormatter()))

    return logger

# Global logger instance
logger = setup_logger(
    name="delivery_scraper",
    level=settings.log_level,
    log_file=settings.log_file or None,
    json_format=True
)

def log_step(step: str, **kwargs):
    """
    Log a scrape pipeline step with structured data.

    Args:
        step: Step name (launch, navigate, search, extract, filter, etc.)
        **kwargs: Additional context (request_id, url, selector, status, duration_ms, etc.)
    """
    extra = {'step': step}
    extra.update(kwargs)

    status = kwargs.get('status', 'unknown')
    if status == 'success':
        logger.info(f"Step completed: {step}", extra=extra)
    elif status == 'error':
        logger.error(f"Step failed: {step}", extra=extra)
    else:
        logger.debug(f"Step: {step}", extra=extra)
