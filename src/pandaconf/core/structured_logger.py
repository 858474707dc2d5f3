"""
Structured Logging
==================

JSON-structured log lines for configuration loading. Every message and
string field is passed through a redaction filter so credentials found in a
config document never reach the logs.
"""

import json
import logging
import re
from datetime import UTC, datetime

_SECRET_PATTERNS = re.compile(
    r"((?:password|license_key)[\"']?\s*[:=]\s*)(\"[^\"]*\"|'[^']*'|[^\s,}]+)",
    re.IGNORECASE,
)

_SECRET_FIELDS = frozenset({'password', 'scram_password', 'license_key'})


def _mask(match: re.Match[str]) -> str:
    value = match.group(2)
    quote = value[0] if value[0] in "\"'" else ""
    return f"{match.group(1)}{quote}[REDACTED]{quote}"


def _redact_secrets(text: str) -> str:
    return _SECRET_PATTERNS.sub(_mask, text)


class StructuredLogger:
    """
    Structured logger that outputs JSON logs

    Example output:
    {
        "timestamp": "2026-03-02T10:30:45.123Z",
        "level": "INFO",
        "component": "ConfigLoader",
        "message": "Loaded configuration file",
        "path": "/etc/redpanda/redpanda.yaml",
        "unknown_keys": 1
    }
    """

    def __init__(self, component: str, logger: logging.Logger | None = None) -> None:
        """
        Initialize structured logger

        Args:
            component: Component name (e.g., 'ConfigLoader', 'TLS')
            logger: Optional existing logger (creates new if not provided)
        """
        self.component = component
        self.logger = logger or logging.getLogger(component)

    def _log(self, level: str, message: str, **kwargs) -> None:
        if not self.logger.isEnabledFor(getattr(logging, level)):
            return
        log_method = getattr(self.logger, level.lower())

        log_entry = {
            'timestamp': datetime.now(tz=UTC).isoformat(),
            'level': level,
            'component': self.component,
            'message': _redact_secrets(message),
        }

        for k, v in kwargs.items():
            if k.lower() in _SECRET_FIELDS and v is not None:
                log_entry[k] = '[REDACTED]'
            else:
                log_entry[k] = _redact_secrets(v) if isinstance(v, str) else v

        log_method(_redact_secrets(json.dumps(log_entry, default=str)))

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message"""
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message"""
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message"""
        self._log('WARNING', message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message"""
        self._log('ERROR', message, **kwargs)


def get_logger(component: str) -> StructuredLogger:
    """
    Get a structured logger for a component

    Args:
        component: Component name

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(component)
