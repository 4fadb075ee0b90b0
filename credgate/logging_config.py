"""
Logging configuration for the Credgate API.

Tokens embed the holder's credential and reach the server as
``/api/status?token=...``, so every handler redacts ``token=`` values before
a record is written. Liveness probes are dropped from the access log.
"""

import logging
import logging.config
import re
from typing import Any, Dict

REDACTED = "[redacted]"

_TOKEN_PARAM = re.compile(r"(\btoken=)[^&\s\"']+")


def redact_tokens(text: str) -> str:
    """Replace every ``token=<value>`` in ``text`` with a placeholder."""
    return _TOKEN_PARAM.sub(rf"\g<1>{REDACTED}", text)


class TokenRedactionFilter(logging.Filter):
    """Scrub token query parameters from a record's message and arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact_tokens(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(
                redact_tokens(arg) if isinstance(arg, str) else arg for arg in record.args
            )
        return True


class HealthCheckFilter(logging.Filter):
    """Drop uvicorn access-log lines for ``GET /health``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "GET /health " in message:
                return False
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """
    Build a dictConfig for uvicorn and the credgate package.

    Args:
        level: Level applied to every configured logger

    Returns:
        Dict suitable for ``logging.config.dictConfig`` or uvicorn's
        ``log_config``
    """
    handler = {
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stdout",
        "filters": ["redact_tokens"],
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "redact_tokens": {"()": TokenRedactionFilter},
            "skip_health_checks": {"()": HealthCheckFilter},
        },
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(asctime)s - access - %(message)s"},
        },
        "handlers": {
            "default": {**handler, "formatter": "default"},
            "access": {
                **handler,
                "formatter": "access",
                "filters": ["skip_health_checks", "redact_tokens"],
            },
        },
        "loggers": {
            name: {"handlers": [handler_name], "level": level, "propagate": False}
            for name, handler_name in (
                ("uvicorn", "default"),
                ("uvicorn.error", "default"),
                ("uvicorn.access", "access"),
                ("credgate", "default"),
            )
        },
        "root": {"level": level, "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
