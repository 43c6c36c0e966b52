"""Structured logging configuration."""
import logging
import structlog
from core.config import settings

# Event keys whose values must never reach a log sink
REDACTED_KEYS = frozenset({"api_key", "authorization", "token", "pagerduty_api_key"})


def redact_secrets(logger, method_name, event_dict):
    """structlog processor masking credential-bearing fields."""
    for key in list(event_dict):
        if key.lower() in REDACTED_KEYS:
            event_dict[key] = "***"
    return event_dict


def configure_logging(log_level: str | None = None):
    """
    Configure structured logging with structlog.

    Args:
        log_level: Override for settings.log_level (e.g. "DEBUG" in tests)
    """
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            redact_secrets,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str):
    """Get a logger instance."""
    return structlog.get_logger(name)
