"""
Structured logging built on structlog.

Usage:
    from agentrun.utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("run_created", run_id=run.id, agent_name=run.agent_name)
"""

import logging
import sys
from typing import Any

import structlog

SENSITIVE_KEYS = ("api_key", "password", "secret", "authorization", "token")

# Counters that contain "token" but are not credentials
_NON_SENSITIVE_KEYS = frozenset(
    {"tokens", "total_tokens", "input_tokens", "output_tokens"}
)

_configured = False


def filter_sensitive_data(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Redact credential-like values before rendering."""
    for key in list(event_dict.keys()):
        lowered = key.lower()
        if lowered in _NON_SENSITIVE_KEYS:
            continue
        if any(marker in lowered for marker in SENSITIVE_KEYS):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog and the stdlib root handler.

    Args:
        level: Minimum log level name
        json_logs: Render JSON lines instead of the console format
    """
    global _configured

    log_level = getattr(logging, level.upper(), logging.INFO)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            filter_sensitive_data,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )
    _configured = True


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a structlog logger, configuring defaults on first use."""
    if not _configured:
        from agentrun.config import settings

        configure_logging(settings.log_level, settings.json_logs)
    return structlog.get_logger(name)


__all__ = ["configure_logging", "filter_sensitive_data", "get_logger"]
