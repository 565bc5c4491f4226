"""Observability – configure_logging (structlog JSON output via stdlib handlers)."""
from __future__ import annotations

import logging
from typing import Any

import structlog

from mp_webhooks.observability.logging.processors import RedactingProcessor


def configure_logging(
    level: int = logging.INFO,
    sensitive_fields: frozenset[str] | None = None,
    *,
    json: bool = True,
) -> None:
    """Route structlog through the stdlib root logger and render JSON lines.

    Sensitive keys (signatures, secrets, keys) are redacted before rendering.
    """
    shared_processors: list[Any] = [
        RedactingProcessor(sensitive_fields),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    renderer: Any = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


__all__ = ["configure_logging"]
