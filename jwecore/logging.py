"""Structured logging setup for jwecore.

The library never configures logging on import. Applications (and the test
suite) call :func:`configure_logging` once; until then structlog's defaults
apply.
"""
from __future__ import annotations

import logging
import sys

import structlog

from jwecore.config import get_settings


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Configure structlog on top of the standard library logging module.

    Every record carries ``ts``, ``level`` and ``component`` keys. When ``json``
    is true the records are rendered as JSON lines, otherwise with the
    structlog console renderer. Arguments left as ``None`` fall back to
    :class:`jwecore.config.Settings`.
    """

    settings = get_settings()
    log_level = (level or settings.log_level).lower()
    render_json = settings.log_json if json is None else json
    numeric_level = _level_from_str(log_level)

    logging.basicConfig(
        level=numeric_level,
        handlers=[logging.StreamHandler(sys.stderr)],
        format="%(message)s",
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if render_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            structlog.stdlib.add_log_level,
            _component_processor,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


def _component_processor(
    logger: structlog.BoundLoggerBase, _name: str, event_dict: dict[str, object]
) -> dict[str, object]:
    """Ensure every log record carries a ``component`` field."""

    if event_dict.get("component") is None:
        event_dict["component"] = getattr(logger, "name", None) or "jwecore"
    return event_dict


def _level_from_str(level: str) -> int:
    mapping: dict[str, int] = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
    }
    return mapping.get(level, logging.INFO)


__all__ = ["configure_logging"]
