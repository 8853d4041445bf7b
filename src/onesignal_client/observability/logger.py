"""structlog setup for the client and its CLI.

Events go through stdlib logging to stderr so CLI stdout stays machine-readable.
Every event dict is passed through the secret scrubber before rendering.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from onesignal_client.config.redact import redact_settings_dict

LOG_FORMATS = frozenset({"json", "human"})


def _scrub_event_dict(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    return redact_settings_dict(event_dict)


def configure_logging(*, log_level: str = "INFO", log_format: str = "human") -> None:
    """Route structlog and stdlib logging through one stderr handler."""
    if log_format not in LOG_FORMATS:
        raise ValueError(f"log_format must be one of {sorted(LOG_FORMATS)}, got {log_format!r}")

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        _scrub_event_dict,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level.upper())

    # httpx logs every request URL at INFO.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*shared_processors, ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
