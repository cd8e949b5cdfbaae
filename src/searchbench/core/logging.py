"""Structured logging configuration for the search benchmark harness."""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.stdlib import LoggerFactory


def configure_structlog(
    log_level: str = "INFO",
    json_format: bool = False,
    include_timestamp: bool = True,
    stream: Optional[Any] = None,
) -> None:
    """Configure structured logging for the harness.

    Log records go to stderr by default; stdout is reserved for the
    latency report.
    """

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    processors = [structlog.contextvars.merge_contextvars]

    if include_timestamp:
        processors.append(structlog.stdlib.add_log_level)
        processors.append(structlog.stdlib.add_logger_name)
        processors.append(structlog.dev.set_exc_info)
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors.extend([
        add_nanos_as_millis,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ])

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def add_nanos_as_millis(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add a millisecond rendering next to any ``duration_ns`` field."""
    duration_ns = event_dict.get("duration_ns")
    if isinstance(duration_ns, int):
        event_dict["duration_ms"] = round(duration_ns / 1_000_000, 3)

    return event_dict


class BenchContext:
    """Context manager that binds run-wide fields to every log entry."""

    def __init__(self, **context: Any):
        self.context = context
        self._tokens: Dict[str, Any] = {}

    def __enter__(self) -> BenchContext:
        self._tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.reset_contextvars(**self._tokens)


def log_trial_metric(
    logger: structlog.BoundLogger,
    trial: int,
    duration_ns: int,
    success: bool = True,
    **kwargs: Any,
) -> None:
    """Log a single trial measurement with structured data."""
    log_data = {
        "trial": trial,
        "duration_ns": duration_ns,
        "success": success,
    }
    log_data.update(kwargs)

    # Remove None values
    log_data = {k: v for k, v in log_data.items() if v is not None}

    if success:
        logger.debug("Trial completed", **log_data)
    else:
        logger.warning("Trial failed", **log_data)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger."""
    return structlog.get_logger(name)


def get_harness_logger(component: str) -> structlog.BoundLogger:
    """Get a harness component logger."""
    return structlog.get_logger(f"searchbench.harness.{component}")
