"""
storefront_core.observability.logging

Structured logging configuration for the client layer.

Responsibilities:
- Configure `structlog`: JSON lines outside development, a console renderer in it.
- Keep credentials (tokens, passwords) out of log output.
- Bind/unbind the active tenant so every log line carries it.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

SECRET_FIELDS = frozenset({"token", "password", "authorization", "current_password", "new_password"})
MASK = "***"


def configure_logging(*, service_name: str, level: str, json_logs: bool = True) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _service_field(service_name),
            mask_secrets,
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _service_field(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def mask_secrets(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in SECRET_FIELDS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = MASK
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_tenant(identifier: str | None) -> None:
    if identifier:
        structlog.contextvars.bind_contextvars(store=identifier)
    else:
        structlog.contextvars.unbind_contextvars("store")


# --- Module Notes -----------------------------------------------------------
# `bind_tenant` is called by the tenant resolver once a store has been identified.
