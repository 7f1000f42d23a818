"""
Flotify - Structured Logging

structlog configured on top of the standard logging module.
Every event carries a UTC timestamp, level, logger name and the
current request ID. Bearer tokens, JWTs and password pairs are
redacted before rendering.
"""

import logging
import re
import sys
from contextvars import ContextVar
from typing import Any, Optional

import structlog


request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_JWT_RE = re.compile(r"\beyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\b")
_BEARER_RE = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9_\-\.=]+)")
_KV_RE = re.compile(r"(?i)\b(password|secret|token|secret_key)\b\s*=\s*([^\s,;]+)")

_REDACTED = "***REDACTED***"
_configured = False


def set_request_id(request_id: Optional[str]) -> None:
    request_id_var.set(request_id)


def _redact_str(value: str) -> str:
    value = _BEARER_RE.sub(f"Bearer {_REDACTED}", value)
    value = _JWT_RE.sub(_REDACTED, value)
    value = _KV_RE.sub(lambda m: f"{m.group(1)}={_REDACTED}", value)
    return value


def redact_event(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key, value in list(event_dict.items()):
        if isinstance(value, str):
            event_dict[key] = _redact_str(value)
    return event_dict


def add_request_id(_, __, event_dict: dict[str, Any]) -> dict[str, Any]:
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    return event_dict


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog and the root logger.
    
    Safe to call more than once; only the level changes after the
    first call.
    
    Args:
        level: Minimum level name (e.g. "INFO")
        json_output: Render JSON lines instead of console output
    """
    global _configured
    
    root = logging.getLogger()
    root.setLevel(level.upper())
    
    if _configured:
        return
    
    shared_processors = [
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_request_id,
        redact_event,
    ]
    
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.handlers.clear()
    root.addHandler(handler)
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
