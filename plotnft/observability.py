"""
PlotNFT Observability

Structured logging, correlation ids and a hash-chained audit trail.

Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                    Registry Code                         │
    │  logger.info("msg", token_id=x)   audit.log(...)         │
    └───────────────────────┬─────────────────────────────────┘
                            │
    ┌───────────────────────▼─────────────────────────────────┐
    │              PlotLogger / AuditLogger                    │
    │  correlation ids, component tags, structured context    │
    └───────────────────────┬─────────────────────────────────┘
                            │
    ┌───────────────────────▼─────────────────────────────────┐
    │                  logging handlers                        │
    │        StructuredHandler (json)  │  StreamHandler (text) │
    └─────────────────────────────────────────────────────────┘

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import contextvars
import hashlib
import json
import logging
import sys
import traceback
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class Component(Enum):
    """Registry components for log categorization."""
    REGISTRY = "registry"
    CONFIG = "config"
    SIMULATOR = "simulator"
    AUDIT = "audit"


@dataclass
class LogEvent:
    """Structured log event."""
    timestamp: str
    level: str
    logger: str
    message: str
    correlation_id: str = ""
    component: str = ""
    operation: str = ""
    error_code: str = ""
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding empty values."""
        d = asdict(self)
        return {k: v for k, v in d.items() if v is not None and v != "" and v != {}}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class StructuredHandler(logging.Handler):
    """Logging handler that outputs one JSON object per line."""

    def __init__(self, stream: Any = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            event = LogEvent(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                level=record.levelname.lower(),
                logger=record.name,
                message=record.getMessage(),
                correlation_id=correlation_id_var.get(),
                component=getattr(record, "component", ""),
                operation=getattr(record, "operation", ""),
                error_code=getattr(record, "error_code", ""),
                context=getattr(record, "context", {}),
            )

            if record.exc_info:
                event.exception = "".join(traceback.format_exception(*record.exc_info))

            stream = self.stream or sys.stderr
            stream.write(event.to_json() + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class PlotLogger:
    """
    Structured logger for registry components.

    Every record carries the component, the operation name and the current
    correlation id; keyword arguments become the structured context.
    """

    def __init__(
        self,
        name: str,
        component: Component,
        level: LogLevel = LogLevel.INFO,
        log_format: str = "json",
        stream: Any = None,
    ):
        self.name = name
        self.component = component
        self._logger = logging.getLogger(f"plotnft.{component.value}.{name}")
        self._logger.setLevel(getattr(logging, level.value.upper()))

        # Swap the handler when the configured format has changed
        wanted = logging.StreamHandler if log_format == "text" else StructuredHandler
        for existing in list(self._logger.handlers):
            if type(existing) is not wanted:
                self._logger.removeHandler(existing)

        if not self._logger.handlers:
            if log_format == "text":
                handler: logging.Handler = logging.StreamHandler(stream or sys.stderr)
                handler.setFormatter(logging.Formatter(TEXT_FORMAT))
            else:
                handler = StructuredHandler(stream)
            self._logger.addHandler(handler)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(
        self,
        level: int,
        message: str,
        operation: str = "",
        error_code: str = "",
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        extra = {
            "component": self.component.value,
            "operation": operation,
            "error_code": error_code,
            "context": context,
        }
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, **context)

    def error(
        self,
        message: str,
        error_code: str = "",
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        self._log(logging.ERROR, message, error_code=error_code, exc_info=exc_info, **context)


def generate_correlation_id() -> str:
    return f"corr-{uuid.uuid4().hex[:12]}"


def set_correlation_id(correlation_id: str) -> contextvars.Token:
    """Set the correlation ID for the current context."""
    return correlation_id_var.set(correlation_id)


def get_correlation_id() -> str:
    """Get the current correlation ID, creating one if unset."""
    cid = correlation_id_var.get()
    if not cid:
        cid = generate_correlation_id()
        correlation_id_var.set(cid)
    return cid


def get_logger(name: str, component: Component) -> PlotLogger:
    """Get a logger configured from the active observability settings."""
    from plotnft.config import get_config

    obs = get_config().observability
    return PlotLogger(
        name,
        component,
        level=LogLevel(obs.log_level.get()),
        log_format=obs.log_format.get(),
    )


# =============================================================================
# AUDIT TRAIL
# =============================================================================

@dataclass
class AuditEvent:
    """Audit record for a single registry call."""
    event_id: str
    timestamp: str
    actor: str
    action: str
    resource_type: str
    resource_id: str
    outcome: str  # success, failure
    correlation_id: str = ""
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


GENESIS_HASH = "genesis"


def _chain_hash(event: AuditEvent, previous_hash: str) -> str:
    data = json.dumps(event.to_dict(), sort_keys=True, default=str) + previous_hash
    return hashlib.sha256(data.encode()).hexdigest()


class AuditLogger:
    """
    Tamper-evident audit trail.

    Each entry's hash covers the entry and the previous hash, so altering
    any recorded entry breaks ``verify()`` for every entry after it.
    """

    def __init__(self, logger: PlotLogger):
        self._logger = logger
        self._last_hash: str = GENESIS_HASH
        self._entries: List[Tuple[AuditEvent, str]] = []

    @property
    def last_hash(self) -> str:
        return self._last_hash

    @property
    def entries(self) -> List[Tuple[AuditEvent, str]]:
        return list(self._entries)

    def log(
        self,
        actor: str,
        action: str,
        resource_type: str,
        resource_id: str,
        outcome: str,
        **details: Any,
    ) -> AuditEvent:
        event = AuditEvent(
            event_id=uuid.uuid4().hex,
            timestamp=datetime.now(timezone.utc).isoformat(),
            actor=actor,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            outcome=outcome,
            correlation_id=get_correlation_id(),
            details=details,
        )

        event_hash = _chain_hash(event, self._last_hash)
        self._last_hash = event_hash
        self._entries.append((event, event_hash))

        self._logger.debug(
            f"AUDIT: {action} on {resource_type}/{resource_id}",
            operation="audit",
            **event.to_dict(),
            event_hash=event_hash,
        )
        return event

    def verify(self) -> bool:
        """Recompute the chain and compare against the stored hashes."""
        previous = GENESIS_HASH
        for event, recorded in self._entries:
            if _chain_hash(event, previous) != recorded:
                return False
            previous = recorded
        return True
