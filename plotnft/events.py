"""
PlotNFT Event Infrastructure

Typed domain events and a synchronous in-process event bus. The registry
publishes exactly one event per successful mutation, after the mutation has
been applied. Rejected operations publish nothing.

Usage
─────

    from plotnft.events import EventBus, PlotMinted

    bus = EventBus()

    @bus.subscribe(PlotMinted)
    def on_mint(event: PlotMinted):
        print(f"Plot {event.token_id} minted for {event.owner}")

Handler failures are caught and counted; they never undo registry state.

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import hashlib
import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set, Type

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════════
# EVENT BASE
# ════════════════════════════════════════════════════════════════════════════


@dataclass
class Event:
    """
    Base class for all registry events.

    Events are immutable facts representing something that happened.
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    correlation_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["event_type"] = self.event_type
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str, sort_keys=True)

    def digest(self) -> str:
        """SHA-256 over the sorted, whitespace-free JSON form."""
        canonical = json.dumps(self.to_dict(), default=str, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


# ════════════════════════════════════════════════════════════════════════════
# DOMAIN EVENTS
# ════════════════════════════════════════════════════════════════════════════


@dataclass
class AuthorityConfigured(Event):
    """Emitted once, when the authority principal is set."""
    authority: str = ""
    configured_by: str = ""


@dataclass
class MaxTokensChanged(Event):
    old_max: int = 0
    new_max: int = 0


@dataclass
class MintFeeChanged(Event):
    old_fee: int = 0
    new_fee: int = 0


@dataclass
class PlotMinted(Event):
    """Emitted when a new plot token is created."""
    token_id: int = 0
    owner: str = ""
    location: str = ""
    species: str = ""
    fee_paid: int = 0
    fee_recipient: str = ""
    block_height: int = 0


@dataclass
class PlotTransferred(Event):
    token_id: int = 0
    sender: str = ""
    recipient: str = ""


@dataclass
class PlotUpdated(Event):
    token_id: int = 0
    location: str = ""
    tree_count: int = 0
    updater: str = ""
    block_height: int = 0


@dataclass
class PlotBurned(Event):
    token_id: int = 0
    owner: str = ""


# ════════════════════════════════════════════════════════════════════════════
# EVENT BUS
# ════════════════════════════════════════════════════════════════════════════


EventHandler = Callable[[Event], None]


@dataclass
class EventHandlerRegistration:
    """Registration for an event handler."""
    handler: EventHandler
    event_types: Set[Type[Event]]
    priority: int = 0
    filter_func: Optional[Callable[[Event], bool]] = None


class EventHandlerError(Exception):
    """Error during event handling."""
    def __init__(self, event: Event, handler: EventHandler, cause: Exception):
        self.event = event
        self.handler = handler
        self.cause = cause
        name = getattr(handler, "__name__", repr(handler))
        super().__init__(f"Handler {name} failed for {event.event_type}: {cause}")


class EventBus:
    """
    Synchronous pub/sub bus.

    Handlers run in priority order (higher first) on the publishing call.

    Example:
        bus = EventBus()

        @bus.subscribe(PlotMinted, PlotBurned)
        def audit(event):
            print(event.event_type)

        bus.publish(PlotMinted(token_id=1))
    """

    def __init__(self, on_error: Optional[Callable[[EventHandlerError], None]] = None):
        self._handlers: List[EventHandlerRegistration] = []
        self._on_error = on_error
        self._published_count = 0
        self._handled_count = 0
        self._error_count = 0

    def subscribe(
        self,
        *event_types: Type[Event],
        priority: int = 0,
        filter_func: Optional[Callable[[Event], bool]] = None,
    ) -> Callable[[EventHandler], EventHandler]:
        """
        Decorator to subscribe a handler to event types.

        With no event types the handler receives every event.
        """
        def decorator(handler: EventHandler) -> EventHandler:
            registration = EventHandlerRegistration(
                handler=handler,
                event_types=set(event_types) if event_types else {Event},
                priority=priority,
                filter_func=filter_func,
            )
            self._handlers.append(registration)
            self._handlers.sort(key=lambda r: -r.priority)
            return handler
        return decorator

    def unsubscribe(self, handler: EventHandler) -> bool:
        original_len = len(self._handlers)
        self._handlers = [r for r in self._handlers if r.handler != handler]
        return len(self._handlers) < original_len

    def publish(self, event: Event) -> None:
        self._published_count += 1
        for registration in list(self._handlers):
            if not any(isinstance(event, t) for t in registration.event_types):
                continue
            if registration.filter_func and not registration.filter_func(event):
                continue
            self._call_handler(registration.handler, event)

    def _call_handler(self, handler: EventHandler, event: Event) -> None:
        try:
            handler(event)
            self._handled_count += 1
        except Exception as e:
            self._error_count += 1
            error = EventHandlerError(event, handler, e)
            logger.warning("%s", error)
            if self._on_error:
                self._on_error(error)

    @property
    def metrics(self) -> Dict[str, int]:
        return {
            "published_count": self._published_count,
            "handled_count": self._handled_count,
            "error_count": self._error_count,
            "handler_count": len(self._handlers),
        }


_event_bus: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """Get the process-wide default event bus."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus
