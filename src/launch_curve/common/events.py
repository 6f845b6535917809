"""
Events emitted by the launch curve.

Each successful state-mutating call emits its events exactly once, after the
call has completed. Handlers are called synchronously in subscription order.

Usage:
    bus = EventBus()
    bus.subscribe(EventType.PURCHASE_COMPLETED, my_handler)
"""

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from launch_curve.common.enums import EventType


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurveEvent:
    event_type: EventType
    timestamp_ns: int = field(default_factory=time.time_ns)


@dataclass(frozen=True)
class PurchaseCompleted(CurveEvent):
    event_type: EventType = EventType.PURCHASE_COMPLETED
    buyer: Optional[str] = None
    asset_amount: int = 0
    reserve_amount: int = 0


@dataclass(frozen=True)
class SaleCompleted(CurveEvent):
    event_type: EventType = EventType.SALE_COMPLETED
    seller: Optional[str] = None
    asset_amount: int = 0
    reserve_amount: int = 0


@dataclass(frozen=True)
class PriceUpdated(CurveEvent):
    event_type: EventType = EventType.PRICE_UPDATED
    price: int = 0


@dataclass(frozen=True)
class GraduationCompleted(CurveEvent):
    event_type: EventType = EventType.GRADUATION_COMPLETED
    asset_amount: int = 0
    reserve_amount: int = 0


class EventBus:
    """Routes curve events to subscribed handlers and keeps a history."""

    def __init__(self) -> None:
        self._handlers: Dict[EventType, List[Callable[[CurveEvent], None]]] = defaultdict(list)
        self.history: List[CurveEvent] = []
        self.error_count: int = 0

    def subscribe(self, event_type: EventType, handler: Callable[[CurveEvent], None]) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable[[CurveEvent], None]) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: CurveEvent) -> None:
        """
        Record the event and dispatch it to every handler of its type.
        A failing handler is logged and does not stop the others, since the
        call that produced the event has already completed.
        """
        self.history.append(event)
        logger.debug("Publishing %s", event)
        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception:
                self.error_count += 1
                logger.exception("Handler %r failed on %s", handler, event.event_type)

    def events_of(self, event_type: EventType) -> List[CurveEvent]:
        return [e for e in self.history if e.event_type == event_type]
