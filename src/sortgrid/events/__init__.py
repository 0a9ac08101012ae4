from .bus import EventBus, Subscription
from .grid_events import (
    DomainEvent,
    PageLoadedEvent,
    SortAppliedEvent,
    StalePageDiscardedEvent,
)

__all__ = [
    "DomainEvent",
    "EventBus",
    "PageLoadedEvent",
    "SortAppliedEvent",
    "StalePageDiscardedEvent",
    "Subscription",
]
