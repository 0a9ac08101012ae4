import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

from .grid_events import DomainEvent


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    event_type: Type[DomainEvent]
    handler: Callable[[DomainEvent], None]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """Synchronous publish/subscribe hub for engine events.

    Handlers run on the publishing thread, which for the engine is its event
    loop, so they observe a consistent store.  A subscription to a base class
    receives every subclass too: subscribing to ``DomainEvent`` sees all
    engine traffic.  Delivery order is most specific type first, then
    subscription order.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._subscriptions: Dict[type, List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[DomainEvent], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._subscriptions[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.cancel()
        with self._lock:
            subs = self._subscriptions.get(subscription.event_type)
            if subs and subscription in subs:
                subs.remove(subscription)

    def _matching(self, event_type: type) -> List[Subscription]:
        with self._lock:
            return [
                sub
                for cls in event_type.__mro__
                for sub in self._subscriptions.get(cls, ())
                if sub.active
            ]

    def publish(self, event: DomainEvent) -> int:
        """Deliver *event* and return the number of handlers that succeeded."""
        delivered = 0
        for sub in self._matching(type(event)):
            try:
                sub.handler(event)
            except Exception as e:
                self._logger.error("%s handler %r failed: %s", type(event).__name__, sub.handler, e)
            else:
                delivered += 1
        return delivered

    def subscriber_count(self, event_type: Type[DomainEvent]) -> int:
        """Number of active subscriptions that would receive *event_type*."""
        return len(self._matching(event_type))
