import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Type


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(kw_only=True)
class Event:
    """Base class for everything published on the :class:`EventBus`."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=_new_id)


@dataclass
class Subscription:
    event_type: Type[Event]
    handler: Callable[[Event], None]
    id: str = field(default_factory=_new_id)
    active: bool = True

    def cancel(self) -> None:
        self.active = False


class EventBus:
    """Synchronous publish/subscribe hub shared by the catalog components.

    Handlers run on the publishing thread, in subscription order.  A failing
    handler is logged and does not stop the remaining ones.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._subscriptions: Dict[Type[Event], List[Subscription]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: Callable) -> Subscription:
        subscription = Subscription(event_type, handler)
        with self._lock:
            self._subscriptions.setdefault(event_type, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subscription.cancel()
        with self._lock:
            registered = self._subscriptions.get(subscription.event_type)
            if registered and subscription in registered:
                registered.remove(subscription)

    def publish(self, event: Event) -> None:
        with self._lock:
            targets = tuple(self._subscriptions.get(type(event), ()))
        for subscription in targets:
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception:
                self._logger.exception("Handler %r failed for %s", subscription.handler, type(event).__name__)

    def subscriber_count(self, event_type: Type[Event]) -> int:
        with self._lock:
            return sum(1 for sub in self._subscriptions.get(event_type, ()) if sub.active)
