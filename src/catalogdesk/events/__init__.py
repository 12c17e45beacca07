from .bus import Event, EventBus, Subscription
from .catalog_events import (
    CategoriesLoadedEvent,
    NotificationEvent,
    ProductMutatedEvent,
    ProductsSyncedEvent,
)

__all__ = [
    "CategoriesLoadedEvent",
    "Event",
    "EventBus",
    "NotificationEvent",
    "ProductMutatedEvent",
    "ProductsSyncedEvent",
    "Subscription",
]
