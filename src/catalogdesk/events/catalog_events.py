from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .bus import Event


@dataclass(kw_only=True)
class ProductsSyncedEvent(Event):
    """A product listing was applied to the view model."""
    generation: int
    count: int


@dataclass(kw_only=True)
class CategoriesLoadedEvent(Event):
    category_ids: Tuple[Any, ...] = ()
    degraded: bool = False


@dataclass(kw_only=True)
class ProductMutatedEvent(Event):
    """A create/update/toggle/delete call succeeded on the server."""
    kind: str
    product_id: Optional[Any] = None


@dataclass(kw_only=True)
class NotificationEvent(Event):
    level: str
    message: str
    context: dict = field(default_factory=dict)
