"""Read-only cache of active categories for filters and labels."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from PySide6.QtCore import QObject, QThreadPool, Signal

from catalogdesk.domain.models import ALL, Category
from catalogdesk.domain.repositories import ICategoryRepository
from catalogdesk.events.bus import EventBus
from catalogdesk.events.catalog_events import CategoriesLoadedEvent
from catalogdesk.gui.services.workers import CallWorker
from catalogdesk.i18n import MessageCatalog

_logger = logging.getLogger(__name__)


class CategoryCache(QObject):
    """Load the active categories once per activation.

    A failed load is not an error for the user: the cache stays empty and the
    category filter only offers "all categories".
    """

    loaded = Signal(object)

    def __init__(
        self,
        repository: ICategoryRepository,
        *,
        event_bus: Optional[EventBus] = None,
        pool: Optional[QThreadPool] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._repository = repository
        self._events = event_bus
        self._pool = pool if pool is not None else QThreadPool.globalInstance()
        self._categories: Tuple[Category, ...] = ()
        self._started = False
        self._ready = False
        self._degraded = False
        self._worker: Optional[CallWorker] = None

    @property
    def categories(self) -> Tuple[Category, ...]:
        return self._categories

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_degraded(self) -> bool:
        return self._degraded

    def load_active_categories(self) -> bool:
        """Start the one-time load; returns False if it was already started."""
        if self._started:
            return False
        self._started = True
        worker = CallWorker(self._repository.list_active, label="list_categories")
        worker.signals.succeeded.connect(self._on_loaded)
        worker.signals.failed.connect(self._on_failed)
        self._worker = worker
        self._pool.start(worker)
        return True

    def label_for(self, category_id: Any) -> Optional[str]:
        category = self.get(category_id)
        return category.label if category is not None else None

    def get(self, category_id: Any) -> Optional[Category]:
        if category_id is None:
            return None
        for category in self._categories:
            if category.id == category_id or str(category.id) == str(category_id):
                return category
        return None

    def filter_options(self, messages: MessageCatalog) -> List[Tuple[Any, str]]:
        """Options for the category select, "all categories" first."""
        options: List[Tuple[Any, str]] = [(ALL, messages.get("products.filterCategory"))]
        options.extend((category.id, category.label) for category in self._categories)
        return options

    def _on_loaded(self, categories: List[Category]) -> None:
        self._worker = None
        self._categories = tuple(categories)
        self._ready = True
        _logger.info("Loaded %d active categories", len(self._categories))
        self._publish()

    def _on_failed(self, error: Exception) -> None:
        self._worker = None
        self._categories = ()
        self._ready = True
        self._degraded = True
        _logger.warning("Category load failed, filters degrade to none: %s", error)
        self._publish()

    def _publish(self) -> None:
        if self._events is not None:
            self._events.publish(CategoriesLoadedEvent(
                category_ids=tuple(category.id for category in self._categories),
                degraded=self._degraded,
            ))
        self.loaded.emit(self._categories)
