"""Keeps the product list in step with the query toolbar."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal

from catalogdesk.config import SEARCH_DEBOUNCE_MS
from catalogdesk.domain.models import Product, QueryState
from catalogdesk.domain.repositories import IProductRepository
from catalogdesk.errors.handler import ErrorHandler, ErrorSeverity
from catalogdesk.events.bus import EventBus
from catalogdesk.events.catalog_events import ProductsSyncedEvent
from catalogdesk.gui.services.scheduler import DebounceScheduler
from catalogdesk.gui.services.workers import ProductFetchWorker
from catalogdesk.gui.viewmodels.product_list_viewmodel import ProductListViewModel
from catalogdesk.gui.viewmodels.query_viewmodel import QueryViewModel
from catalogdesk.i18n import MessageCatalog

_logger = logging.getLogger(__name__)


class ProductSyncController(QObject):
    """Debounce query edits into listing requests and apply only fresh results.

    Every query change and every immediate sync bumps ``generation``.  Fetches
    carry the generation current at dispatch time; a result whose tag no longer
    matches is dropped, so a slow response can never overwrite a newer query's
    listing.  In-flight requests are not cancelled.
    """

    syncSettled = Signal(int)

    def __init__(
        self,
        repository: IProductRepository,
        query: QueryViewModel,
        products: ProductListViewModel,
        *,
        messages: MessageCatalog,
        error_handler: ErrorHandler,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[DebounceScheduler] = None,
        pool: Optional[QThreadPool] = None,
        debounce_ms: int = SEARCH_DEBOUNCE_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._repository = repository
        self._query = query
        self._products = products
        self._messages = messages
        self._errors = error_handler
        self._events = event_bus
        self._scheduler = scheduler if scheduler is not None else DebounceScheduler(debounce_ms, self)
        self._pool = pool if pool is not None else QThreadPool.globalInstance()
        self._generation = 0
        # Keeps the workers (and their signal objects) alive until they report.
        self._inflight: Dict[int, ProductFetchWorker] = {}
        self._attached = False

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def inflight_generations(self) -> List[int]:
        return sorted(self._inflight)

    def attach(self) -> None:
        if self._attached:
            return
        self._query.state.changed.connect(self._on_query_changed)
        self._attached = True

    def detach(self) -> None:
        """Stop observing the query and drop any pending debounced fetch."""
        if self._attached:
            self._query.state.changed.disconnect(self._on_query_changed)
            self._attached = False
        self._scheduler.cancel()

    def sync_now(self) -> int:
        """Fetch immediately with the current query, bypassing the debounce.

        Returns the generation of the dispatched request.
        """
        self._scheduler.cancel()
        self._generation += 1
        self._dispatch()
        return self._generation

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _on_query_changed(self, state: QueryState, _old_state: Any) -> None:
        self._generation += 1
        if self._products.loading.value:
            # The outstanding fetch is now superseded.
            _logger.debug("Query changed while fetching; generation %d supersedes it", self._generation)
            self._products.loading.value = False
        self._scheduler.schedule(self._dispatch)

    def _dispatch(self) -> None:
        generation = self._generation
        query = self._query.current
        self._products.loading.value = True
        worker = ProductFetchWorker(self._repository, query, generation)
        worker.signals.completed.connect(self._on_fetch_completed)
        worker.signals.failed.connect(self._on_fetch_failed)
        self._inflight[generation] = worker
        _logger.debug("Dispatching product fetch generation %d", generation)
        self._pool.start(worker)

    def _on_fetch_completed(self, generation: int, products: List[Product]) -> None:
        self._inflight.pop(generation, None)
        if generation != self._generation:
            _logger.debug("Discarding stale listing %d (current %d)", generation, self._generation)
            return
        self._products.apply_products(products)
        self._products.loading.value = False
        if self._events is not None:
            self._events.publish(ProductsSyncedEvent(generation=generation, count=len(products)))
        self.syncSettled.emit(generation)

    def _on_fetch_failed(self, generation: int, error: Exception) -> None:
        self._inflight.pop(generation, None)
        if generation != self._generation:
            _logger.debug("Ignoring failure of stale listing %d: %s", generation, error)
            return
        self._products.loading.value = False
        self._errors.handle(
            error,
            ErrorSeverity.ERROR,
            context={"operation": "list_products", "generation": generation},
            user_message=self._messages.get("products.errorLoad"),
        )
        self.syncSettled.emit(generation)
