"""Composition root for one product catalog view."""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from catalogdesk.gui.coordinators.mutation_coordinator import MutationCoordinator
from catalogdesk.gui.services.category_cache import CategoryCache
from catalogdesk.gui.services.sync_controller import ProductSyncController
from catalogdesk.gui.viewmodels.product_list_viewmodel import ProductListViewModel
from catalogdesk.gui.viewmodels.query_viewmodel import QueryViewModel
from catalogdesk.i18n import MessageCatalog

_logger = logging.getLogger(__name__)


class CatalogCoordinator:
    """Owns the view models and controllers behind the product page.

    Toolbar widgets write to :attr:`query`, the grid binds to :attr:`products`
    and action buttons call into :attr:`mutations`.
    """

    def __init__(
        self,
        query: QueryViewModel,
        products: ProductListViewModel,
        categories: CategoryCache,
        sync: ProductSyncController,
        mutations: MutationCoordinator,
        messages: MessageCatalog,
    ) -> None:
        self.query = query
        self.products = products
        self.categories = categories
        self.sync = sync
        self.mutations = mutations
        self.messages = messages
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def activate(self) -> None:
        """Start the category load and the first listing side by side.

        The first listing goes out immediately with the current query; only
        later query edits are debounced.
        """
        if self._active:
            return
        self._active = True
        self.sync.attach()
        self.categories.load_active_categories()
        generation = self.sync.sync_now()
        _logger.debug("Catalog view activated (generation %d)", generation)

    def deactivate(self) -> None:
        if not self._active:
            return
        self._active = False
        self.sync.detach()

    def category_options(self) -> List[Tuple[Any, str]]:
        return self.categories.filter_options(self.messages)

    def empty_message(self) -> str:
        return self.messages.get("products.noResults")

    def dispose(self) -> None:
        self.deactivate()
        self.query.dispose()
        self.products.dispose()
