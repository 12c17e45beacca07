"""Product listing ViewModel (MVVM), free of Qt.

Holds what the product grid renders: the last applied result set, the
loading flag and the grid/list presentation mode.  Only the sync controller
writes products and loading; views read and bind.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from catalogdesk.config import VIEW_MODES
from catalogdesk.domain.models import Product
from catalogdesk.gui.viewmodels.base import BaseViewModel
from catalogdesk.gui.viewmodels.signal import ObservableProperty, Signal

_logger = logging.getLogger(__name__)


class ProductListViewModel(BaseViewModel):
    def __init__(self, view_mode: str = "grid") -> None:
        super().__init__()
        self.products = ObservableProperty(())
        self.loading = ObservableProperty(False)
        self.view_mode = ObservableProperty(view_mode if view_mode in VIEW_MODES else "grid")

        # Emits the applied tuple, even when equal to the previous one.
        self.products_changed = Signal()

    @property
    def is_empty(self) -> bool:
        """True when the empty-state message should replace the list."""
        return not self.loading.value and not self.products.value

    def apply_products(self, products: Iterable[Product]) -> None:
        items = tuple(products)
        self.products.value = items
        self.products_changed.emit(items)

    def set_view_mode(self, mode: str) -> None:
        if mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode {mode!r}")
        self.view_mode.value = mode

    def product_at(self, index: int) -> Optional[Product]:
        items: Sequence[Product] = self.products.value
        if 0 <= index < len(items):
            return items[index]
        return None

    def find(self, product_id) -> Optional[Product]:
        for product in self.products.value:
            if product.id == product_id:
                return product
        return None
