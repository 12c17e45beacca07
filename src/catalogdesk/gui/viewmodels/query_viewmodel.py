"""Query state holder bound to the toolbar controls."""

from __future__ import annotations

from typing import Union

from catalogdesk.domain.models import ActiveFilter, QueryState, SortField, SortOrder
from catalogdesk.domain.models.query import CategoryFilter
from catalogdesk.gui.viewmodels.base import BaseViewModel
from catalogdesk.gui.viewmodels.signal import ObservableProperty


class QueryViewModel(BaseViewModel):
    """Single source of truth for what the user wants to see.

    ``state.changed`` fires with the complete new :class:`QueryState` after
    every effective edit; setting an axis to its current value is silent.
    """

    def __init__(self, initial: QueryState | None = None) -> None:
        super().__init__()
        self.state = ObservableProperty(initial or QueryState())

    @property
    def current(self) -> QueryState:
        return self.state.value

    def set_search_text(self, text: str) -> None:
        self.state.value = self.current.with_search(text)

    def set_active_filter(self, value: Union[ActiveFilter, str]) -> None:
        self.state.value = self.current.with_active_filter(value)

    def set_category_filter(self, category: CategoryFilter) -> None:
        self.state.value = self.current.with_category(category)

    def set_sort_field(self, field: Union[SortField, str]) -> None:
        self.state.value = self.current.with_sort(field)

    def set_sort_order(self, order: Union[SortOrder, str]) -> None:
        self.state.value = self.current.with_sort_order(order)

    def toggle_sort_order(self) -> None:
        self.state.value = self.current.toggled_sort_order()

    def replace(self, state: QueryState) -> None:
        self.state.value = state

    def reset(self) -> None:
        self.state.value = QueryState()
