from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Union


class _AllSentinel:
    """Marker for "no filter on this axis"; never serialized."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL"

    def __reduce__(self):
        return (_AllSentinel, ())


ALL = _AllSentinel()


class ActiveFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    INACTIVE = "inactive"


class SortField(str, Enum):
    NAME = "name"
    PRICE = "price"
    STOCK = "stock"
    CREATED_AT = "createdAt"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    def toggled(self) -> SortOrder:
        return SortOrder.DESC if self is SortOrder.ASC else SortOrder.ASC


CategoryFilter = Union[_AllSentinel, Any]


@dataclass(frozen=True)
class QueryState:
    """Full search/filter/sort tuple driving the product listing.

    Instances are immutable; every user change produces a new tuple via the
    ``with_*`` helpers, so observers always receive a complete state.
    """

    search_text: str = ""
    active_filter: ActiveFilter = ActiveFilter.ALL
    category_filter: CategoryFilter = ALL
    sort_field: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC

    def __post_init__(self) -> None:
        # Coerce loose inputs (strings from widgets, None) onto each axis.
        object.__setattr__(self, "search_text", self.search_text or "")
        object.__setattr__(self, "active_filter", ActiveFilter(self.active_filter or ActiveFilter.ALL))
        if self.category_filter is None or self.category_filter == "all":
            object.__setattr__(self, "category_filter", ALL)
        object.__setattr__(self, "sort_field", SortField(self.sort_field or SortField.NAME))
        object.__setattr__(self, "sort_order", SortOrder(self.sort_order or SortOrder.ASC))

    def with_search(self, text: str) -> QueryState:
        return replace(self, search_text=text)

    def with_active_filter(self, value: Union[ActiveFilter, str]) -> QueryState:
        return replace(self, active_filter=ActiveFilter(value))

    def with_category(self, category: CategoryFilter) -> QueryState:
        return replace(self, category_filter=category)

    def with_sort(self, field: Union[SortField, str]) -> QueryState:
        return replace(self, sort_field=SortField(field))

    def with_sort_order(self, order: Union[SortOrder, str]) -> QueryState:
        return replace(self, sort_order=SortOrder(order))

    def toggled_sort_order(self) -> QueryState:
        return replace(self, sort_order=self.sort_order.toggled())

    def to_request_params(self) -> Dict[str, Any]:
        """Return the listing parameters with sentinel axes set to ``None``.

        The resource client drops ``None`` values before building the query
        string, so the ``ALL`` sentinel never reaches the wire.
        """
        if self.active_filter is ActiveFilter.ALL:
            is_active = None
        else:
            is_active = self.active_filter is ActiveFilter.ACTIVE
        return {
            "search": self.search_text or None,
            "isActive": is_active,
            "categoryId": None if self.category_filter is ALL else self.category_filter,
            "sortBy": self.sort_field.value,
            "sortOrder": self.sort_order.value,
        }
