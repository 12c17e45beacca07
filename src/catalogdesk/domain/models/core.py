from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from dateutil import parser as date_parser

from catalogdesk.errors import ValidationError


def _to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class Product:
    """Read-only local copy of a server-owned product record."""

    id: Any
    name: str
    description: str = ""
    price: Decimal = Decimal("0")
    stock: int = 0
    category_id: Optional[Any] = None
    image_url: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> Product:
        return cls(
            id=data.get("id"),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            price=_to_decimal(data.get("price")),
            stock=_to_int(data.get("stock")),
            category_id=data.get("categoryId"),
            image_url=data.get("imageUrl") or None,
            is_active=bool(data.get("isActive", True)),
            created_at=_to_datetime(data.get("createdAt")),
        )


@dataclass(frozen=True)
class Category:
    id: Any
    name: str
    icon: str = ""
    is_active: bool = True

    @property
    def label(self) -> str:
        """Display label as shown in the category filter."""
        if self.icon:
            return f"{self.icon} {self.name}"
        return self.name

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> Category:
        return cls(
            id=data.get("id"),
            name=str(data.get("name") or ""),
            icon=str(data.get("icon") or ""),
            is_active=bool(data.get("isActive", True)),
        )


@dataclass(frozen=True)
class ImageRef:
    url: str


class _UnsetSentinel:
    """Marker for a payload field the caller did not touch."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self):
        return (_UnsetSentinel, ())


UNSET: Any = _UnsetSentinel()

_WIRE_FIELDS = (
    ("name", "name"),
    ("description", "description"),
    ("price", "price"),
    ("stock", "stock"),
    ("category_id", "categoryId"),
    ("image_url", "imageUrl"),
    ("is_active", "isActive"),
)


@dataclass
class ProductPayload:
    """Body of a create/update request.

    Fields left at ``UNSET`` are omitted from the serialized body, which makes
    the same type usable for partial updates.  An explicit ``None`` is sent as
    JSON ``null`` so an edit can clear the category or the image.
    """

    name: Optional[str] = UNSET
    description: Optional[str] = UNSET
    price: Optional[Decimal] = UNSET
    stock: Optional[int] = UNSET
    category_id: Optional[Any] = UNSET
    image_url: Optional[str] = UNSET
    is_active: Optional[bool] = UNSET
    extra: Dict[str, Any] = field(default_factory=dict)

    def validate(self, *, partial: bool = False) -> None:
        if self.name is UNSET:
            if not partial:
                raise ValidationError("Product name is required")
        elif not (self.name or "").strip():
            raise ValidationError("Product name cannot be blank")
        if self.price is not UNSET and self.price is not None and Decimal(str(self.price)) < 0:
            raise ValidationError("Product price cannot be negative")
        if self.stock is not UNSET and self.stock is not None and int(self.stock) < 0:
            raise ValidationError("Product stock cannot be negative")

    def to_json(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for attr, key in _WIRE_FIELDS:
            value = getattr(self, attr)
            if value is UNSET:
                continue
            if value is not None and attr == "price":
                value = float(value)
            elif value is not None and attr == "stock":
                value = int(value)
            body[key] = value
        body.update(self.extra)
        return body
