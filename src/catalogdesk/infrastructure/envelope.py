"""Normalization of the response envelopes served by the catalog API.

The backend has shipped several envelope shapes over time::

    {"success": true, "data": {"products": [...], "pagination": {...}}}
    {"products": [...]}
    [...]

Listing responses are decoded by trying a closed, ordered set of rules; the
first rule that recognizes the body wins.  A body no rule recognizes is
reported as ``EnvelopeShape.UNRECOGNIZED`` with an empty item list, so the
listing keeps working when the backend adds a new wrapper.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

LOGGER = logging.getLogger(__name__)


class EnvelopeShape(Enum):
    NESTED_DATA = "nested_data"
    FLAT = "flat"
    BARE_LIST = "bare_list"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class DecodedList:
    shape: EnvelopeShape
    items: List[Any] = field(default_factory=list)

    @property
    def recognized(self) -> bool:
        return self.shape is not EnvelopeShape.UNRECOGNIZED


def _nested_data(body: Any, key: str) -> Optional[List[Any]]:
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if isinstance(data, dict) and isinstance(data.get(key), list):
        return data[key]
    return None


def _flat(body: Any, key: str) -> Optional[List[Any]]:
    if isinstance(body, dict) and isinstance(body.get(key), list):
        return body[key]
    return None


def _bare_list(body: Any, key: str) -> Optional[List[Any]]:
    if isinstance(body, list):
        return body
    return None


_LIST_RULES: Tuple[Tuple[EnvelopeShape, Callable[[Any, str], Optional[List[Any]]]], ...] = (
    (EnvelopeShape.NESTED_DATA, _nested_data),
    (EnvelopeShape.FLAT, _flat),
    (EnvelopeShape.BARE_LIST, _bare_list),
)


def decode_list(body: Any, key: str) -> DecodedList:
    """Decode a listing body whose items live under *key*."""

    for shape, rule in _LIST_RULES:
        items = rule(body, key)
        if items is not None:
            return DecodedList(shape=shape, items=[item for item in items if isinstance(item, dict)])
    LOGGER.warning(
        "UnrecognizedResponseShape: no envelope rule matched %r listing (got %s)",
        key,
        type(body).__name__,
    )
    return DecodedList(shape=EnvelopeShape.UNRECOGNIZED)


def unwrap_object(body: Any) -> Optional[dict]:
    """Return the record inside an optional ``{"data": {...}}`` wrapper."""

    if isinstance(body, dict):
        data = body.get("data")
        if isinstance(data, dict):
            return data
        return body
    return None
