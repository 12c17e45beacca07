"""Background QRunnable workers for catalog API calls.

Workers only call the repository and report back through their ``signals``
object.  The receivers are QObjects living on the GUI thread, so results are
delivered through queued connections and all state changes stay on that
thread.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, QRunnable, Signal

from catalogdesk.domain.models import QueryState
from catalogdesk.domain.repositories import IProductRepository

_logger = logging.getLogger(__name__)


class _ProductFetchSignals(QObject):
    completed = Signal(int, object)
    failed = Signal(int, object)


class ProductFetchWorker(QRunnable):
    """Fetch one product listing tagged with the generation that asked for it."""

    def __init__(
        self,
        repository: IProductRepository,
        query: QueryState,
        generation: int,
    ) -> None:
        super().__init__()
        self._repository = repository
        self._query = query
        self._generation = generation
        self.signals = _ProductFetchSignals()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def query(self) -> QueryState:
        return self._query

    def run(self) -> None:
        _logger.debug("Fetching products for generation %d: %r", self._generation, self._query)
        try:
            products = self._repository.list(self._query)
        except Exception as exc:
            self.signals.failed.emit(self._generation, exc)
            return
        self.signals.completed.emit(self._generation, list(products))


class _CallSignals(QObject):
    succeeded = Signal(object)
    failed = Signal(object)


class CallWorker(QRunnable):
    """Run a single blocking API call and report its result or exception."""

    def __init__(self, call: Callable[[], Any], label: str = "call") -> None:
        super().__init__()
        self._call = call
        self._label = label
        self.signals = _CallSignals()

    @property
    def label(self) -> str:
        return self._label

    def run(self) -> None:
        try:
            result = self._call()
        except Exception as exc:
            _logger.debug("%s failed: %s", self._label, exc)
            self.signals.failed.emit(exc)
            return
        self.signals.succeeded.emit(result)
