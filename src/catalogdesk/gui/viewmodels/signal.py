"""Pure Python signal system with no Qt dependency.

``Signal`` implements observer-pattern callbacks and ``ObservableProperty``
wraps a value that view code can bind to.  Both live outside Qt so the view
models can be exercised without a running event loop.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Observer list with Qt-like ``connect``/``emit`` semantics.

    Handler mutations and snapshotting are lock-protected; the handlers
    themselves run outside the lock on the emitting thread.  A handler that
    raises is logged and skipped so the remaining handlers still run.
    """

    def __init__(self) -> None:
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> Callable:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> bool:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)
                return True
        return False

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = tuple(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Signal handler %r failed", handler)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty:
    """Value holder emitting ``changed(new_value, old_value)`` on change.

    Assigning an equal value is a no-op, so bound views never see redundant
    notifications.
    """

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal()

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._value == new_value:
            return
        old_value = self._value
        self._value = new_value
        self.changed.emit(new_value, old_value)

    def bind(self, handler: Callable[[Any], None], *, initial: bool = True) -> Callable:
        """Call *handler* with every new value, and once now if *initial*."""

        def _forward(new_value: Any, _old_value: Any) -> None:
            handler(new_value)

        self.changed.connect(_forward)
        if initial:
            handler(self._value)
        return _forward
