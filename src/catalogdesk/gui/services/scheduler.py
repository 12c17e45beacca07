"""Single-slot deferred task scheduling on the Qt event loop."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer

_logger = logging.getLogger(__name__)


class DebounceScheduler(QObject):
    """Run the most recently scheduled task once the timer goes quiet.

    Scheduling a task replaces any pending one and restarts the interval, so a
    burst of calls collapses into a single execution of the last task.
    """

    def __init__(self, interval_ms: int, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._task: Optional[Callable[[], None]] = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._fire)

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def set_interval(self, interval_ms: int) -> None:
        self._timer.setInterval(interval_ms)

    def schedule(self, task: Callable[[], None]) -> None:
        self._task = task
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._task = None

    def is_pending(self) -> bool:
        return self._task is not None

    def flush(self) -> None:
        """Run the pending task now instead of waiting for the interval."""
        if self._task is None:
            return
        self._timer.stop()
        self._fire()

    def _fire(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task()
