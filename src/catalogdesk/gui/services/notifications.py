"""User notification capability handed to the coordinators."""

from __future__ import annotations

import logging
from typing import Protocol

from catalogdesk.events.bus import EventBus
from catalogdesk.events.catalog_events import NotificationEvent

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def show_success(self, message: str) -> None: ...

    def show_error(self, message: str) -> None: ...


class EventBusNotifier:
    """Publish notifications as :class:`NotificationEvent` for the toast layer."""

    def __init__(self, event_bus: EventBus) -> None:
        self._events = event_bus

    def show_success(self, message: str) -> None:
        _logger.info("Notify success: %s", message)
        self._events.publish(NotificationEvent(level="success", message=message))

    def show_error(self, message: str) -> None:
        _logger.info("Notify error: %s", message)
        self._events.publish(NotificationEvent(level="error", message=message))
