"""BaseViewModel: pure Python, no Qt dependency.

Tracks event-bus subscriptions and signal connections so that a view model
can release everything it attached to with one ``dispose()`` call.
"""

from __future__ import annotations

from typing import Callable, Type

from catalogdesk.events.bus import EventBus, Subscription
from catalogdesk.gui.viewmodels.signal import Signal


class BaseViewModel:
    """Tracks what a view model attached to so it can be torn down."""

    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._connections: list[tuple[Signal, Callable]] = []

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
    ) -> Subscription:
        """Subscribe to an event type and track the subscription."""
        sub = event_bus.subscribe(event_type, handler)
        self._subscriptions.append(sub)
        return sub

    def connect_signal(self, signal: Signal, handler: Callable) -> None:
        """Connect *handler* to *signal* and remember it for ``dispose()``."""
        signal.connect(handler)
        self._connections.append((signal, handler))

    def dispose(self) -> None:
        """Cancel tracked subscriptions and disconnect tracked handlers."""
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        for signal, handler in self._connections:
            signal.disconnect(handler)
        self._connections.clear()
