"""Wire the catalog stack into a :class:`Container`."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from catalogdesk.config import DEFAULT_LANGUAGE, DEFAULT_TIMEOUT_SEC, SEARCH_DEBOUNCE_MS
from catalogdesk.domain.repositories import ICategoryRepository, IProductRepository
from catalogdesk.errors.handler import ErrorHandler
from catalogdesk.events.bus import EventBus
from catalogdesk.i18n import MessageCatalog
from catalogdesk.infrastructure.api_client import ApiTransport, CategoryApiClient, ProductApiClient
from catalogdesk.settings import SettingsManager
from catalogdesk.utils.logging import get_logger

from .container import Container


def bootstrap(
    container: Container,
    settings: SettingsManager,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> None:
    """Register all application services in the DI container."""

    from catalogdesk.gui.services.notifications import EventBusNotifier

    container.register_instance(SettingsManager, settings)
    container.register_singleton(EventBus, lambda c: EventBus())

    def _messages(c: Container) -> MessageCatalog:
        catalog = MessageCatalog(settings.get("ui.language", DEFAULT_LANGUAGE))

        def _on_setting(key: str, value: Any) -> None:
            if key == "ui.language" and isinstance(value, str):
                catalog.set_language(value)

        settings.settingsChanged.connect(_on_setting)
        return catalog

    container.register_singleton(MessageCatalog, _messages)
    container.register_singleton(ApiTransport, lambda c: ApiTransport(
        settings.get("api.base_url"),
        timeout=float(settings.get("api.timeout_sec", DEFAULT_TIMEOUT_SEC)),
        token=settings.get("api.token"),
        transport=transport,
    ))
    container.register_singleton(IProductRepository, lambda c: ProductApiClient(c.resolve(ApiTransport)))
    container.register_singleton(ICategoryRepository, lambda c: CategoryApiClient(c.resolve(ApiTransport)))
    container.register_singleton(EventBusNotifier, lambda c: EventBusNotifier(c.resolve(EventBus)))

    def _error_handler(c: Container) -> ErrorHandler:
        handler = ErrorHandler(get_logger(), c.resolve(EventBus))
        notifier = c.resolve(EventBusNotifier)
        handler.register_ui_callback(lambda message, _severity: notifier.show_error(message))
        return handler

    container.register_singleton(ErrorHandler, _error_handler)


def create_container(
    settings: Optional[SettingsManager] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> Container:
    if settings is None:
        settings = SettingsManager()
        settings.load()
    container = Container()
    bootstrap(container, settings, transport=transport)
    return container


def build_catalog_coordinator(
    container: Container,
    *,
    editor=None,
    confirmer=None,
    pool=None,
):
    """Assemble the view models and controllers for one product page."""

    from catalogdesk.gui.coordinators.catalog_coordinator import CatalogCoordinator
    from catalogdesk.gui.coordinators.mutation_coordinator import MutationCoordinator
    from catalogdesk.gui.services.category_cache import CategoryCache
    from catalogdesk.gui.services.notifications import EventBusNotifier
    from catalogdesk.gui.services.sync_controller import ProductSyncController
    from catalogdesk.gui.viewmodels.product_list_viewmodel import ProductListViewModel
    from catalogdesk.gui.viewmodels.query_viewmodel import QueryViewModel

    settings: SettingsManager = container.resolve(SettingsManager)
    events = container.resolve(EventBus)
    messages = container.resolve(MessageCatalog)
    errors = container.resolve(ErrorHandler)
    products_repo = container.resolve(IProductRepository)

    query = QueryViewModel()
    products = ProductListViewModel(view_mode=settings.get("ui.view_mode", "grid"))
    sync = ProductSyncController(
        products_repo,
        query,
        products,
        messages=messages,
        error_handler=errors,
        event_bus=events,
        pool=pool,
        debounce_ms=int(settings.get("sync.debounce_ms", SEARCH_DEBOUNCE_MS)),
    )
    categories = CategoryCache(container.resolve(ICategoryRepository), event_bus=events, pool=pool)
    mutations = MutationCoordinator(
        products_repo,
        sync,
        messages=messages,
        notifier=container.resolve(EventBusNotifier),
        error_handler=errors,
        event_bus=events,
        editor=editor,
        confirmer=confirmer,
        pool=pool,
    )
    return CatalogCoordinator(query, products, categories, sync, mutations, messages)
