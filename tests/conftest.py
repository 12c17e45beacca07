import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make the sources importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Headless Qt for every test run.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from catalogdesk.domain.models import Category, ImageRef, Product, ProductPayload, QueryState  # noqa: E402
from catalogdesk.domain.repositories import ICategoryRepository, IProductRepository  # noqa: E402
from catalogdesk.errors.handler import ErrorHandler  # noqa: E402
from catalogdesk.events.bus import EventBus  # noqa: E402
from catalogdesk.i18n import MessageCatalog  # noqa: E402


class ManualScheduler:
    """Stand-in for DebounceScheduler that only fires when told to."""

    def __init__(self) -> None:
        self._task: Optional[Callable[[], None]] = None
        self.schedule_calls = 0
        self.cancel_calls = 0

    def schedule(self, task: Callable[[], None]) -> None:
        self.schedule_calls += 1
        self._task = task

    def cancel(self) -> None:
        self.cancel_calls += 1
        self._task = None

    def is_pending(self) -> bool:
        return self._task is not None

    def flush(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task()


class ManualPool:
    """Collects runnables instead of running them on a thread pool."""

    def __init__(self) -> None:
        self.started: List[Any] = []

    def start(self, runnable) -> None:
        self.started.append(runnable)

    @property
    def pending(self) -> int:
        return len(self.started)

    def run_next(self) -> Any:
        worker = self.started.pop(0)
        worker.run()
        return worker

    def run_generation(self, generation: int) -> Any:
        for index, worker in enumerate(self.started):
            if getattr(worker, "generation", None) == generation:
                self.started.pop(index)
                worker.run()
                return worker
        raise AssertionError(f"no worker for generation {generation}")

    def run_all(self) -> None:
        while self.started:
            self.run_next()


class FakeProductRepository(IProductRepository):
    """In-memory repository recording every call."""

    def __init__(self, products: Optional[List[Product]] = None) -> None:
        self.products = list(products or [])
        self.list_calls: List[QueryState] = []
        self.calls: List[tuple] = []
        self.list_error: Optional[Exception] = None
        self.mutation_error: Optional[Exception] = None
        self.responder: Optional[Callable[[QueryState], List[Product]]] = None

    def list(self, query: QueryState) -> List[Product]:
        self.list_calls.append(query)
        if self.list_error is not None:
            raise self.list_error
        if self.responder is not None:
            return self.responder(query)
        return list(self.products)

    def get_one(self, product_id):
        self.calls.append(("get_one", product_id))
        for product in self.products:
            if product.id == product_id:
                return product
        raise KeyError(product_id)

    def _mutate(self, name, *args):
        self.calls.append((name,) + args)
        if self.mutation_error is not None:
            raise self.mutation_error

    def create(self, payload: ProductPayload) -> Product:
        self._mutate("create", payload)
        return Product(id=99, name=payload.name or "")

    def update(self, product_id, payload) -> Product:
        self._mutate("update", product_id, payload)
        return Product(id=product_id, name="updated")

    def delete(self, product_id) -> None:
        self._mutate("delete", product_id)

    def upload_image(self, data: bytes) -> ImageRef:
        self._mutate("upload_image", data)
        return ImageRef(url="https://cdn.example.com/p.png")


class FakeCategoryRepository(ICategoryRepository):
    def __init__(self, categories: Optional[List[Category]] = None, error: Optional[Exception] = None) -> None:
        self.categories = list(categories or [])
        self.error = error
        self.calls = 0

    def list_active(self) -> List[Category]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.categories)


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: List[str] = []
        self.errors: List[str] = []

    def show_success(self, message: str) -> None:
        self.successes.append(message)

    def show_error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture()
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def messages() -> MessageCatalog:
    return MessageCatalog("en")


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def error_handler(event_bus, notifier) -> ErrorHandler:
    handler = ErrorHandler(logging.getLogger("catalogdesk.tests"), event_bus)
    handler.register_ui_callback(lambda message, _severity: notifier.show_error(message))
    return handler


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def pool() -> ManualPool:
    return ManualPool()


@pytest.fixture()
def product_repo() -> FakeProductRepository:
    return FakeProductRepository([
        Product(id=1, name="Shoe", category_id=5),
        Product(id=2, name="Shirt", category_id=3, is_active=False),
    ])
