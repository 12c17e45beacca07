"""Create/update/toggle/delete orchestration for the product view."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from PySide6.QtCore import QObject, QThreadPool, Signal

from catalogdesk.domain.models import Product, ProductPayload
from catalogdesk.domain.repositories import IProductRepository
from catalogdesk.errors.handler import ErrorHandler, ErrorSeverity
from catalogdesk.events.bus import EventBus
from catalogdesk.events.catalog_events import ProductMutatedEvent
from catalogdesk.gui.services.notifications import Notifier
from catalogdesk.gui.services.sync_controller import ProductSyncController
from catalogdesk.gui.services.workers import CallWorker
from catalogdesk.gui.viewmodels.signal import ObservableProperty
from catalogdesk.i18n import MessageCatalog

_logger = logging.getLogger(__name__)


class MutationState(Enum):
    IDLE = "idle"
    REQUESTED = "requested"
    SUCCEEDED = "succeeded"
    RESYNCING = "resyncing"
    FAILED = "failed"


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    TOGGLE = "toggle"
    DELETE = "delete"
    UPLOAD = "upload"


class EditorSurface(Protocol):
    """The add/edit form; only needs to be closed after a successful save."""

    def dismiss(self) -> None: ...


class Confirmer(Protocol):
    def confirm(self, title: str, message: str, confirm_text: str, cancel_text: str) -> bool: ...


@dataclass
class _PendingMutation:
    kind: MutationKind
    product_id: Any
    success_key: Optional[str]
    error_key: str
    dismiss_editor: bool
    resync: bool


_SUCCESS_KEYS = {
    MutationKind.CREATE: "products.createSuccess",
    MutationKind.UPDATE: "products.updateSuccess",
    MutationKind.TOGGLE: "products.toggleSuccess",
    MutationKind.DELETE: "products.deleteSuccess",
}

_ERROR_KEYS = {
    MutationKind.CREATE: "products.errorSave",
    MutationKind.UPDATE: "products.errorSave",
    MutationKind.TOGGLE: "products.errorToggle",
    MutationKind.DELETE: "products.errorDelete",
    MutationKind.UPLOAD: "products.errorUpload",
}


class MutationCoordinator(QObject):
    """Run one product mutation at a time and resync the listing afterwards.

    ``state`` walks ``IDLE -> REQUESTED -> SUCCEEDED -> RESYNCING -> IDLE`` on
    success and ``IDLE -> REQUESTED -> FAILED -> IDLE`` on failure.  The list
    is never patched locally; a successful mutation triggers an immediate
    sync using whatever query the user currently has.

    Only a call still in ``REQUESTED`` blocks another one.  A mutation started
    while the previous resync is running takes over the state machine and
    triggers its own resync.

    Success messages go to *notifier*.  Failures are reported through
    *error_handler*, so they only reach the user when a UI callback is
    registered on it (``di.bootstrap`` routes it to the same notifier).
    """

    mutationFinished = Signal(str, bool)
    imageUploaded = Signal(object)

    def __init__(
        self,
        repository: IProductRepository,
        sync_controller: ProductSyncController,
        *,
        messages: MessageCatalog,
        notifier: Notifier,
        error_handler: ErrorHandler,
        event_bus: Optional[EventBus] = None,
        editor: Optional[EditorSurface] = None,
        confirmer: Optional[Confirmer] = None,
        pool: Optional[QThreadPool] = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._repository = repository
        self._sync = sync_controller
        self._messages = messages
        self._notifier = notifier
        self._errors = error_handler
        self._events = event_bus
        self._editor = editor
        self._confirmer = confirmer
        self._pool = pool if pool is not None else QThreadPool.globalInstance()
        self._pending: Optional[_PendingMutation] = None
        self._worker: Optional[CallWorker] = None
        self._resync_generation: Optional[int] = None

        self.state = ObservableProperty(MutationState.IDLE)
        self._sync.syncSettled.connect(self._on_sync_settled)

    @property
    def is_busy(self) -> bool:
        return self._pending is not None

    def set_editor(self, editor: Optional[EditorSurface]) -> None:
        self._editor = editor

    def set_confirmer(self, confirmer: Optional[Confirmer]) -> None:
        self._confirmer = confirmer

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def save(self, payload: ProductPayload, product: Optional[Product] = None) -> bool:
        """Create *payload*, or update *product* with it when one is given."""
        if product is None:
            return self._start(
                MutationKind.CREATE,
                lambda: self._repository.create(payload),
                product_id=None,
                dismiss_editor=True,
            )
        product_id = product.id
        return self._start(
            MutationKind.UPDATE,
            lambda: self._repository.update(product_id, payload),
            product_id=product_id,
            dismiss_editor=True,
        )

    def toggle(self, product: Product) -> bool:
        product_id = product.id
        body = {"isActive": not product.is_active}
        return self._start(
            MutationKind.TOGGLE,
            lambda: self._repository.update(product_id, body),
            product_id=product_id,
        )

    def delete(self, product: Product) -> bool:
        """Ask for confirmation, then delete *product*.

        Returns False when the user declined or another mutation is running.
        """
        if self.is_busy:
            _logger.warning("Delete of %s ignored: %s in progress", product.id, self.state.value.value)
            return False
        if self._confirmer is None:
            _logger.warning("Delete of %s ignored: no confirmation dialog available", product.id)
            return False
        confirmed = self._confirmer.confirm(
            self._messages.get("products.deleteTitle"),
            self._messages.get("products.deleteMessage"),
            self._messages.get("common.delete"),
            self._messages.get("common.cancel"),
        )
        if not confirmed:
            _logger.debug("Delete of %s cancelled by user", product.id)
            return False
        product_id = product.id
        return self._start(
            MutationKind.DELETE,
            lambda: self._repository.delete(product_id),
            product_id=product_id,
        )

    def upload_image(self, data: bytes) -> bool:
        """Upload an image for the edit form; ``imageUploaded`` carries the ref."""
        return self._start(
            MutationKind.UPLOAD,
            lambda: self._repository.upload_image(data),
            product_id=None,
            resync=False,
        )

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _start(
        self,
        kind: MutationKind,
        call: Callable[[], Any],
        *,
        product_id: Any,
        dismiss_editor: bool = False,
        resync: bool = True,
    ) -> bool:
        if self.is_busy:
            _logger.warning("%s ignored: %s in progress", kind.value, self.state.value.value)
            return False
        self._pending = _PendingMutation(
            kind=kind,
            product_id=product_id,
            success_key=_SUCCESS_KEYS.get(kind),
            error_key=_ERROR_KEYS[kind],
            dismiss_editor=dismiss_editor,
            resync=resync,
        )
        self._resync_generation = None
        self.state.value = MutationState.REQUESTED
        worker = CallWorker(call, label=kind.value)
        worker.signals.succeeded.connect(self._on_call_succeeded)
        worker.signals.failed.connect(self._on_call_failed)
        self._worker = worker
        self._pool.start(worker)
        return True

    def _on_call_succeeded(self, result: Any) -> None:
        pending = self._pending
        self._worker = None
        if pending is None:
            return
        self.state.value = MutationState.SUCCEEDED
        _logger.info("%s succeeded for product %s", pending.kind.value, pending.product_id)

        if pending.kind is MutationKind.UPLOAD:
            self.imageUploaded.emit(result)
        if pending.success_key:
            self._notifier.show_success(self._messages.get(pending.success_key))
        if pending.dismiss_editor and self._editor is not None:
            self._editor.dismiss()
        if self._events is not None and pending.kind is not MutationKind.UPLOAD:
            product_id = pending.product_id
            if product_id is None and isinstance(result, Product):
                product_id = result.id
            self._events.publish(ProductMutatedEvent(kind=pending.kind.value, product_id=product_id))

        self._pending = None
        if pending.resync:
            self.state.value = MutationState.RESYNCING
            self._resync_generation = self._sync.sync_now()
        else:
            self.state.value = MutationState.IDLE
        self.mutationFinished.emit(pending.kind.value, True)

    def _on_call_failed(self, error: Exception) -> None:
        pending = self._pending
        self._worker = None
        if pending is None:
            return
        self._pending = None
        self.state.value = MutationState.FAILED
        self._errors.handle(
            error,
            ErrorSeverity.ERROR,
            context={"operation": pending.kind.value, "product_id": pending.product_id},
            user_message=self._messages.get(pending.error_key),
        )
        self.state.value = MutationState.IDLE
        self.mutationFinished.emit(pending.kind.value, False)

    def _on_sync_settled(self, generation: int) -> None:
        if self.state.value is not MutationState.RESYNCING:
            return
        if self._resync_generation is not None and generation < self._resync_generation:
            return
        self._resync_generation = None
        self.state.value = MutationState.IDLE
