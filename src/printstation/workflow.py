"""Intake workflow: upload, analysis, payment and print sequencing.

One `IntakeWorkflow` instance is one session holding at most one document. User
intents are synchronous state-transition requests; intents issued in a phase where
they do not apply are ignored. Background work (settlement, the confirmation
timer) runs as tasks on the current event loop.

Every submission and every clear bumps a generation counter. An analysis or a
settlement finishing under an older generation is discarded, and a handle acquired
for it is released on the spot.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, TypeVar
from uuid import uuid4

from printstation import page_estimator, pricing, validator
from printstation.exceptions import (
    AnalysisCancelledError,
    IntakeRejectedError,
    InvalidFileError,
    OversizedDocumentError,
    PrintError,
    SettlementDeclinedError,
    WorkflowBusyError,
)
from printstation.logging import get_logger
from printstation.payment import SimulatedPaymentGateway
from printstation.settings import get_settings
from printstation.typing.enums import MediaType, RejectionKind, WorkflowPhase
from printstation.typing.models import (
    FileDescriptor,
    FileRecord,
    IntakeOutcome,
    PaymentReceipt,
    Rejection,
    WorkflowState,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from printstation.settings import Settings
    from printstation.typing.protocol import PaymentGateway, PreviewService, PrintService, ResourceProvider

    StateListener = Callable[[WorkflowState], None]

T = TypeVar("T")

logger = get_logger(__name__)

_BUSY_PHASES = frozenset(
    {WorkflowPhase.ANALYZING, WorkflowPhase.AWAITING_PAYMENT, WorkflowPhase.PROCESSING},
)


class IntakeWorkflow:
    """State machine driving one document from upload to print."""

    def __init__(
        self,
        *,
        resources: ResourceProvider,
        printer: PrintService,
        payment: PaymentGateway | None = None,
        preview: PreviewService | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session_id = uuid4().hex[:8]
        self._resources = resources
        self._printer = printer
        self._preview = preview
        self._payment = payment or SimulatedPaymentGateway(self.settings.settlement_delay_seconds)
        self._state = WorkflowState()
        self._generation = 0
        self._listeners: list[StateListener] = []
        self._tasks: set[asyncio.Task[Any]] = set()
        self._confirmation_timer: asyncio.Task[None] | None = None
        self._receipt: PaymentReceipt | None = None
        self._log = logger.bind(session=self.session_id)

    @property
    def state(self) -> WorkflowState:
        """Return the current read-only state snapshot."""
        return self._state

    @property
    def receipt(self) -> PaymentReceipt | None:
        """Return the receipt of the last settled payment."""
        return self._receipt

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback fired with each new state.

        Args:
            listener: Called after every transition.

        Returns:
            Callable[[], None]: Unsubscribes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def submit_file(self, descriptor: FileDescriptor) -> IntakeOutcome:
        """Validate, analyze and accept a new upload.

        A rejected upload leaves the current state and record untouched. An accepted one
        supersedes any document already held.

        Args:
            descriptor: Upload as produced by the file picker.

        Returns:
            IntakeOutcome: Accepted record, or the reason for rejection.
        """
        if self._state.phase in _BUSY_PHASES:
            rejection = validator.to_rejection(WorkflowBusyError())
            self._log.warning("Upload rejected", extra={"kind": rejection.kind.value, "phase": self._state.phase.value})
            return IntakeOutcome.reject(rejection)

        try:
            media_type = validator.ensure_valid(descriptor.media_type, descriptor.size_bytes, self.settings)
        except IntakeRejectedError as exc:
            return self._reject(exc)

        self._drop_record()
        self._generation += 1
        generation = self._generation
        self._transition(WorkflowPhase.ANALYZING)

        try:
            page_count = await page_estimator.estimate_descriptor(descriptor, media_type, self.settings)
        except OSError as exc:
            self._log.exception("Document could not be read", extra={"file_name": descriptor.name})
            return self._fail_analysis(generation, InvalidFileError(message=f"File could not be read: {exc}"))
        except Exception:
            self._log.exception("Page estimation failed", extra={"file_name": descriptor.name})
            self._abandon_analysis(generation)
            raise
        except BaseException:
            self._abandon_analysis(generation)
            raise

        if generation != self._generation:
            self._log.info("Discarding stale analysis", extra={"file_name": descriptor.name})
            return IntakeOutcome.reject(validator.to_rejection(AnalysisCancelledError()))

        try:
            validator.check_page_limit(page_count, self.settings)
        except OversizedDocumentError as exc:
            return self._fail_analysis(generation, exc)

        return await self._accept(descriptor, media_type, page_count, generation)

    def request_print(self) -> None:
        """Ask to print the held document, opening the payment step."""
        if self._state.phase != WorkflowPhase.READY:
            self._ignore("request_print")
            return
        self._transition(WorkflowPhase.AWAITING_PAYMENT, record=self._state.record)

    def cancel_payment(self) -> None:
        """Close the payment step without paying."""
        if self._state.phase != WorkflowPhase.AWAITING_PAYMENT:
            self._ignore("cancel_payment")
            return
        self._transition(WorkflowPhase.READY, record=self._state.record)

    def confirm_payment(self) -> asyncio.Task[None] | None:
        """Confirm payment and start settlement.

        Must be called from a running event loop.

        Returns:
            asyncio.Task[None] | None: The settlement task, or None when ignored.
        """
        record = self._state.record
        if self._state.phase != WorkflowPhase.AWAITING_PAYMENT or record is None:
            self._ignore("confirm_payment")
            return None
        task = self._spawn(self._settle(self._generation, record))
        self._transition(WorkflowPhase.PROCESSING, record=record)
        return task

    def clear_selection(self) -> None:
        """Drop the held document and release its handle; no-op when already empty."""
        if self._state.phase == WorkflowPhase.EMPTY:
            self._ignore("clear_selection")
            return
        self._drop_record()
        self._generation += 1
        self._transition(WorkflowPhase.EMPTY)

    def preview(self) -> None:
        """Open the held document in the preview collaborator."""
        record = self._state.record
        if record is None or self._preview is None:
            self._ignore("preview")
            return
        self._preview.open_preview(record.resource_handle)

    async def wait_idle(self) -> None:
        """Wait until settlement and confirmation tasks have finished.

        Raises:
            BaseException: The first unexpected error raised by a background task.
        """
        while self._tasks:
            done, _ = await asyncio.wait(set(self._tasks))
            for task in done:
                if task.cancelled():
                    continue
                exc = task.exception()
                if exc is not None:
                    raise exc

    async def aclose(self) -> None:
        """Clear the session and stop background tasks."""
        self.clear_selection()
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)

    async def _accept(
        self,
        descriptor: FileDescriptor,
        media_type: MediaType,
        page_count: int,
        generation: int,
    ) -> IntakeOutcome:
        try:
            handle = await self._resources.acquire(descriptor)
        except Exception:
            self._log.exception("Resource handle could not be acquired", extra={"file_name": descriptor.name})
            self._abandon_analysis(generation)
            raise
        except BaseException:
            self._abandon_analysis(generation)
            raise

        if generation != self._generation:
            self._resources.release(handle)
            self._log.info("Discarding stale analysis", extra={"file_name": descriptor.name})
            return IntakeOutcome.reject(validator.to_rejection(AnalysisCancelledError()))

        record = FileRecord(
            name=descriptor.name,
            resource_handle=handle,
            media_type=media_type,
            size_bytes=descriptor.size_bytes,
            page_count=page_count,
        )
        self._transition(WorkflowPhase.READY, record=record)
        self._log.info(
            "Document accepted",
            extra={"file_name": record.name, "pages": record.page_count, "uri": handle.uri},
        )
        return IntakeOutcome.accept(record)

    async def _settle(self, generation: int, record: FileRecord) -> None:
        quote = pricing.quote(record.page_count, self.settings)
        try:
            receipt = await self._payment.settle(quote)
        except SettlementDeclinedError as exc:
            self._log.warning("Payment declined", extra={"reason": exc.message})
            if self._is_current(generation, WorkflowPhase.PROCESSING):
                error = Rejection(kind=exc.kind, message=exc.message)
                self._transition(WorkflowPhase.AWAITING_PAYMENT, record=record, error=error)
            return
        except Exception:
            self._log.exception("Payment settlement failed", extra={"amount": quote.total})
            if self._is_current(generation, WorkflowPhase.PROCESSING):
                error = Rejection(kind=RejectionKind.SETTLEMENT_DECLINED, message="Payment could not be completed.")
                self._transition(WorkflowPhase.AWAITING_PAYMENT, record=record, error=error)
            raise

        if not self._is_current(generation, WorkflowPhase.PROCESSING):
            self._log.info("Discarding stale settlement", extra={"reference": receipt.reference})
            return

        self._receipt = receipt
        self._transition(WorkflowPhase.PAID_CONFIRMATION, record=record)
        self._confirmation_timer = self._spawn(self._expire_confirmation(generation))
        await self._open_and_print(generation, record)

    async def _open_and_print(self, generation: int, record: FileRecord) -> None:
        handle = record.resource_handle
        try:
            document = await self._printer.open(handle)
            if generation != self._generation:
                self._log.info("Selection changed before print", extra={"uri": handle.uri})
                return
            await self._printer.print(document)
        except PrintError as exc:
            self._log.exception("Printing failed", extra={"uri": handle.uri})
            self._report_print_failure(generation, exc.message)
            return
        except Exception as exc:
            self._log.exception("Print service failed", extra={"uri": handle.uri})
            self._report_print_failure(generation, f"Printing failed: {exc}")
            raise
        self._log.info("Print requested", extra={"uri": handle.uri, "pages": record.page_count})

    async def _expire_confirmation(self, generation: int) -> None:
        await asyncio.sleep(self.settings.confirmation_display_seconds)
        if self._is_current(generation, WorkflowPhase.PAID_CONFIRMATION):
            self._transition(WorkflowPhase.READY, record=self._state.record, error=self._state.error)

    def _report_print_failure(self, generation: int, message: str) -> None:
        if generation == self._generation and self._state.record is not None:
            error = Rejection(kind=RejectionKind.PRINT_FAILED, message=message)
            self._transition(self._state.phase, record=self._state.record, error=error)

    def _transition(
        self,
        phase: WorkflowPhase,
        *,
        record: FileRecord | None = None,
        error: Rejection | None = None,
    ) -> None:
        previous = self._state.phase
        quote = pricing.quote(record.page_count, self.settings) if record is not None else None
        self._state = WorkflowState(phase=phase, record=record, quote=quote, error=error)
        self._log.debug("Workflow transition", extra={"from": previous.value, "to": phase.value})
        for listener in list(self._listeners):
            listener(self._state)

    def _reject(self, exc: IntakeRejectedError) -> IntakeOutcome:
        rejection = validator.to_rejection(exc)
        self._log.warning("Upload rejected", extra={"kind": rejection.kind.value, "reason": rejection.message})
        self._transition(self._state.phase, record=self._state.record, error=rejection)
        return IntakeOutcome.reject(rejection)

    def _fail_analysis(self, generation: int, exc: IntakeRejectedError) -> IntakeOutcome:
        rejection = validator.to_rejection(exc)
        self._log.warning("Upload rejected", extra={"kind": rejection.kind.value, "reason": rejection.message})
        if generation == self._generation:
            self._transition(WorkflowPhase.EMPTY, error=rejection)
        return IntakeOutcome.reject(rejection)

    def _abandon_analysis(self, generation: int) -> None:
        if generation == self._generation and self._state.phase == WorkflowPhase.ANALYZING:
            self._transition(WorkflowPhase.EMPTY)

    def _drop_record(self) -> None:
        if self._confirmation_timer is not None:
            self._confirmation_timer.cancel()
            self._confirmation_timer = None
        record = self._state.record
        if record is not None:
            self._resources.release(record.resource_handle)
            self._log.info("Document released", extra={"file_name": record.name, "uri": record.resource_handle.uri})

    def _is_current(self, generation: int, phase: WorkflowPhase) -> bool:
        return generation == self._generation and self._state.phase == phase

    def _spawn(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("Background task failed", extra={"task": task.get_name()}, exc_info=exc)

    def _ignore(self, intent: str) -> None:
        self._log.debug("Intent ignored", extra={"intent": intent, "phase": self._state.phase.value})
