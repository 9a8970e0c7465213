"""Typing-centric domain modules."""

from printstation.typing.enums import IntakeStatus, MediaType, RejectionKind, WorkflowPhase
from printstation.typing.models import (
    FileDescriptor,
    FileRecord,
    IntakeOutcome,
    PaymentReceipt,
    PricingQuote,
    Rejection,
    ResourceHandle,
    WorkflowState,
)
from printstation.typing.protocol import (
    ByteSource,
    OpenedDocument,
    PaymentGateway,
    PreviewService,
    PrintService,
    ResourceProvider,
)

__all__ = [
    "ByteSource",
    "FileDescriptor",
    "FileRecord",
    "IntakeOutcome",
    "IntakeStatus",
    "MediaType",
    "OpenedDocument",
    "PaymentGateway",
    "PaymentReceipt",
    "PreviewService",
    "PricingQuote",
    "PrintService",
    "Rejection",
    "RejectionKind",
    "ResourceHandle",
    "ResourceProvider",
    "WorkflowPhase",
    "WorkflowState",
]
