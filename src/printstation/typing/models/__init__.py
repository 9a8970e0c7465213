"""Core domain model exports."""

from printstation.typing.models.intake import (
    FileDescriptor,
    FileRecord,
    IntakeOutcome,
    Rejection,
    ResourceHandle,
)
from printstation.typing.models.pricing import PaymentReceipt, PricingQuote
from printstation.typing.models.workflow import WorkflowState

__all__ = [
    "FileDescriptor",
    "FileRecord",
    "IntakeOutcome",
    "PaymentReceipt",
    "PricingQuote",
    "Rejection",
    "ResourceHandle",
    "WorkflowState",
]
