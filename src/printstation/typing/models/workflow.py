"""Workflow read-model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from printstation.typing.enums import WorkflowPhase
from printstation.typing.models.intake import FileRecord, Rejection
from printstation.typing.models.pricing import PricingQuote


class WorkflowState(BaseModel):
    """Snapshot of an intake session, exposed to the rendering layer."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    phase: WorkflowPhase = WorkflowPhase.EMPTY
    record: FileRecord | None = None
    quote: PricingQuote | None = None
    error: Rejection | None = None

    @model_validator(mode="after")
    def _check_record(self) -> WorkflowState:
        """Ensure a record is attached exactly in the record-carrying phases.

        Raises:
            ValueError: If phase and record disagree.

        Returns:
            WorkflowState: The validated state.
        """
        if self.phase.holds_record != (self.record is not None):
            raise ValueError(f"phase '{self.phase}' does not match record presence")
        if (self.quote is None) != (self.record is None):
            raise ValueError("quote must be present exactly when a record is held")
        return self
