"""File intake models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, InstanceOf, model_validator

from printstation.typing.enums import IntakeStatus, MediaType, RejectionKind
from printstation.typing.protocol import ByteSource  # noqa: TC001


class ResourceHandle(BaseModel):
    """Revocable, dereferenceable reference to an uploaded file's bytes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    handle_id: str
    uri: str
    media_type: str


class FileDescriptor(BaseModel):
    """A candidate upload as handed over by the file picker."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    media_type: str
    size_bytes: int
    source: InstanceOf[ByteSource] = Field(description="Lazy reader of the file content.")


class FileRecord(BaseModel):
    """An accepted and analyzed upload."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    resource_handle: ResourceHandle
    media_type: MediaType
    size_bytes: int = Field(ge=0)
    page_count: int = Field(ge=1)


class Rejection(BaseModel):
    """User-visible, recoverable error."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: RejectionKind
    message: str


class IntakeOutcome(BaseModel):
    """Result of submitting a file to the workflow."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    status: IntakeStatus
    record: FileRecord | None = None
    rejection: Rejection | None = None

    @model_validator(mode="after")
    def _check_payload(self) -> IntakeOutcome:
        """Ensure accepted outcomes carry a record and rejected ones a reason.

        Raises:
            ValueError: If the payload does not match the status.

        Returns:
            IntakeOutcome: The validated outcome.
        """
        if self.status == IntakeStatus.ACCEPTED and self.record is None:
            raise ValueError("accepted outcome requires a record")
        if self.status == IntakeStatus.REJECTED and self.rejection is None:
            raise ValueError("rejected outcome requires a rejection")
        return self

    @property
    def accepted(self) -> bool:
        """Return whether the file was accepted."""
        return self.status == IntakeStatus.ACCEPTED

    @classmethod
    def accept(cls, record: FileRecord) -> IntakeOutcome:
        """Build an accepted outcome."""
        return cls(status=IntakeStatus.ACCEPTED, record=record)

    @classmethod
    def reject(cls, rejection: Rejection) -> IntakeOutcome:
        """Build a rejected outcome."""
        return cls(status=IntakeStatus.REJECTED, rejection=rejection)
