from printstation.exceptions import (
    AnalysisCancelledError,
    AsyncExecutionError,
    IntakeRejectedError,
    InvalidFileError,
    OversizedDocumentError,
    OversizeFileError,
    PackageError,
    PrintError,
    SettingsError,
    SettlementDeclinedError,
    UnsupportedTypeError,
    WorkflowBusyError,
)
from printstation.typing.enums import RejectionKind


def test_root_exception_hierarchy() -> None:
    assert issubclass(SettingsError, PackageError)
    assert issubclass(AsyncExecutionError, PackageError)
    assert issubclass(IntakeRejectedError, PackageError)
    assert issubclass(SettlementDeclinedError, PackageError)
    assert issubclass(PrintError, PackageError)


def test_intake_errors_carry_kind_and_default_message() -> None:
    assert UnsupportedTypeError().kind == RejectionKind.UNSUPPORTED_TYPE
    assert OversizeFileError().kind == RejectionKind.OVERSIZE_FILE
    assert InvalidFileError().kind == RejectionKind.INVALID_FILE
    assert OversizedDocumentError().kind == RejectionKind.OVERSIZED_DOCUMENT
    assert WorkflowBusyError().kind == RejectionKind.WORKFLOW_BUSY
    assert AnalysisCancelledError().kind == RejectionKind.CANCELLED
    assert str(OversizedDocumentError()) == "Document exceeds 50 page limit."


def test_settings_error_includes_cause() -> None:
    error = SettingsError(exc=ValueError("bad"))
    assert str(error) == "Failed to load settings: bad"
