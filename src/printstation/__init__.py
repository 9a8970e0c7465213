"""PrintStation package."""

from printstation.async_runner import run_async
from printstation.exceptions import (
    AsyncExecutionError,
    IntakeRejectedError,
    OversizedDocumentError,
    OversizeFileError,
    PackageError,
    PrintError,
    SettingsError,
    SettlementDeclinedError,
    UnsupportedTypeError,
)
from printstation.logging import configure_logging, get_logger
from printstation.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("printstation")

__all__ = [
    "AsyncExecutionError",
    "IntakeRejectedError",
    "OversizeFileError",
    "OversizedDocumentError",
    "PackageError",
    "PrintError",
    "Settings",
    "SettingsError",
    "SettlementDeclinedError",
    "UnsupportedTypeError",
    "__version__",
    "configure_logging",
    "get_logger",
    "logger",
    "run_async",
]
