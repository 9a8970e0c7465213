"""CLI entry point for PrintStation."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from printstation import __version__, logger
from printstation.async_runner import run_async
from printstation.exceptions import IntakeRejectedError, PackageError
from printstation.logging import configure_logging
from printstation.page_estimator import estimate_descriptor
from printstation.pricing import format_amount, quote
from printstation.printing import BrowserPrintService
from printstation.resources import TemporaryFileResourceProvider, describe_path
from printstation.settings import get_settings
from printstation.typing.enums import WorkflowPhase
from printstation.validator import check_page_limit, ensure_valid
from printstation.workflow import IntakeWorkflow

if TYPE_CHECKING:
    from collections.abc import Callable

    from printstation.settings import Settings
    from printstation.typing.models import FileDescriptor, PricingQuote, Rejection

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Render a byte count with a binary unit, e.g. `2.4 MB`.

    Args:
        size_bytes (int): Byte count.

    Returns:
        str: Human-readable size.
    """
    value = float(max(size_bytes, 0))
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[exponent]}"


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="printstation")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    quote_parser = subparsers.add_parser("quote", help="Estimate pages and price of a document")
    quote_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    quote_parser.add_argument("--media-type", default=None, dest="media_type")

    print_parser = subparsers.add_parser("print", help="Pay for and print a document")
    print_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    print_parser.add_argument("--media-type", default=None, dest="media_type")
    print_parser.add_argument("--yes", action="store_true", help="Confirm payment without prompting")

    preview_parser = subparsers.add_parser("preview", help="Open a document in the viewer")
    preview_parser.add_argument("--input", required=True, type=Path, dest="input_path")
    preview_parser.add_argument("--media-type", default=None, dest="media_type")

    return parser


def _quote_document(descriptor: FileDescriptor, settings: Settings) -> dict[str, object]:
    """Validate, estimate and price a document without opening it.

    Args:
        descriptor (FileDescriptor): Document to price.
        settings (Settings): Runtime settings.

    Returns:
        dict[str, object]: JSON-serializable quote summary.
    """
    media_type = ensure_valid(descriptor.media_type, descriptor.size_bytes, settings)
    page_count = run_async(estimate_descriptor(descriptor, media_type, settings))
    check_page_limit(page_count, settings)
    price = quote(page_count, settings)
    return {
        "file": descriptor.name,
        "media_type": media_type.value,
        "size": format_file_size(descriptor.size_bytes),
        "pages": page_count,
        "rate_per_page": price.rate_per_page,
        "total": price.total,
        "currency": price.currency,
        "total_label": format_amount(price.total, price.currency),
    }


def _build_workflow(settings: Settings) -> IntakeWorkflow:
    """Compose a workflow backed by temporary files and the system browser."""
    printer = BrowserPrintService(print_command=settings.print_command)
    return IntakeWorkflow(
        resources=TemporaryFileResourceProvider(settings.resource_dir),
        printer=printer,
        preview=printer,
        settings=settings,
    )


def _confirm_prompt(price: PricingQuote) -> bool:
    """Ask the user to confirm payment on the terminal."""
    label = format_amount(price.total, price.currency)
    rate = format_amount(price.rate_per_page, price.currency)
    answer = input(f"{price.page_count} page(s) at {rate}: pay {label}? [y/N] ")
    return answer.strip().lower() in {"y", "yes"}


async def _print_document(
    descriptor: FileDescriptor,
    settings: Settings,
    confirm: Callable[[PricingQuote], bool],
) -> Rejection | None:
    """Run the full intake, payment and print sequence for one document.

    Args:
        descriptor (FileDescriptor): Document to print.
        settings (Settings): Runtime settings.
        confirm (Callable[[PricingQuote], bool]): Payment confirmation callback.

    Returns:
        Rejection | None: Why the document was not printed, if it was not.
    """
    workflow = _build_workflow(settings)
    try:
        outcome = await workflow.submit_file(descriptor)
        if not outcome.accepted:
            return outcome.rejection

        workflow.request_print()
        price = workflow.state.quote
        if price is None or not confirm(price):
            workflow.cancel_payment()
            logger.info("Payment cancelled by user")
            return None

        workflow.confirm_payment()
        await workflow.wait_idle()
        if workflow.state.phase == WorkflowPhase.READY and workflow.receipt is not None:
            logger.info("Payment completed", extra={"reference": workflow.receipt.reference})
        return workflow.state.error
    finally:
        await workflow.aclose()


async def _preview_document(descriptor: FileDescriptor, settings: Settings) -> Rejection | None:
    """Accept a document and open it in the viewer until the user is done."""
    workflow = _build_workflow(settings)
    try:
        outcome = await workflow.submit_file(descriptor)
        if not outcome.accepted:
            return outcome.rejection
        workflow.preview()
        input("Press Enter to close the preview... ")
        return None
    finally:
        await workflow.aclose()


def _run_command(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch a parsed command.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    descriptor = describe_path(args.input_path, media_type=args.media_type)

    if args.command == "quote":
        try:
            summary = _quote_document(descriptor, settings)
        except IntakeRejectedError as exc:
            print(exc.message, file=sys.stderr)
            return 1
        print(json.dumps(summary, ensure_ascii=False, indent=2))
        return 0

    if args.command == "print":
        confirm = (lambda _price: True) if args.yes else _confirm_prompt
        rejection = run_async(_print_document(descriptor, settings, confirm))
    else:
        rejection = run_async(_preview_document(descriptor, settings))

    if rejection is not None:
        print(rejection.message, file=sys.stderr)
        return 1
    return 0


def main() -> int:
    """Run the CLI.

    Returns:
        int: Exit code (0 for success, 1 for error).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args()

    if args.command not in {"quote", "print", "preview"}:
        parser.print_help()
        return 0

    if not args.input_path.is_file():
        print(f"Input path is not a file: {args.input_path}", file=sys.stderr)
        return 1

    try:
        return _run_command(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return 1
    except KeyboardInterrupt:
        logger.info("Aborted by user")
        return 130
    except Exception:
        logger.exception("Unexpected error", extra={"command": args.command})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
