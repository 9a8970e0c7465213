from __future__ import annotations

import asyncio
import json
from argparse import Namespace
from pathlib import Path

import pytest

from printstation import cli
from printstation.exceptions import SettingsError
from printstation.resources import describe_bytes
from printstation.settings import Settings
from printstation.typing.enums import RejectionKind
from printstation.typing.models import Rejection


def test_build_parser_supports_version_flag(capsys) -> None:
    parser = cli.build_parser()

    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["--version"])
    assert exc_info.value.code == 0

    captured = capsys.readouterr()
    assert "0.1.0" in captured.out


def test_build_parser_reads_print_options() -> None:
    args = cli.build_parser().parse_args(["print", "--input", "doc.pdf", "--yes"])

    assert args.command == "print"
    assert args.input_path == Path("doc.pdf")
    assert args.media_type is None
    assert args.yes is True


@pytest.mark.parametrize(
    ("size_bytes", "expected"),
    [
        (0, "0 Bytes"),
        (512, "512 Bytes"),
        (1536, "1.5 KB"),
        (2_400_000, "2.29 MB"),
        (10 * 1024 * 1024, "10 MB"),
        (3 * 1024**3, "3 GB"),
    ],
)
def test_format_file_size(size_bytes: int, expected: str) -> None:
    assert cli.format_file_size(size_bytes) == expected


def test_quote_document_summarizes_price() -> None:
    descriptor = describe_bytes("brochure.pdf", b"/Type /Page /Pages " * 3, "application/pdf")

    summary = cli._quote_document(descriptor, Settings())

    assert summary["pages"] == 3
    assert summary["total"] == 12.0
    assert summary["total_label"] == "₹12.00"
    assert summary["media_type"] == "application/pdf"


def test_print_document_stops_when_payment_is_declined_by_user(mocker) -> None:
    printer = mocker.Mock()
    mocker.patch("printstation.cli.BrowserPrintService", return_value=printer)
    settings = Settings(settlement_delay_seconds=0, confirmation_display_seconds=0)
    descriptor = describe_bytes("flyer.png", b"\x89PNG", "image/png")

    rejection = asyncio.run(cli._print_document(descriptor, settings, lambda _price: False))

    assert rejection is None
    printer.open.assert_not_called()


def test_print_document_returns_intake_rejection(mocker) -> None:
    mocker.patch("printstation.cli.BrowserPrintService")
    descriptor = describe_bytes("notes.txt", b"hello", "text/plain")

    rejection = asyncio.run(cli._print_document(descriptor, Settings(), lambda _price: True))

    assert rejection is not None
    assert rejection.kind == RejectionKind.UNSUPPORTED_TYPE


def _namespace(command: str, input_path: Path, **extra: object) -> Namespace:
    return Namespace(command=command, input_path=input_path, media_type=None, **extra)


def test_main_prints_quote_as_json(mocker, tmp_path: Path, capsys) -> None:
    upload = tmp_path / "letter.docx"
    upload.write_bytes(b"\0" * 512_000)

    parser = mocker.Mock()
    parser.parse_args.return_value = _namespace("quote", upload)
    mocker.patch("printstation.cli.build_parser", return_value=parser)
    mocker.patch("printstation.cli.get_settings", return_value=Settings())
    mocker.patch("printstation.cli.configure_logging")

    result = cli.main()

    assert result == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["pages"] == 2
    assert summary["total"] == 8.0


def test_main_reports_rejected_print(mocker, tmp_path: Path, capsys) -> None:
    upload = tmp_path / "huge.pdf"
    upload.write_bytes(b"%PDF")

    parser = mocker.Mock()
    parser.parse_args.return_value = _namespace("print", upload, yes=True)
    mocker.patch("printstation.cli.build_parser", return_value=parser)
    mocker.patch("printstation.cli.get_settings", return_value=Settings())
    mocker.patch("printstation.cli.configure_logging")
    mocker.patch("printstation.cli._print_document")
    mocker.patch(
        "printstation.cli.run_async",
        return_value=Rejection(kind=RejectionKind.OVERSIZED_DOCUMENT, message="Document exceeds 50 page limit."),
    )

    result = cli.main()

    assert result == 1
    assert "50 page limit" in capsys.readouterr().err


def test_main_returns_error_for_missing_input(mocker, tmp_path: Path) -> None:
    parser = mocker.Mock()
    parser.parse_args.return_value = _namespace("quote", tmp_path / "missing.pdf")
    mocker.patch("printstation.cli.build_parser", return_value=parser)
    mocker.patch("printstation.cli.get_settings", return_value=Settings())
    mocker.patch("printstation.cli.configure_logging")

    assert cli.main() == 1


def test_main_prints_help_without_command(mocker) -> None:
    parser = mocker.Mock()
    parser.parse_args.return_value = Namespace(command=None)
    mocker.patch("printstation.cli.build_parser", return_value=parser)
    mocker.patch("printstation.cli.get_settings", return_value=Settings())
    mocker.patch("printstation.cli.configure_logging")

    assert cli.main() == 0
    parser.print_help.assert_called_once()


def test_main_maps_package_errors_and_interrupts(mocker, tmp_path: Path) -> None:
    upload = tmp_path / "doc.pdf"
    upload.write_bytes(b"%PDF")

    parser = mocker.Mock()
    parser.parse_args.return_value = _namespace("preview", upload)
    mocker.patch("printstation.cli.build_parser", return_value=parser)
    mocker.patch("printstation.cli.get_settings", return_value=Settings())
    mocker.patch("printstation.cli.configure_logging")
    run_command = mocker.patch("printstation.cli._run_command")

    run_command.side_effect = SettingsError(message="broken")
    assert cli.main() == 1

    run_command.side_effect = KeyboardInterrupt
    assert cli.main() == 130

    run_command.side_effect = RuntimeError("boom")
    assert cli.main() == 1
