from __future__ import annotations

import json
import sys
from subprocess import run as subprocess_run  # noqa: S404
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def _run_cli(*args: str, cwd: Path):
    return subprocess_run(  # noqa: S603
        [sys.executable, "-m", "printstation.cli", *args],
        capture_output=True,
        text=True,
        check=False,
        cwd=cwd,
    )


def test_cli_quote_prices_word_document(tmp_path: Path) -> None:
    upload = tmp_path / "report.docx"
    upload.write_bytes(b"\0" * 2_400_000)

    result = _run_cli("quote", "--input", str(upload), cwd=tmp_path)

    assert result.returncode == 0, result.stderr
    summary = json.loads(result.stdout)
    assert summary["file"] == "report.docx"
    assert summary["pages"] == 10
    assert summary["total"] == 40.0
    assert summary["currency"] == "INR"
    assert summary["size"] == "2.29 MB"


def test_cli_quote_rejects_unsupported_type(tmp_path: Path) -> None:
    upload = tmp_path / "notes.txt"
    upload.write_text("hello", encoding="utf-8")

    result = _run_cli("quote", "--input", str(upload), cwd=tmp_path)

    assert result.returncode == 1
    assert "Unsupported file type" in result.stderr
