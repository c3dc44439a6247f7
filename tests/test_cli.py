import io
import json

import pytest

from receipt_ocr_parser.cli.main import main


@pytest.fixture(autouse=True)
def no_llm_env(monkeypatch):
    for var in ("LLM_PROVIDER", "LLM_MODEL", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(var, raising=False)


def test_cli_writes_json(tmp_path, coffee_receipt, capsys) -> None:
    receipt = tmp_path / "coffee.txt"
    receipt.write_text(coffee_receipt, encoding="utf-8")
    out = tmp_path / "out.json"

    assert main([str(receipt), "--no-llm", "--extract-tax", "--json", str(out)]) == 0

    rows = json.loads(out.read_text(encoding="utf-8"))
    assert rows == [{"source": "coffee.txt", "vendor": "ACME Coffee Shop", "date": "04/13/2025",
                     "total": 8.12, "tax": 0.62, "currency": None, "method": "local"}]
    assert "[OK] coffee.txt: ACME Coffee Shop | 04/13/2025 | $8.12" in capsys.readouterr().out


def test_cli_reads_stdin(coffee_receipt, monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(coffee_receipt))

    assert main(["-"]) == 0

    out = capsys.readouterr().out
    assert "using local parsing only" in out
    assert "[OK] <stdin>: ACME Coffee Shop" in out


def test_cli_rejects_unknown_provider(monkeypatch, capsys) -> None:
    monkeypatch.setenv("LLM_PROVIDER", "bogus")

    assert main(["-"]) == 1
    assert "[ERROR] Invalid LLM provider: bogus" in capsys.readouterr().out
