import pytest

from receipt_ocr_parser.core import llm
from receipt_ocr_parser.core.config import RefinementConfig
from receipt_ocr_parser.core.errors import RefinementError
from receipt_ocr_parser.core.models import ReceiptData

CONFIG = RefinementConfig(api_key="sk-test")


def test_parse_llm_json_strips_code_fences() -> None:
    reply = '```json\n{"vendor": "ACME", "total": 8.12}\n```'

    assert llm.parse_llm_json(reply) == {"vendor": "ACME", "total": 8.12}


def test_parse_llm_json_rejects_garbage() -> None:
    with pytest.raises(RefinementError):
        llm.parse_llm_json("Sorry, I can't read that receipt.")
    with pytest.raises(RefinementError):
        llm.parse_llm_json("[1, 2]")


def test_refine_receipt_builds_record(monkeypatch) -> None:
    prompts = []

    def fake_call(prompt, config):
        prompts.append(prompt)
        return ('{"vendor": "ACME Coffee", "total": "8.12", "tax": 0.62, '
                '"date": "04/13/2025", "currency": "usd"}')

    monkeypatch.setattr(llm, "call_llm", fake_call)

    record = llm.refine_receipt("ACME COFFEE\nTotal 8.12", CONFIG)

    assert record == ReceiptData(raw_text="ACME COFFEE\nTotal 8.12", vendor="ACME Coffee",
                                 date="04/13/2025", total=8.12, tax=0.62, currency="USD")
    assert "ACME COFFEE\nTotal 8.12" in prompts[0]


def test_refine_receipt_wraps_provider_errors(monkeypatch) -> None:
    def failing_call(prompt, config):
        raise ConnectionError("network down")

    monkeypatch.setattr(llm, "call_llm", failing_call)

    with pytest.raises(RefinementError, match="network down"):
        llm.refine_receipt("ACME\nTotal 1.00", CONFIG)


def test_refine_receipt_requires_configuration() -> None:
    with pytest.raises(RefinementError):
        llm.refine_receipt("ACME\nTotal 1.00", RefinementConfig())


def test_from_refinement_cleans_values() -> None:
    record = ReceiptData.from_refinement(
        {"vendor": "  ", "total": "1,099.00", "tax": None, "date": "", "currency": None},
        raw_text="raw",
    )

    assert record == ReceiptData(raw_text="raw", total=1099.00)


def test_from_refinement_ignores_unparseable_numbers() -> None:
    record = ReceiptData.from_refinement({"total": "n/a", "tax": True}, raw_text="raw")

    assert record.total is None
    assert record.tax is None
