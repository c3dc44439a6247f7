from typing import List, Optional

import pytest

from receipt_ocr_parser.core.receipt_parser import ReceiptParser


class StubDateDetector:
    def __init__(self, spans: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.spans = spans or []
        self.error = error
        self.calls: List[str] = []

    def find_dates(self, text: str) -> List[str]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.spans)


class StubOrganizationRecognizer:
    def __init__(self, organizations: Optional[List[str]] = None):
        self.organizations = organizations or []
        self.calls: List[str] = []

    def find_organizations(self, text: str) -> List[str]:
        self.calls.append(text)
        return list(self.organizations)


@pytest.fixture
def date_detector_factory():
    return StubDateDetector


@pytest.fixture
def recognizer_factory():
    return StubOrganizationRecognizer


@pytest.fixture
def offline_parser() -> ReceiptParser:
    """Parser whose generic date detector finds nothing."""
    return ReceiptParser(date_detector=StubDateDetector())


@pytest.fixture
def coffee_receipt() -> str:
    return (
        "ACME Coffee Shop\n"
        "123 Main St\n"
        "  \n"
        "Date: 04/13/2025 10:32\n"
        "Latte            4.50\n"
        "Muffin           3.00\n"
        "Subtotal         7.50\n"
        "Tax              0.62\n"
        "Total           $8.12\n"
        "Visa             8.12\n"
    )
