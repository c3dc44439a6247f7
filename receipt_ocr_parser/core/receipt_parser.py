"""
Local receipt parser: turns one OCR transcript into a ReceiptData record.
"""

from typing import Optional

from .config import ParserConfig
from .models import ReceiptData
from .nlp import DateDetector, DateparserDetector, OrganizationRecognizer, SpacyOrganizationRecognizer
from .parsers import (extract_money_amounts, extract_date_and_time, extract_vendor,
                      extract_total, extract_tax)
from .utils import split_lines


class ReceiptParser:
    """Heuristic, offline parser for vendor, date and total."""

    def __init__(self, config: Optional[ParserConfig] = None,
                 date_detector: Optional[DateDetector] = None,
                 entity_recognizer: Optional[OrganizationRecognizer] = None):
        """
        Initialize receipt parser.

        Args:
            config: Parser options (defaults to ParserConfig())
            date_detector: Generic date detector (defaults to dateparser)
            entity_recognizer: Organization recognizer for the vendor fallback.
                Built from config.ner_model when not given. The default config
                has no model, so ReceiptParser() skips the NER vendor fallback;
                set ParserConfig(ner_model="en_core_web_sm") to enable it.
                A recognizer that fails (e.g. spaCy not installed) counts as
                finding nothing.
        """
        self.config = config or ParserConfig()
        self.date_detector = date_detector if date_detector is not None else DateparserDetector()
        if entity_recognizer is None and self.config.ner_model:
            entity_recognizer = SpacyOrganizationRecognizer(self.config.ner_model)
        self.entity_recognizer = entity_recognizer

    def parse(self, text: str) -> ReceiptData:
        """Parse a transcript. Fields that cannot be found are left as None."""
        lines = split_lines(text)

        money_amounts = extract_money_amounts(text)
        date, _ = extract_date_and_time(text, self.date_detector)
        vendor = extract_vendor(lines, self.entity_recognizer)
        total = extract_total(lines, money_amounts)
        tax = extract_tax(lines) if self.config.extract_tax else None

        return ReceiptData(
            raw_text=text,
            vendor=vendor,
            date=date,
            total=total,
            tax=tax,
        )
