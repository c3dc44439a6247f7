"""
Receipt OCR Parser

Heuristic, offline extraction of vendor, date and total from noisy
receipt OCR text, with optional LLM refinement.
"""

__version__ = "1.0.0"
__author__ = "Receipt OCR Parser Contributors"

from receipt_ocr_parser.core.models import ReceiptData
from receipt_ocr_parser.core.receipt_parser import ReceiptParser

__all__ = ["ReceiptData", "ReceiptParser"]
