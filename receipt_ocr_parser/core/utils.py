"""
Utility functions and constants for receipt processing.
"""

import re
from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

# File type constants
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".webp"}
PDF_EXTS = {".pdf"}
TEXT_EXTS = {".txt"}

# Receipts put vendor, date and time near the top
HEADER_LINE_COUNT = 10
VENDOR_LINE_COUNT = 3
VENDOR_NER_LINE_COUNT = 5

# Optional $, digits grouped by commas, optional cents. Bare integers are accepted.
MONEY_PATTERN = r"\$?\s*(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)"

# Pattern constants for parsing
DATE_PATTERNS = [
    r"\d{1,2}[/-]\d{1,2}[/-]\d{2,4}",         # MM/DD/YYYY or DD/MM/YY
    r"\d{4}[/-]\d{1,2}[/-]\d{1,2}",           # YYYY-MM-DD
    r"[A-Z][a-z]+\s+\d{1,2},?\s+\d{4}",       # Jan 5, 2024
]

TIME_PATTERNS = [
    r"\d{1,2}:\d{2}\s*(?:AM|PM|am|pm)?",      # 9:41 or 9:41 PM
    r"\d{1,2}:\d{2}:\d{2}",                   # 09:41:07
]

# (rule name, pattern, flags) checked in order; first hit rejects the line
VENDOR_SKIP_PATTERNS = [
    ("date", r"^\d{1,2}[/-]\d{1,2}[/-]\d{2,4}", 0),
    ("time", r"^\d{1,2}:\d{2}", 0),
    ("number", r"^\$?\d+\.?\d*$", 0),
    ("contact", r"phone|tel|fax", 0),
    ("email", r"@.*\.(?:com|net|org)", 0),
    ("website", r"www\.", 0),
    ("phone_number", r"^\d{3}[-.\s]?\d{3}[-.\s]?\d{4}", 0),
    ("document_label", r"^(?:receipt|invoice)", 0),
]

RECEIPT_KEYWORDS = ["total", "subtotal", "tax", "amount", "date", "time", "item", "qty", "quantity"]

TAX_KEYWORDS = ["tax", "vat", "gst", "hst", "sales tax"]

# Range for the "largest amount" total fallback
MIN_FALLBACK_TOTAL = 1.0
MAX_FALLBACK_TOTAL = 100000.0
MAX_TAX = 10000.0

DEDUP_TOLERANCE = 0.01

# Text before a detected date checked for "exp"/"valid" labels
EXCLUSION_CONTEXT_CHARS = 16


def split_lines(text: str) -> List[str]:
    """Split a transcript into stripped, non-empty lines."""
    return [ln.strip() for ln in text.splitlines() if ln.strip()]


def header_lines(lines: List[str]) -> List[str]:
    """Return the header region of a line sequence."""
    return lines[:HEADER_LINE_COUNT]


def normalize_amount(s: str) -> Optional[float]:
    """Normalize amount string to float."""
    if not s:
        return None
    s = s.replace("$", "").replace(",", "").strip()
    try:
        return float(s)
    except ValueError:
        return None


def first_match(patterns: Iterable[str], text: str) -> Optional[str]:
    """Return the text of the first pattern that matches anywhere in text."""
    for pat in patterns:
        m = re.search(pat, text)
        if m:
            return m.group(0)
    return None


def first_result(strategies: Iterable[Callable[..., Optional[T]]], *args) -> Optional[T]:
    """Run strategies in order and return the first non-None result."""
    for strategy in strategies:
        result = strategy(*args)
        if result is not None:
            return result
    return None


def money_fmt(v: Optional[float]) -> str:
    """Format amount as currency."""
    return f"${v:,.2f}" if v is not None else ""
