"""
Parsers for extracting information from receipt text.

Every extractor degrades to None (or an empty list) instead of raising;
a receipt with only some fields recovered is still useful.
"""

import re
from typing import List, Optional, Tuple

from .nlp import DateDetector, OrganizationRecognizer
from .utils import (
    DATE_PATTERNS, TIME_PATTERNS, MONEY_PATTERN, VENDOR_SKIP_PATTERNS,
    RECEIPT_KEYWORDS, TAX_KEYWORDS, VENDOR_LINE_COUNT, VENDOR_NER_LINE_COUNT,
    EXCLUSION_CONTEXT_CHARS,
    MIN_FALLBACK_TOTAL, MAX_FALLBACK_TOTAL, MAX_TAX, DEDUP_TOLERANCE,
    split_lines, header_lines, normalize_amount, first_match, first_result,
)

DateTime = Tuple[Optional[str], Optional[str]]


# --------------- Money ---------------

def extract_money_amounts(text: str) -> List[float]:
    """
    Find every monetary token in text.

    Returns positive values in ascending order. Values within a cent of one
    already found are dropped, so "$10.00" and "10.00" count once.
    """
    amounts: List[float] = []
    for m in re.finditer(MONEY_PATTERN, text):
        val = normalize_amount(m.group(1))
        if val is None or val <= 0:
            continue
        if any(abs(a - val) < DEDUP_TOLERANCE for a in amounts):
            continue
        amounts.append(val)
    return sorted(amounts)


def extract_amount_from_line(line: str) -> Optional[float]:
    """Return the first monetary token on a single line."""
    m = re.search(MONEY_PATTERN, line)
    return normalize_amount(m.group(1)) if m else None


# --------------- Date & time ---------------

def date_from_labels(header: List[str], date_detector: Optional[DateDetector] = None) -> DateTime:
    """Read "Date:" / "Time:" labelled lines."""
    date = time = None
    for line in header:
        lower = line.lower()

        if "date" in lower and ":" in lower:
            after_colon = line.split(":", 1)[1].strip()
            if after_colon:
                # "Date: 04/13/2025 10:32" carries both
                for part in after_colon.split():
                    if ":" in part:
                        if time is None:
                            time = part
                    elif date is None and re.search(r"\d", part):
                        date = part
                if date is None:
                    date = after_colon

        if "time" in lower and ":" in lower and time is None:
            after_colon = line.split(":", 1)[1].strip()
            if ":" in after_colon:
                time = after_colon

    return date, time


def _is_excluded_date(span: str, context: str) -> bool:
    text = f"{context} {span}".lower()
    return "exp" in text or "valid" in text


def split_detected_date(span: str) -> DateTime:
    """
    Split a detector span into its date and time parts.

    Detectors tend to pull in a neighbouring word ("St 05/10/2024 14:32"
    after a street address), so the date is the explicit date pattern in
    the span, or else the words from the first one holding a digit.
    """
    components = span.split()
    time = next((c for c in components if ":" in c), None)

    date = first_match(DATE_PATTERNS, span)
    if date is None:
        words = [c for c in components if ":" not in c]
        start = next((i for i, w in enumerate(words) if re.search(r"\d", w)), None)
        if start is not None:
            date = " ".join(words[start:])
    return date, time


def date_from_detector(header: List[str], date_detector: Optional[DateDetector] = None) -> DateTime:
    """Run a generic date detector over the joined header."""
    if date_detector is None:
        return None, None

    header_text = " ".join(header)
    try:
        spans = date_detector.find_dates(header_text)
    except Exception:
        # Detector trouble is not fatal; the regex fallback still runs
        return None, None

    cursor = 0
    for span in spans:
        pos = header_text.find(span, cursor)
        if pos >= 0:
            context = header_text[max(cursor, pos - EXCLUSION_CONTEXT_CHARS):pos]
            cursor = pos + len(span)
        else:
            context = ""
        # "Card exp 12/2026", "valid thru 01/31/2026"
        if _is_excluded_date(span, context):
            continue

        date, time = split_detected_date(span)
        if date:
            return date, time

    return None, None


def date_from_patterns(header: List[str], date_detector: Optional[DateDetector] = None) -> DateTime:
    """Match explicit numeric and month-name date patterns."""
    return first_match(DATE_PATTERNS, " ".join(header)), None


# Priority order; the first strategy that yields a date wins
DATE_STRATEGIES = (date_from_labels, date_from_detector, date_from_patterns)


def extract_date_and_time(text: str, date_detector: Optional[DateDetector] = None) -> DateTime:
    """
    Extract the transaction date and time from the receipt header.

    Only the first lines are searched so dates in footers, promotions or
    barcodes are never picked up. Dates are returned in the textual form
    found on the receipt.

    Args:
        text: Full OCR transcript
        date_detector: Optional generic date detector used when no labelled
            date is present

    Returns:
        Tuple of (date, time), either may be None
    """
    header = header_lines(split_lines(text))
    date = time = None

    for strategy in DATE_STRATEGIES:
        found_date, found_time = strategy(header, date_detector)
        if time is None:
            time = found_time
        if found_date:
            date = found_date
            break

    if time is None:
        time = first_match(TIME_PATTERNS, " ".join(header))
        if time is not None:
            # "9:41 Latte" matches with the trailing space
            time = time.strip()

    return date, time


# --------------- Vendor ---------------

VENDOR_REJECTION_RULES = [
    (name, re.compile(pattern, flags)) for name, pattern, flags in VENDOR_SKIP_PATTERNS
]


def vendor_rejection_reason(line: str) -> Optional[str]:
    """Name the first rule that rules this line out as a vendor, or None."""
    for name, pattern in VENDOR_REJECTION_RULES:
        if pattern.search(line):
            return name

    lower = line.lower()
    for keyword in RECEIPT_KEYWORDS:
        if keyword in lower:
            return f"keyword:{keyword}"

    return None


def is_vendor_candidate(line: str, index: int) -> bool:
    """Shape check for a business name: short, few words, some capitals."""
    words = line.split()
    if not 1 <= len(words) <= 6:
        return False
    if not 2 < len(line) < 60:
        return False
    # The first line is nearly always the store name, whatever its casing
    return index == 0 or any(w[0].isupper() for w in words)


def vendor_from_lines(lines: List[str],
                      entity_recognizer: Optional[OrganizationRecognizer] = None) -> Optional[str]:
    for idx, ln in enumerate(lines[:VENDOR_LINE_COUNT]):
        if vendor_rejection_reason(ln):
            continue
        if is_vendor_candidate(ln, idx):
            return ln
    return None


def vendor_from_entities(lines: List[str],
                         entity_recognizer: Optional[OrganizationRecognizer] = None) -> Optional[str]:
    if entity_recognizer is None:
        return None
    text = " ".join(lines[:VENDOR_NER_LINE_COUNT])
    try:
        organizations = entity_recognizer.find_organizations(text)
    except Exception:
        # Missing spaCy install or model leaves the vendor empty, same as no match
        return None
    if organizations and len(organizations[0]) < 60:
        return organizations[0]
    return None


VENDOR_STRATEGIES = (vendor_from_lines, vendor_from_entities)


def extract_vendor(lines: List[str],
                   entity_recognizer: Optional[OrganizationRecognizer] = None) -> Optional[str]:
    """
    Extract vendor name from the first lines of a receipt.

    Args:
        lines: Line sequence from split_lines()
        entity_recognizer: Optional organization-name recognizer, consulted
            only when no header line looks like a business name

    Returns:
        Vendor name or None
    """
    return first_result(VENDOR_STRATEGIES, lines, entity_recognizer)


# --------------- Total, subtotal, tax ---------------

def total_from_label(lines: List[str], money_amounts: List[float]) -> Optional[float]:
    # Bottom-up: the real total is the labelled one closest to the end
    for ln in reversed(lines):
        lower = ln.lower()
        if "total" in lower and "subtotal" not in lower:
            amount = extract_amount_from_line(ln)
            if amount is not None:
                return amount
    return None


def total_from_largest(lines: List[str], money_amounts: List[float]) -> Optional[float]:
    if not money_amounts:
        return None
    largest = max(money_amounts)
    # Below a dollar is a quantity or fee; huge values are phone numbers and the like
    if MIN_FALLBACK_TOTAL <= largest < MAX_FALLBACK_TOTAL:
        return largest
    return None


TOTAL_STRATEGIES = (total_from_label, total_from_largest)


def extract_total(lines: List[str], money_amounts: List[float]) -> Optional[float]:
    """
    Extract the total amount.

    Prefers the last line labelled "total" (never "subtotal"); otherwise
    falls back to the largest plausible amount on the receipt.
    """
    return first_result(TOTAL_STRATEGIES, lines, money_amounts)


def extract_subtotal(lines: List[str]) -> Optional[float]:
    """Return the amount on the first "subtotal" line."""
    for ln in lines:
        if "subtotal" in ln.lower():
            amount = extract_amount_from_line(ln)
            if amount is not None:
                return amount
    return None


def extract_tax(lines: List[str]) -> Optional[float]:
    """Return the amount on the first tax/VAT/GST/HST line."""
    for ln in lines:
        lower = ln.lower()
        if "subtotal" in lower:
            continue
        if any(keyword in lower for keyword in TAX_KEYWORDS):
            amount = extract_amount_from_line(ln)
            if amount is not None and 0 <= amount < MAX_TAX:
                return amount
    return None
