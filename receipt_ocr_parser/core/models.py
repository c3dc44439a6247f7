"""
Data models for receipt processing.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _clean_amount(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "").strip()
        if not value:
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class ReceiptData:
    """Fields extracted from one receipt transcript."""
    raw_text: str
    vendor: Optional[str] = None
    date: Optional[str] = None
    total: Optional[float] = None
    tax: Optional[float] = None
    currency: Optional[str] = None

    @classmethod
    def from_refinement(cls, payload: Dict[str, Any], raw_text: str) -> "ReceiptData":
        """
        Build a record from an LLM reply.

        Blank strings become None and numbers given as strings are coerced,
        so a sloppy reply still yields a usable record.
        """
        currency = _clean_str(payload.get("currency"))
        return cls(
            raw_text=raw_text,
            vendor=_clean_str(payload.get("vendor")),
            date=_clean_str(payload.get("date")),
            total=_clean_amount(payload.get("total")),
            tax=_clean_amount(payload.get("tax")),
            currency=currency.upper() if currency else None,
        )

    def to_dict(self):
        """Convert to dictionary."""
        return asdict(self)
