"""
Report output for processed receipts.
"""

import csv
import json
from pathlib import Path
from typing import Dict, List

from .models import ReceiptData
from .processor import ROW_FIELDS
from .utils import money_fmt


def write_csv(rows: List[Dict], out_csv: Path):
    """Write receipts to CSV file."""
    with out_csv.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=ROW_FIELDS)
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k) for k in ROW_FIELDS})


def write_json(rows: List[Dict], out_json: Path):
    """Write receipts to a JSON array."""
    with out_json.open("w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)
        f.write("\n")


def format_summary(receipt: ReceiptData) -> str:
    """One-line console summary of a receipt."""
    if receipt.total is None:
        total = "(no total)"
    elif receipt.currency and receipt.currency != "USD":
        total = f"{receipt.total:,.2f} {receipt.currency}"
    else:
        total = money_fmt(receipt.total)
    parts = [
        receipt.vendor or "(unknown vendor)",
        receipt.date or "(no date)",
        total,
    ]
    if receipt.tax is not None:
        parts.append(f"tax {money_fmt(receipt.tax)}")
    return " | ".join(parts)
