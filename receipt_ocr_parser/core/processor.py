"""
Main receipt processing orchestration.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import ParserConfig, RefinementConfig
from .errors import ReceiptParserError, RefinementError
from .llm import refine_receipt
from .models import ReceiptData
from .ocr import transcript_from_file
from .parsers import extract_date_and_time, extract_subtotal
from .receipt_parser import ReceiptParser
from .utils import IMAGE_EXTS, PDF_EXTS, TEXT_EXTS, split_lines, money_fmt

SUPPORTED_EXTS = IMAGE_EXTS | PDF_EXTS | TEXT_EXTS

ROW_FIELDS = ["source", "vendor", "date", "total", "tax", "currency", "method"]


@dataclass(frozen=True)
class ProcessedReceipt:
    """Local parse of one receipt plus the LLM refinement, when there is one."""
    source: str
    local: ReceiptData
    refined: Optional[ReceiptData] = None
    refinement_error: Optional[str] = None

    @property
    def display(self) -> ReceiptData:
        """The record to show: the refinement wins when available."""
        return self.refined if self.refined is not None else self.local

    @property
    def method(self) -> str:
        return "llm" if self.refined is not None else "local"

    def to_row(self) -> Dict:
        shown = self.display
        return {
            "source": self.source,
            "vendor": shown.vendor,
            "date": shown.date,
            "total": shown.total,
            "tax": shown.tax,
            "currency": shown.currency,
            "method": self.method,
        }


class ReceiptProcessor:
    """Runs the local parser and, when configured, the LLM refinement."""

    def __init__(self, parser_config: Optional[ParserConfig] = None,
                 refinement_config: Optional[RefinementConfig] = None,
                 verbose: bool = False,
                 parser: Optional[ReceiptParser] = None):
        """
        Initialize receipt processor.

        Args:
            parser_config: Options for the local parser
            refinement_config: LLM options; refinement is skipped unless
                refinement_config.is_configured
            verbose: Whether to show verbose debugging output
            parser: Prebuilt parser (overrides parser_config)
        """
        self.parser_config = parser_config or ParserConfig()
        self.refinement_config = refinement_config or RefinementConfig(enabled=False)
        self.verbose = verbose
        self.parser = parser or ReceiptParser(self.parser_config)

    @property
    def use_llm(self) -> bool:
        return self.refinement_config.is_configured

    def process_text(self, text: str, source: str = "<text>") -> ProcessedReceipt:
        """Parse one transcript and refine it if an LLM is configured."""
        local = self.parser.parse(text)

        refined = None
        refinement_error = None
        if self.use_llm:
            try:
                refined = refine_receipt(text, self.refinement_config)
            except RefinementError as e:
                refinement_error = str(e)
                print(f"  [WARN] {e}; using local parse")

        result = ProcessedReceipt(source=source, local=local, refined=refined,
                                  refinement_error=refinement_error)
        if self.verbose:
            self._print_debug(result)
        return result

    def process_file(self, path: Path) -> ProcessedReceipt:
        """OCR a receipt file and process its transcript."""
        print(f"[INFO] Processing {path.name}")
        text = transcript_from_file(path)
        return self.process_text(text, source=path.name)

    def discover_files(self, paths: Iterable[Path]) -> List[Path]:
        """Expand directories into the supported receipt files they contain."""
        files = []
        for p in paths:
            if p.is_dir():
                files.extend(sorted(
                    f for f in p.iterdir()
                    if f.is_file() and f.suffix.lower() in SUPPORTED_EXTS
                ))
            elif p.suffix.lower() in SUPPORTED_EXTS:
                files.append(p)
            else:
                print(f"[WARN] Skipping {p.name} (unsupported file type)")
        return files

    def process_paths(self, paths: Iterable[Path]) -> List[ProcessedReceipt]:
        """
        Process every receipt file under the given paths.

        A file that fails (unreadable, no text) is reported and skipped.
        """
        files = self.discover_files(paths)
        if not files:
            print("No receipt files found.")
            return []

        results = []
        for file_path in files:
            try:
                results.append(self.process_file(file_path))
            except (ReceiptParserError, OSError) as e:
                print(f"[ERROR] Failed {file_path.name}: {e}")
        return results

    def _print_debug(self, result: ProcessedReceipt):
        local = result.local
        lines = split_lines(local.raw_text)
        _, time = extract_date_and_time(local.raw_text, self.parser.date_detector)
        subtotal = extract_subtotal(lines)

        print(f"  [DEBUG] Vendor: '{local.vendor or '(none)'}'")
        print(f"  [DEBUG] Date: {local.date or '(none)'}  Time: {time or '(none)'}")
        print(f"  [DEBUG] Subtotal: {money_fmt(subtotal) or '(none)'}")
        print(f"  [DEBUG] Total: {money_fmt(local.total) or '(none)'}")
        if self.parser_config.extract_tax:
            print(f"  [DEBUG] Tax: {money_fmt(local.tax) or '(none)'}")
        if result.refined is not None:
            refined = result.refined
            print(f"  [DEBUG] LLM: vendor='{refined.vendor or '(none)'}' date={refined.date or '(none)'} "
                  f"total={money_fmt(refined.total) or '(none)'} currency={refined.currency or '(none)'}")
        if not local.vendor:
            print(f"  [DEBUG] First 5 lines of OCR text:")
            for i, line in enumerate(lines[:5], 1):
                print(f"    {i}: {line[:80]}")
        if local.total is None:
            print(f"  [WARN] Could not extract total. Check OCR quality.")
