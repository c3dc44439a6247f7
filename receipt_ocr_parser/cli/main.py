#!/usr/bin/env python3
"""
Main CLI entrypoint for the receipt OCR parser.
"""

import argparse
import os
import sys
from pathlib import Path

from receipt_ocr_parser.core.config import PROVIDERS, ParserConfig, RefinementConfig
from receipt_ocr_parser.core.errors import ConfigurationError
from receipt_ocr_parser.core.ocr import has_enough_text
from receipt_ocr_parser.core.processor import ReceiptProcessor
from receipt_ocr_parser.core.reporting import write_csv, write_json, format_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract vendor, date and total from receipt images, PDFs or OCR transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse a folder of receipt scans, local heuristics only
  receipt-parse ./receipts --no-llm

  # Parse an OCR transcript from stdin
  cat receipt.txt | receipt-parse -

  # Refine with Anthropic and write CSV + JSON reports
  receipt-parse ./receipts --llm-provider anthropic --csv out.csv --json out.json
        """
    )
    parser.add_argument("paths", nargs="+",
                        help="Receipt files or folders (images, PDFs, .txt transcripts); '-' reads stdin")
    parser.add_argument("--csv", help="Write results to this CSV file")
    parser.add_argument("--json", help="Write results to this JSON file")
    parser.add_argument("--extract-tax", action="store_true",
                        help="Also detect the tax line in the local parse")
    parser.add_argument("--ner-model",
                        help="spaCy model for the vendor fallback (e.g. en_core_web_sm)")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show detailed parsing information for debugging")

    # LLM configuration
    parser.add_argument("--llm-provider", choices=PROVIDERS,
                        help="LLM provider to use (default: openai, or LLM_PROVIDER env var)")
    parser.add_argument("--llm-model",
                        help="LLM model to use (uses provider default if not specified, or LLM_MODEL env var)")
    parser.add_argument("--no-llm", action="store_true",
                        help="Disable LLM refinement, use only local parsing")
    return parser


def main(argv=None):
    """Main CLI entrypoint."""
    args = build_parser().parse_args(argv)

    try:
        refinement_config = RefinementConfig.from_env(
            provider=args.llm_provider,
            model=args.llm_model,
            enabled=not args.no_llm,
        )
    except ConfigurationError as e:
        print(f"[ERROR] {e}")
        return 1

    parser_config = ParserConfig(extract_tax=args.extract_tax, ner_model=args.ner_model)

    # Show LLM configuration
    if refinement_config.is_configured:
        model_info = refinement_config.model or "default"
        env_source = " [from LLM_PROVIDER env]" if not args.llm_provider and os.getenv("LLM_PROVIDER") else ""
        print(f"[INFO] LLM: {refinement_config.provider} ({model_info}){env_source}")
    elif not args.no_llm:
        print(f"[INFO] No API key for {refinement_config.provider}; using local parsing only")

    processor = ReceiptProcessor(
        parser_config=parser_config,
        refinement_config=refinement_config,
        verbose=args.verbose,
    )

    results = []
    file_paths = []
    for p in args.paths:
        if p == "-":
            text = sys.stdin.read()
            if has_enough_text(text):
                results.append(processor.process_text(text, source="<stdin>"))
            else:
                print("[WARN] No text found on stdin")
        else:
            file_paths.append(Path(p))
    if file_paths:
        results.extend(processor.process_paths(file_paths))

    if not results:
        return 0

    for r in results:
        print(f"[OK] {r.source}: {format_summary(r.display)}")

    rows = [r.to_row() for r in results]
    if args.csv:
        write_csv(rows, Path(args.csv))
        print(f"[OK] Wrote {args.csv}")
    if args.json:
        write_json(rows, Path(args.json))
        print(f"[OK] Wrote {args.json}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
