"""CLI entry point for receipt extraction."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import load_config
from .extractor import NoTextFoundError, ReceiptExtractor
from .items import clean_item_name
from .models import ReceiptSummary


def main(argv: list[str] | None = None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(
        prog="pantry-receipt",
        description="Extract purchased items from grocery receipt OCR text",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to a TOML configuration file",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # extract
    extract_parser = sub.add_parser("extract", help="Extract items from a transcript")
    extract_parser.add_argument(
        "file", nargs="?", default="-",
        help="Transcript file (default: read from stdin)",
    )
    extract_parser.add_argument("--json", action="store_true", help="Output JSON")
    extract_parser.add_argument(
        "--ocr-confidence", type=float, default=None, metavar="X",
        help="Confidence reported by the OCR step (0.0-1.0)",
    )

    # categorize
    categorize_parser = sub.add_parser(
        "categorize", help="Show cleaned name and category for item names"
    )
    categorize_parser.add_argument("names", nargs="+", help="Item names")

    # categories
    sub.add_parser("categories", help="List categories and their keywords")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose)
    config = load_config(args.config)
    extractor = ReceiptExtractor.from_config(config)

    match args.command:
        case "extract":
            _cmd_extract(extractor, args)
        case "categorize":
            _cmd_categorize(extractor, args)
        case "categories":
            _cmd_categories(extractor)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _read_transcript(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _cmd_extract(extractor: ReceiptExtractor, args) -> None:
    try:
        text = _read_transcript(args.file)
    except OSError as e:
        print(f"Cannot read transcript: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        summary = extractor.extract(text, ocr_confidence=args.ocr_confidence)
    except NoTextFoundError as e:
        print(f"Extraction failed: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(summary.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(_format_summary(summary))


def _format_summary(summary: ReceiptSummary) -> str:
    lines = [
        f"🏪 {summary.store_name}",
        f"   Date: {summary.purchase_date.isoformat()}",
        "",
    ]
    if not summary.items:
        lines.append("No items found.")
    else:
        lines.append(f"🛒 Items ({summary.item_count}):")
        for item in summary.items:
            mark = " *" if item.is_estimated else ""
            lines.append(
                f"  {item.name:<28} {item.price:>7.2f}{mark:<2}  "
                f"[{item.category}] {item.confidence:.0%}"
            )
        if summary.estimated_items:
            lines.append("  (* estimated price, please confirm)")

    lines.append("")
    if summary.subtotal_amount:
        lines.append(f"   Subtotal: {summary.subtotal_amount:.2f}")
    lines.append(f"   Tax:      {summary.tax_amount:.2f}")
    lines.append(f"   Total:    {summary.total_amount:.2f}")
    return "\n".join(lines)


def _cmd_categorize(extractor: ReceiptExtractor, args) -> None:
    for raw in args.names:
        name = clean_item_name(raw)
        print(f"  {name:<28} [{extractor.rules.categorize(name)}]")


def _cmd_categories(extractor: ReceiptExtractor) -> None:
    for category, keywords in extractor.rules.category_keywords:
        print(f"{category}: {', '.join(keywords)}")
    print("other: (anything unmatched)")
