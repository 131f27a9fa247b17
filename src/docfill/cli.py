"""
Command-line interface for docfill.

Usage:
    docfill extract lease.txt [--json]
    docfill fill lease.txt --values values.json -o lease.pdf [--page-size a4] [--margin 54] [-v]

Values files are JSON objects keyed by field key ("tenant_name") or label
("Tenant Name"). ISO dates ("2026-10-18") are formatted with --date-format.
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from PIL import Image

from docfill import __version__
from docfill.builder import FillConfig, FillError, LayoutConfig, fill_document
from docfill.builder.layout.composer import DEFAULT_DATE_FORMAT
from docfill.builder.layout.config import DEFAULT_MARGIN_PT, PAGE_SIZES
from docfill.core.errors import InvalidInput
from docfill.extractor import extract_fields, read_document_text

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docfill",
        description="Detect fillable fields in document templates and render filled PDFs",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    extract_p = sub.add_parser("extract", help="List the fields found in a template")
    extract_p.add_argument("file", type=Path, help="Template (.txt, .md or .pdf)")
    extract_p.add_argument("--json", action="store_true", help="Print fields as JSON")

    fill_p = sub.add_parser("fill", help="Fill a template and render it to PDF")
    fill_p.add_argument("file", type=Path, help="Template (.txt, .md or .pdf)")
    fill_p.add_argument("--values", type=Path, help="JSON file of field values")
    fill_p.add_argument("-o", "--output", type=Path, required=True, help="Output PDF path")
    fill_p.add_argument(
        "--page-size", default="letter", choices=sorted(PAGE_SIZES), help="Page size (default: letter)"
    )
    fill_p.add_argument(
        "--margin", type=float, default=DEFAULT_MARGIN_PT, help="Page margin in points (default: 72)"
    )
    fill_p.add_argument(
        "--date-format", default=DEFAULT_DATE_FORMAT, help="strftime format for ISO date values"
    )
    fill_p.add_argument(
        "--signature-image",
        action="append",
        default=[],
        metavar="KEY=IMAGE",
        help="Signature image for a signature field (repeatable)",
    )
    fill_p.add_argument(
        "--strict", action="store_true", help="Exit with status 2 when required fields are missing"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "extract":
            return _cmd_extract(args)
        return _cmd_fill(args)
    except (InvalidInput, FillError, FileNotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def _cmd_extract(args: argparse.Namespace) -> int:
    text = read_document_text(args.file)
    result = extract_fields(text)

    if args.json:
        payload = {
            "fields": [f.to_dict() for f in result.fields],
            "warnings": [w.message for w in result.warnings],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for f in result.fields:
        flag = "" if f.required else " (optional)"
        print(f"{f.start:>6}-{f.end:<6} {f.kind.value:<14} {f.key or '-':<24} {f.label}{flag}")
    for w in result.warnings:
        print(f"warning: {w.message}", file=sys.stderr)
    print(f"{result.field_count} fields")
    return 0


def _cmd_fill(args: argparse.Namespace) -> int:
    text = read_document_text(args.file)
    values = _load_values(args.values) if args.values else {}
    values.update(_load_signature_images(args.signature_image))

    config = FillConfig(
        layout=LayoutConfig.for_page_size(args.page_size, args.margin),
        date_format=args.date_format,
        output_path=args.output,
    )
    result = fill_document(text, values, config)

    for message in result.warnings:
        print(f"warning: {message}", file=sys.stderr)
    if result.missing_fields:
        print(f"missing: {', '.join(result.missing_fields)}", file=sys.stderr)

    print(f"Wrote {result.page_count} pages to {result.output_path} (sha256 {result.digest})")
    if args.strict and result.missing_fields:
        return 2
    return 0


def _load_values(path: Path) -> Dict[str, Any]:
    """Read a JSON object of values, turning ISO date strings into dates."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Values file {path} is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise InvalidInput(f"Values file {path} must contain a JSON object")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, str) and _ISO_DATE.match(value):
            try:
                value = date.fromisoformat(value)
            except ValueError:
                logger.debug(f"Value for {key!r} looks like a date but is not one: {value}")
        values[key] = value
    return values


def _load_signature_images(options: List[str]) -> Dict[str, Image.Image]:
    images: Dict[str, Image.Image] = {}
    for option in options:
        key, sep, path = option.partition("=")
        if not sep or not key or not path:
            raise InvalidInput(f"--signature-image expects KEY=IMAGE, got {option!r}")
        try:
            with Image.open(path) as img:
                img.load()
                images[key] = img.copy()
        except OSError as e:
            raise InvalidInput(f"Cannot read signature image {path}: {e}") from e
    return images


if __name__ == "__main__":
    sys.exit(main())
