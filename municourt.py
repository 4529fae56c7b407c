"""Extract municipal court statistics from NJ court PDF reports.

Pipeline per page:
  1. extract_text_items  – lex the content stream and split text into
                           fragments, using TJ kerning and character spacing
                           to find column boundaries
  2. group_into_lines    – regroup fragments into lines at line-break markers
  3. parse_page          – walk the fixed eight-section table, repairing
                           numbers split at their thousands separator

Records are written as JSON next to each input PDF unless --json is given.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pdf_extract import KERNING_THRESHOLD
from pdf_pipeline import CONTAINER_ERRORS, parse_document


def parse_pdf(pdf_path: Path, json_out: Path | None = None, kerning_threshold: float = KERNING_THRESHOLD) -> bool:
    """Parse one PDF and write its records. Returns False if the file could not be read."""
    if json_out is None:
        json_out = pdf_path.with_suffix(".json")

    try:
        doc = parse_document(pdf_path, kerning_threshold)
    except CONTAINER_ERRORS as exc:
        print(f"{pdf_path.name}: error extracting PDF streams: {exc}", file=sys.stderr)
        return False

    payload = [stats.to_dict() for stats in doc.records]
    try:
        json_out.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        print(f"{pdf_path.name}: error writing JSON: {exc}", file=sys.stderr)
        return False

    errors = doc.errors
    print(
        f"{pdf_path.name}: {doc.pages} pages, {len(doc.records)} successful, "
        f"{len(errors)} errors → {json_out.name}",
        file=sys.stderr,
    )
    for err in errors:
        print(f"  {err}", file=sys.stderr)
    return True


def run(input_path: str, json_out: str | None = None, kerning_threshold: float = KERNING_THRESHOLD) -> int:
    path = Path(input_path)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    if path.is_dir():
        pdfs = sorted(path.glob("*.pdf"))
        if not pdfs:
            print(f"no PDF files found in {path}", file=sys.stderr)
            return 1
        for pdf in pdfs:
            parse_pdf(pdf, kerning_threshold=kerning_threshold)
        return 0

    out = Path(json_out) if json_out else None
    return 0 if parse_pdf(path, out, kerning_threshold) else 1


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse municipal court statistics PDFs into JSON records.",
    )
    parser.add_argument("input", help="Path to a PDF file or a directory of PDFs")
    parser.add_argument(
        "--json",
        metavar="PATH",
        help="Output JSON file (single file mode only; default: next to the PDF)",
    )
    parser.add_argument(
        "--kerning-threshold",
        type=float, default=KERNING_THRESHOLD, metavar="UNITS",
        help=f"Gap in thousandths of a text unit that separates columns (default: {KERNING_THRESHOLD})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log skipped pages, page errors and truncated rows",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run(args.input, json_out=args.json, kerning_threshold=args.kerning_threshold)


if __name__ == "__main__":
    sys.exit(main())
