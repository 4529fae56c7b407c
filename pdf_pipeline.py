from __future__ import annotations

import logging
import warnings
from pathlib import Path

import pdfplumber
from pdfminer.pdftypes import resolve1, stream_value
from pdfminer.psparser import PSException
from pdfplumber.utils.exceptions import PdfminerException

from pdf_extract import KERNING_THRESHOLD, contains_filings, extract_text_items
from pdf_models import DocumentResult, PageResult
from pdf_table import PageParseError, parse_page

logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", module="pdfminer")

logger = logging.getLogger(__name__)

# Errors raised for files that are missing, unreadable or not valid PDFs.
CONTAINER_ERRORS = (OSError, PdfminerException, PSException)


def page_content_stream(page: pdfplumber.page.Page) -> bytes:
    """Return the decompressed content stream of *page*.

    A page may split its drawing operators over several streams; they are
    joined with newlines so no token straddles the boundary.
    """
    contents = page.page_obj.contents or []
    parts = [stream_value(resolve1(obj)).get_data() for obj in contents]
    return b"\n".join(parts)


def extract_content_streams(pdf_path: str | Path) -> list[bytes]:
    """One content stream per page, in page order. Cover pages are included."""
    with pdfplumber.open(pdf_path) as pdf:
        return [page_content_stream(page) for page in pdf.pages]


def parse_streams(
    streams: list[bytes],
    kerning_threshold: float = KERNING_THRESHOLD,
) -> DocumentResult:
    """Parse every data page; a failure on one page never stops the others."""
    doc = DocumentResult(pages=len(streams))
    for page_number, stream in enumerate(streams, start=1):
        items = extract_text_items(stream, kerning_threshold)
        if not contains_filings(items):
            logger.debug("page %d: no table data, skipped", page_number)
            continue
        try:
            stats = parse_page(items)
        except PageParseError as exc:
            logger.info("page %d: %s", page_number, exc)
            doc.results.append(PageResult(page_number=page_number, error=str(exc)))
            continue
        doc.results.append(PageResult(page_number=page_number, stats=stats))
    return doc


def parse_document(
    pdf_path: str | Path,
    kerning_threshold: float = KERNING_THRESHOLD,
) -> DocumentResult:
    return parse_streams(extract_content_streams(pdf_path), kerning_threshold)
