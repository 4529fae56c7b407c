from __future__ import annotations

import zlib
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


def build_pdf(page_streams: list[list[bytes]], compress: bool = True) -> bytes:
    """Assemble a minimal PDF whose pages draw the given content streams.

    Each page takes a list of streams so a split ``/Contents`` array can be
    exercised.
    """
    objects: list[bytes] = []

    def add(body: bytes) -> int:
        objects.append(body)
        return len(objects)

    catalog_id = add(b"")
    pages_id = add(b"")
    font_id = add(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")

    page_ids = []
    for streams in page_streams:
        content_ids = []
        for data in streams:
            if compress:
                payload = zlib.compress(data)
                header = b"<< /Length %d /Filter /FlateDecode >>" % len(payload)
            else:
                payload = data
                header = b"<< /Length %d >>" % len(payload)
            content_ids.append(add(header + b"\nstream\n" + payload + b"\nendstream"))
        contents = b" ".join(b"%d 0 R" % i for i in content_ids)
        if len(content_ids) > 1:
            contents = b"[" + contents + b"]"
        page_ids.append(add(
            b"<< /Type /Page /Parent %d 0 R /MediaBox [0 0 612 792] "
            b"/Resources << /Font << /F1 %d 0 R /F2 %d 0 R >> >> /Contents %s >>"
            % (pages_id, font_id, font_id, contents)
        ))

    objects[catalog_id - 1] = b"<< /Type /Catalog /Pages %d 0 R >>" % pages_id
    kids = b" ".join(b"%d 0 R" % i for i in page_ids)
    objects[pages_id - 1] = b"<< /Type /Pages /Kids [%s] /Count %d >>" % (kids, len(page_ids))

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root %d 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1, catalog_id, xref_at,
    )
    return bytes(out)


@pytest.fixture
def absecon_stream() -> bytes:
    return (FIXTURES / "absecon_page.txt").read_bytes()


@pytest.fixture
def cover_stream() -> bytes:
    return (FIXTURES / "cover_page.txt").read_bytes()


@pytest.fixture
def report_pdf(tmp_path, absecon_stream, cover_stream) -> Path:
    """A two-page report: a cover page followed by the ABSECON data page."""
    path = tmp_path / "report.pdf"
    path.write_bytes(build_pdf([[cover_stream], [absecon_stream]]))
    return path
