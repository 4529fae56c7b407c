from __future__ import annotations

from pdf_models import PdfToken, TokenKind
from pdf_tokenize import tokenize

# Net horizontal gap (thousandths of a text-space unit) above which two glyphs
# are treated as sitting in different table columns rather than as letter
# spacing. Tuned against the generator that produces the court reports;
# documents from another producer may need a different value.
KERNING_THRESHOLD = 500

LINE_BREAK = ""


def _to_float(value: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        return None


def _show_string(text: str, tc: float, threshold: float) -> list[str]:
    if abs(tc * 1000) > threshold:
        return list(text)
    return [text]


def process_tj_array(
    children: tuple[PdfToken, ...] | list[PdfToken],
    tc_thousandths: float,
    threshold: float = KERNING_THRESHOLD,
) -> list[str]:
    """Split the strings of a TJ array into fragments at column-sized gaps.

    The gap in front of a glyph is the character spacing carried over from the
    previous glyph (``tc_thousandths``) minus any TJ displacements in between.
    A displacement roughly equal to the character spacing cancels it, so two
    glyphs can stay together even when both numbers are individually large.
    """
    items: list[str] = []
    current = ""
    gap = 0.0
    is_first = True

    for child in children:
        if child.kind is TokenKind.STRING:
            for ch in child.value:
                if not is_first and current and abs(gap) > threshold:
                    items.append(current)
                    current = ""
                current += ch
                is_first = False
                gap = tc_thousandths
        elif child.kind is TokenKind.NUMBER:
            displacement = _to_float(child.value)
            if displacement is None:
                continue
            gap -= displacement

    if current:
        items.append(current)
    return items


def extract_text_items(
    stream: bytes | str,
    kerning_threshold: float = KERNING_THRESHOLD,
) -> list[str]:
    """Return the text fragments of a content stream in drawing order.

    Empty strings mark line breaks: a TD/Td with a non-zero vertical offset
    and every Tm. Any other operator only discards the pending operands.
    """
    items: list[str] = []
    operands: list[PdfToken] = []
    tc = 0.0

    for tok in tokenize(stream):
        if tok.kind is not TokenKind.OPERATOR:
            operands.append(tok)
            continue

        op = tok.value
        last = operands[-1] if operands else None

        if op == "Tj":
            if last is not None and last.kind is TokenKind.STRING:
                items.extend(_show_string(last.value, tc, kerning_threshold))

        elif op == "TJ":
            if last is not None and last.kind is TokenKind.ARRAY:
                items.extend(process_tj_array(last.children, tc * 1000, kerning_threshold))

        elif op in ("TD", "Td"):
            if len(operands) >= 2:
                ty = _to_float(operands[-1].value)
                if ty is not None and ty != 0:
                    items.append(LINE_BREAK)

        elif op == "Tm":
            items.append(LINE_BREAK)

        elif op == "Tc":
            if last is not None:
                value = _to_float(last.value)
                if value is not None:
                    tc = value

        operands.clear()

    return items


def group_into_lines(items: list[str]) -> list[list[str]]:
    """Split fragments into lines at line-break markers.

    Fragments are stripped; anything blank afterwards acts as a break. Runs of
    breaks collapse and no empty line is ever produced.
    """
    lines: list[list[str]] = []
    current: list[str] = []
    for item in items:
        text = item.strip()
        if not text:
            if current:
                lines.append(current)
                current = []
        else:
            current.append(text)
    if current:
        lines.append(current)
    return lines


def contains_filings(items: list[str]) -> bool:
    """True when the page carries table data (cover pages have no Filings label)."""
    return "Filings" in items
