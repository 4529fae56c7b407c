"""Best-effort lexer for PDF page content streams.

Only the token kinds the text extractor needs are kept: literal strings,
numbers, operators and arrays of strings/numbers. Hex strings, dictionaries
and name objects are consumed and dropped. Nothing here raises; bytes that do
not form a recognisable token are skipped.
"""

from __future__ import annotations

from pdf_models import PdfToken, TokenKind

_WHITESPACE = frozenset(" \t\r\n\f\x00")
_DELIMITERS = _WHITESPACE | frozenset("()<>[]{}/%")
_NUMBER_START = frozenset("+-.0123456789")
_NUMBER_BODY = frozenset(".0123456789")
_OCTAL = frozenset("01234567")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "(": "(",
    ")": ")",
    "\\": "\\",
}

_ARRAY_CHILD_KINDS = (TokenKind.STRING, TokenKind.NUMBER)


def tokenize(data: bytes | str) -> list[PdfToken]:
    """Split a content stream into tokens, in stream order."""
    if isinstance(data, (bytes, bytearray)):
        s = bytes(data).decode("latin-1")
    else:
        s = data

    # stack[0] holds top-level tokens, deeper entries the children of open arrays
    stack: list[list[PdfToken]] = [[]]
    pos = 0
    n = len(s)

    while pos < n:
        ch = s[pos]

        if ch in _WHITESPACE:
            pos += 1
            continue

        if ch == "%":
            while pos < n and s[pos] not in "\r\n":
                pos += 1
            continue

        if ch == "(":
            value, pos = _read_string(s, pos)
            stack[-1].append(PdfToken(TokenKind.STRING, value))
            continue

        if ch == "[":
            stack.append([])
            pos += 1
            continue

        if ch == "]":
            pos += 1
            if len(stack) > 1:
                _close_array(stack)
            continue

        if ch == "<":
            pos = _skip_angle_block(s, pos)
            continue

        if ch == "/":
            pos += 1
            while pos < n and s[pos] not in _DELIMITERS:
                pos += 1
            continue

        if ch in _NUMBER_START:
            start = pos
            if ch in "+-":
                pos += 1
            while pos < n and s[pos] in _NUMBER_BODY:
                pos += 1
            stack[-1].append(PdfToken(TokenKind.NUMBER, s[start:pos]))
            continue

        if ch in _DELIMITERS:
            # stray ')', '>', '{', '}'
            pos += 1
            continue

        start = pos
        while pos < n and s[pos] not in _DELIMITERS:
            pos += 1
        stack[-1].append(PdfToken(TokenKind.OPERATOR, s[start:pos]))

    # arrays left open at the end of the stream are closed implicitly
    while len(stack) > 1:
        _close_array(stack)
    return stack[0]


def _close_array(stack: list[list[PdfToken]]) -> None:
    children = stack.pop()
    if len(stack) > 1:
        # nested arrays are not kept as children
        return
    kept = tuple(c for c in children if c.kind in _ARRAY_CHILD_KINDS)
    stack[-1].append(PdfToken(TokenKind.ARRAY, children=kept))


def _read_string(s: str, pos: int) -> tuple[str, int]:
    """Read a literal string starting at the opening parenthesis at s[pos].

    Returns the decoded value and the index just past the closing parenthesis.
    An unterminated string runs to the end of the stream.
    """
    out: list[str] = []
    i = pos + 1
    n = len(s)
    depth = 1

    while i < n:
        ch = s[i]
        if ch == "\\":
            i += 1
            if i >= n:
                break
            nxt = s[i]
            if nxt in _SIMPLE_ESCAPES:
                out.append(_SIMPLE_ESCAPES[nxt])
            elif nxt in _OCTAL:
                digits = nxt
                while len(digits) < 3 and i + 1 < n and s[i + 1] in _OCTAL:
                    i += 1
                    digits += s[i]
                out.append(chr(int(digits, 8) & 0xFF))
            elif nxt == "\r":
                # line continuation, \r\n counts as one end-of-line
                if i + 1 < n and s[i + 1] == "\n":
                    i += 1
            elif nxt == "\n":
                pass
            else:
                out.append(nxt)
        elif ch == "(":
            depth += 1
            out.append(ch)
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return "".join(out), i + 1
            out.append(ch)
        else:
            out.append(ch)
        i += 1

    return "".join(out), n


def _skip_angle_block(s: str, pos: int) -> int:
    """Skip a hex string or a (possibly nested) dictionary starting at s[pos]."""
    n = len(s)
    i = pos + 1
    depth = 1
    while i < n and depth > 0:
        if s[i] == "<":
            depth += 1
        elif s[i] == ">":
            depth -= 1
        i += 1
    return i
