from __future__ import annotations

import re

_HEX_TOKEN_RE = re.compile(r"<([^<>]*)>")
_BFRANGE_ENTRY_RE = re.compile(r"<([^<>]*)>\s*<([^<>]*)>\s*(<[^<>]*>|\[[^\]]*\])")
_WHITESPACE_RE = re.compile(r"\s+")


def _blocks(text: str, begin: str, end: str) -> list[str]:
    blocks: list[str] = []
    pos = 0
    while True:
        start = text.find(begin, pos)
        if start < 0:
            break
        start += len(begin)
        stop = text.find(end, start)
        if stop < 0:
            break
        blocks.append(text[start:stop])
        pos = stop + len(end)
    return blocks


def _decode_uint16(hex_text: str) -> int:
    try:
        raw = bytes.fromhex(_WHITESPACE_RE.sub("", hex_text))
    except ValueError:
        return 0
    if len(raw) < 2:
        return 0
    return int.from_bytes(raw[:2], "big")


def parse_cmap(data: bytes | str) -> dict[int, str]:
    """Build a glyph-id to character map from a ToUnicode CMap stream.

    ``bfchar`` entries map one 2-byte glyph id to one code point; ``bfrange``
    entries map ``lo..hi`` inclusive, either counting up from a start code
    point or taking successive entries from an array.
    """
    text = data.decode("latin-1") if isinstance(data, (bytes, bytearray)) else data
    glyph_map: dict[int, str] = {}

    for block in _blocks(text, "beginbfchar", "endbfchar"):
        tokens = _HEX_TOKEN_RE.findall(block)
        for src, dst in zip(tokens[0::2], tokens[1::2]):
            glyph_map[_decode_uint16(src)] = chr(_decode_uint16(dst))

    for block in _blocks(text, "beginbfrange", "endbfrange"):
        for lo_hex, hi_hex, dst in _BFRANGE_ENTRY_RE.findall(block):
            lo = _decode_uint16(lo_hex)
            hi = _decode_uint16(hi_hex)
            if dst.startswith("["):
                targets = _HEX_TOKEN_RE.findall(dst)
                for offset, target in enumerate(targets[: hi - lo + 1]):
                    glyph_map[lo + offset] = chr(_decode_uint16(target))
            else:
                start = _decode_uint16(dst[1:-1])
                for gid in range(lo, hi + 1):
                    glyph_map[gid] = chr(start + gid - lo)

    return glyph_map


def decode_hex_string(hex_str: str, glyph_map: dict[int, str]) -> str:
    """Decode 2-byte big-endian glyph ids through *glyph_map*.

    Ids missing from the map are dropped; malformed hex decodes to "".
    """
    try:
        raw = bytes.fromhex(_WHITESPACE_RE.sub("", hex_str))
    except ValueError:
        return ""
    chars = []
    for i in range(0, len(raw) - 1, 2):
        gid = int.from_bytes(raw[i:i + 2], "big")
        if gid in glyph_map:
            chars.append(glyph_map[gid])
    return "".join(chars)
