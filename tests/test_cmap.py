from pdf_cmap import decode_hex_string, parse_cmap

CMAP = b"""/CIDInit /ProcSet findresource begin
12 dict begin
begincmap
1 begincodespacerange
<0000> <FFFF>
endcodespacerange
2 beginbfchar
<0003> <0020>
<0011> <002C>
endbfchar
2 beginbfrange
<0013> <001C> <0030>
<0024> <0026> [<0041> <0042> <0043>]
endbfrange
1 beginbfchar
<0029> <0046>
endbfchar
endcmap
"""


def test_parse_cmap_bfchar_and_bfrange():
    glyph_map = parse_cmap(CMAP)
    assert glyph_map[0x0003] == " "
    assert glyph_map[0x0011] == ","
    assert glyph_map[0x0029] == "F"
    assert [glyph_map[g] for g in range(0x0013, 0x001D)] == list("0123456789")
    assert [glyph_map[0x24], glyph_map[0x25], glyph_map[0x26]] == ["A", "B", "C"]
    assert 0x001D not in glyph_map


def test_parse_cmap_without_blocks():
    assert parse_cmap(b"begincmap endcmap") == {}


def test_parse_cmap_unterminated_block_is_ignored():
    assert parse_cmap("beginbfchar <0003> <0020>") == {}


def test_decode_hex_string():
    glyph_map = parse_cmap(CMAP)
    assert decode_hex_string("0014 0011 0013 0013 0013", glyph_map) == "1,000"


def test_decode_hex_string_skips_unknown_glyphs():
    glyph_map = parse_cmap(CMAP)
    assert decode_hex_string("0029FFFF0003\n0014", glyph_map) == "F 1"


def test_decode_hex_string_invalid_hex():
    assert decode_hex_string("00ZZ", {0: "x"}) == ""


def test_decode_hex_string_ignores_trailing_odd_byte():
    assert decode_hex_string("004100", {0x41: "A"}) == "A"
