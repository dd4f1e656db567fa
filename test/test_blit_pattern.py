import random

import pytest

from blit_pattern import (
    BlitPattern,
    PatternTooLarge,
    check_pattern_fits,
    format_words,
    pack_pattern,
    unpack_pattern,
)
from charmap import CharSpec


def test_pack_2x2():
    words = pack_pattern([[1, 0], [0, 1]], 1)
    assert words == [0x00020201, 0x90000000]


def test_pack_empty_matrix_has_no_data_words():
    assert pack_pattern([], 4) == [0x00000004]
    assert pack_pattern([[], []], 0) == [0x00000000]


def test_pack_exactly_32_pixels():
    matrix = [[1] * 8 for _ in range(4)]
    assert pack_pattern(matrix, 0) == [0x00080400, 0xFFFFFFFF]


def test_pack_pads_final_word(bitmap):
    # 33 pixels: one full word, then one bit at the top of the second word
    matrix = bitmap(["#" * 11, "." * 11, "." * 10 + "#"])
    assert pack_pattern(matrix, 2) == [0x000B0302, 0xFFE00000, 0x80000000]


def test_pack_row_major_msb_first(bitmap):
    matrix = bitmap(["#...", ".#..", "..#.", "...#"])
    assert pack_pattern(matrix, 0) == [0x00040400, 0x84210000]


def test_unpack_round_trip():
    rng = random.Random(3)
    for width, height in ((1, 1), (3, 5), (8, 4), (7, 9), (33, 2), (255, 3)):
        matrix = [[rng.randint(0, 1) for _ in range(width)] for _ in range(height)]
        words = pack_pattern(matrix, 5)
        assert len(words) == 1 + (width * height + 31) // 32
        assert unpack_pattern(words) == (matrix, 5)


def test_unpack_rejects_short_data():
    with pytest.raises(ValueError, match="data words"):
        unpack_pattern([0x00080400])


def test_check_pattern_fits():
    check_pattern_fits([[0] * 255], 255)
    with pytest.raises(PatternTooLarge, match="width 256"):
        check_pattern_fits([[0] * 256], 0)
    with pytest.raises(PatternTooLarge, match="y_offset"):
        check_pattern_fits([[1]], 300)


def test_blit_pattern_header_fields():
    pattern = BlitPattern(pack_pattern([[1, 1, 1]], 7), CharSpec("2d", 0, 13))
    assert (pattern.width, pattern.height, pattern.y_offset) == (3, 1, 7)


def test_format_words():
    words = list(range(10))
    text = format_words(words, per_line=8)
    lines = text.split("\n")
    assert len(lines) == 2
    assert lines[0].startswith("    0x00000000, 0x00000001,")
    assert lines[1] == "    0x00000008, 0x00000009,"
