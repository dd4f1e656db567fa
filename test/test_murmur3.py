import pytest

from murmur3 import murmur3


def test_single_ascii_codepoint():
    assert murmur3("A", 0) == 0x4BCD3197
    assert murmur3("A", 1) == 0x5E1FE798
    assert murmur3("A", 7) == 0x3091DC00


def test_matches_blitstr_renderer_for_ascii():
    # Same values as the Rust renderer's tests for 't'
    assert murmur3("t", 0) == 0x31099644
    assert murmur3("t", 1) == 0xD667FA27


def test_length_counts_codepoints_by_default():
    assert murmur3("\U0001F638", 0) == 0x9295B375
    assert murmur3("\U0001F4FA\uFE0F", 0) == 0x8F674A2A
    assert murmur3("e\u0301", 0) == 0x09D6E132
    assert murmur3("\U0001F3C4\u200D\u2640\uFE0F", 0) == 0xA7944F8D


def test_utf8_length_mode_matches_renderer_tables():
    assert murmur3("\U0001F638", 0, length="utf8") == 0x86E5DD9A
    assert murmur3("\U0001F4FA\uFE0F", 0, length="utf8") == 0x07C5E300
    # "\u00EB" as 65-308 from a generated HASH_BASIC_LATIN table
    assert murmur3("e\u0308", 0, length="utf8") == 0x0323CD4F
    assert murmur3("a", 0, length="utf8") == 0x2B038801


def test_modes_agree_on_ascii():
    for cluster in ("a", "Z", "~", " "):
        assert murmur3(cluster, 3) == murmur3(cluster, 3, length="utf8")


def test_empty_cluster():
    assert murmur3("", 0) == 0


def test_deterministic_and_32_bit():
    for seed in (0, 1, 0xFFFFFFFF):
        h = murmur3("\u00E9", seed)
        assert h == murmur3("\u00E9", seed)
        assert 0 <= h <= 0xFFFFFFFF


def test_single_codepoint_change_changes_hash():
    assert murmur3("\u00E9", 0) == 0xC8A87E93
    assert murmur3("\u00C9", 0) == 0xDE339F11
    assert murmur3("E\u0301", 0) == 0xF860B923
    assert murmur3("e\u0301", 0) != murmur3("E\u0301", 0)


def test_unknown_length_mode():
    with pytest.raises(ValueError, match="length mode"):
        murmur3("a", 0, length="bytes")
