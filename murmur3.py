"""
Murmur3 hash of grapheme clusters, one 32-bit block per codepoint.

Generated lookup tables are indexed by these hashes, so the renderer has to
compute bit-for-bit the same values.
"""

MASK32 = 0xFFFFFFFF

LENGTH_MODES = ("codepoints", "utf8")


def _rotl32(x: int, r: int) -> int:
    return ((x << r) | (x >> (32 - r))) & MASK32


def murmur3(cluster: str, seed: int, length: str = "codepoints") -> int:
    """
    Return the 32-bit Murmur3 hash of a grapheme cluster.

    Each codepoint is mixed in as its own u32 block. The finalizer XORs in the
    key length: the codepoint count by default, or the UTF-8 byte count when
    length="utf8" (what the blitstr Rust renderer feeds in).
    """
    if length not in LENGTH_MODES:
        raise ValueError(f"Unknown murmur3 length mode: {length!r}")
    h = seed & MASK32
    for c in cluster:
        k = (ord(c) * 0xCC9E2D51) & MASK32
        k = _rotl32(k, 15)
        k = (k * 0x1B873593) & MASK32
        h ^= k
        h = _rotl32(h, 13)
        h = (h * 5 + 0xE6546B64) & MASK32
    if length == "utf8":
        h ^= len(cluster.encode("utf-8")) & MASK32
    else:
        h ^= len(cluster) & MASK32
    # Finalize with avalanche
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & MASK32
    h ^= h >> 16
    return h
