"""
Blit patterns: trimmed glyphs packed into u32 words.

words[0] = (width << 16) | (height << 8) | y_offset
words[1:1 + ceil(width * height / 32)] = 1-bit pixels

Pixels are packed in row-major order (left to right, then top to bottom) with
the glyph's top left pixel in the most significant bit of words[1]. When
width * height is not a multiple of 32 the last word is padded with zeros in
its least significant bits.

Bit values are an XOR mask: 1 inverts the background pixel, 0 keeps it.
"""

from dataclasses import dataclass

from charmap import CharSpec


HEADER_FIELD_MAX = 0xFF


class PatternTooLarge(ValueError):
    """A trimmed glyph doesn't fit the 8-bit fields of the pattern header."""


def pattern_size(matrix: list[list[int]]) -> tuple[int, int]:
    """Return (width, height) of a pixel matrix, (0, 0) when it is empty."""
    if not matrix or not matrix[0]:
        return 0, 0
    return len(matrix[0]), len(matrix)


def check_pattern_fits(matrix: list[list[int]], y_offset: int, where: str = "glyph"):
    width, height = pattern_size(matrix)
    for name, value in (("width", width), ("height", height), ("y_offset", y_offset)):
        if value > HEADER_FIELD_MAX:
            raise PatternTooLarge(
                f"{where}: trimmed {name} {value} exceeds {HEADER_FIELD_MAX}px header limit"
            )


def pack_pattern(matrix: list[list[int]], y_offset: int) -> list[int]:
    """Pack a trimmed pixel matrix and its y-offset into header + data words."""
    width, height = pattern_size(matrix)
    words = [(width << 16) | (height << 8) | y_offset]
    buf_word = 0
    bits = 0
    for row in matrix[:height]:
        for px in row:
            buf_word = (buf_word << 1) | (1 if px else 0)
            bits += 1
            if bits == 32:
                words.append(buf_word)
                buf_word = 0
                bits = 0
    if bits:
        words.append(buf_word << (32 - bits))
    return words


def unpack_pattern(words: list[int]) -> tuple[list[list[int]], int]:
    """Inverse of pack_pattern: return (matrix, y_offset)."""
    header = words[0]
    width = (header >> 16) & 0xFF
    height = (header >> 8) & 0xFF
    y_offset = header & 0xFF
    if len(words) < 1 + data_word_count(words):
        raise ValueError(
            f"Pattern {width}x{height} needs {data_word_count(words)} data words, got {len(words) - 1}"
        )
    matrix = []
    for y in range(height):
        row = []
        for x in range(width):
            i = y * width + x
            word = words[1 + i // 32]
            row.append((word >> (31 - i % 32)) & 1)
        matrix.append(row)
    return matrix, y_offset


def data_word_count(words: list[int]) -> int:
    header = words[0]
    width = (header >> 16) & 0xFF
    height = (header >> 8) & 0xFF
    return (width * height + 31) // 32


@dataclass
class BlitPattern:
    """Packed pattern words for the glyph of one character spec."""
    words: list[int]
    char_spec: CharSpec

    @property
    def width(self) -> int:
        return (self.words[0] >> 16) & 0xFF

    @property
    def height(self) -> int:
        return (self.words[0] >> 8) & 0xFF

    @property
    def y_offset(self) -> int:
        return self.words[0] & 0xFF


def format_words(words: list[int], per_line: int = 8, indent: str = "    ") -> str:
    """Format words as lines of comma-terminated 0x%08x literals."""
    lines = []
    for start in range(0, len(words), per_line):
        chunk = words[start:start + per_line]
        lines.append(indent + ", ".join(f"0x{word:08x}" for word in chunk) + ",")
    return "\n".join(lines)
