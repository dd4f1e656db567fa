"""Unicode blocks containing the leading codepoints of supported grapheme clusters."""

from typing import NamedTuple


class UnknownUnicodeBlock(ValueError):
    """A codepoint falls outside every block in KNOWN_BLOCKS."""

    def __init__(self, codepoint: int):
        self.codepoint = codepoint
        super().__init__(
            f"Codepoint U+{codepoint:04X} belongs to an unknown Unicode block "
            f"(add its block to KNOWN_BLOCKS)"
        )


class UBlock(NamedTuple):
    low: int
    high: int
    name: str

    def contains(self, codepoint: int) -> bool:
        return self.low <= codepoint <= self.high

    def __str__(self) -> str:
        return f"{self.low:04X}..{self.high:04X} {self.name}"


# Full list: https://www.unicode.org/Public/UCD/latest/ucd/Blocks.txt
KNOWN_BLOCKS = (
    UBlock(0x0000, 0x007F, "BASIC_LATIN"),                             # Latin, Emoji
    UBlock(0x0080, 0x00FF, "LATIN_1_SUPPLEMENT"),                      # Latin, Emoji
    UBlock(0x0100, 0x017F, "LATIN_EXTENDED_A"),                        # Latin
    UBlock(0x2000, 0x206F, "GENERAL_PUNCTUATION"),                     # Latin, Emoji
    UBlock(0x20A0, 0x20CF, "CURRENCY_SYMBOLS"),                        # Latin
    UBlock(0x2100, 0x214F, "LETTERLIKE_SYMBOLS"),                      # Emoji
    UBlock(0x2190, 0x21FF, "ARROWS"),                                  # Emoji
    UBlock(0x2300, 0x23FF, "MISCELLANEOUS_TECHNICAL"),                 # Emoji
    UBlock(0x2460, 0x24FF, "ENCLOSED_ALPHANUMERICS"),                  # Emoji
    UBlock(0x25A0, 0x25FF, "GEOMETRIC_SHAPES"),                        # Emoji
    UBlock(0x2600, 0x26FF, "MISCELLANEOUS_SYMBOLS"),                   # Emoji
    UBlock(0x2700, 0x27BF, "DINGBATS"),                                # Emoji
    UBlock(0x2900, 0x297F, "SUPPLEMENTAL_ARROWS_B"),                   # Emoji
    UBlock(0x2B00, 0x2BFF, "MISCELLANEOUS_SYMBOLS_AND_ARROWS"),        # Emoji
    UBlock(0x3000, 0x303F, "CJK_SYMBOLS_AND_PUNCTUATION"),             # Emoji, Hanzi
    UBlock(0x3200, 0x32FF, "ENCLOSED_CJK_LETTERS_AND_MONTHS"),         # Emoji
    UBlock(0x4E00, 0x9FFF, "CJK_UNIFIED_IDEOGRAPHS"),                  # Hanzi
    UBlock(0xE000, 0xF8FF, "PRIVATE_USE_AREA"),                        # Emoji, UI sprites
    UBlock(0xFF00, 0xFFEF, "HALFWIDTH_AND_FULLWIDTH_FORMS"),           # Hanzi
    UBlock(0xFFF0, 0xFFFF, "SPECIALS"),                                # Latin (replacement char)
    UBlock(0x1F000, 0x1F02F, "MAHJONG_TILES"),                         # Emoji
    UBlock(0x1F0A0, 0x1F0FF, "PLAYING_CARDS"),                         # Emoji
    UBlock(0x1F100, 0x1F1FF, "ENCLOSED_ALPHANUMERIC_SUPPLEMENT"),      # Emoji
    UBlock(0x1F200, 0x1F2FF, "ENCLOSED_IDEOGRAPHIC_SUPPLEMENT"),       # Emoji
    UBlock(0x1F300, 0x1F5FF, "MISCELLANEOUS_SYMBOLS_AND_PICTOGRAPHS"), # Emoji
    UBlock(0x1F600, 0x1F64F, "EMOTICONS"),                             # Emoji
    UBlock(0x1F680, 0x1F6FF, "TRANSPORT_AND_MAP_SYMBOLS"),             # Emoji
    UBlock(0x1F780, 0x1F7FF, "GEOMETRIC_SHAPES_EXTENDED"),             # Emoji
    UBlock(0x1F900, 0x1F9FF, "SUPPLEMENTAL_SYMBOLS_AND_PICTOGRAPHS"),  # Emoji
    UBlock(0x1FA70, 0x1FAFF, "SYMBOLS_AND_PICTOGRAPHS_EXTENDED_A"),    # Emoji
)


def block_for(codepoint: int) -> UBlock:
    """Return the known Unicode block containing codepoint."""
    for block in KNOWN_BLOCKS:
        if block.contains(codepoint):
            return block
    raise UnknownUnicodeBlock(codepoint)


def block_of_cluster(cluster: str) -> UBlock:
    """Return the block of a grapheme cluster's first codepoint."""
    if not cluster:
        raise ValueError("Empty grapheme cluster has no Unicode block")
    return block_for(ord(cluster[0]))
