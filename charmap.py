"""
Character maps: which grapheme cluster lives at which sprite grid cell.

Clusters are written as hyphen-joined hex codepoints, for example
"1f3c4-200d-2640-fe0f" for U+1F3C4 U+200D U+2640 U+FE0F.
"""

import string
import unicodedata
from dataclasses import dataclass


class MalformedHexCluster(ValueError):
    """A hex cluster string has a component that is not a Unicode scalar value."""

    def __init__(self, hex_cluster: str, detail: str):
        self.hex_cluster = hex_cluster
        super().__init__(f"Malformed hex grapheme cluster {hex_cluster!r}: {detail}")


def cluster_from_hex(hex_cluster: str) -> str:
    """
    Parse a hex-codepoint grapheme cluster into a regular string.

    "1f3c4-200d-2640-fe0f" -> "\\U0001F3C4\\u200d\\u2640\\ufe0f"
    """
    cluster = []
    for component in hex_cluster.split("-"):
        # int() alone would also take signs, underscores and whitespace
        if not component or any(c not in string.hexdigits for c in component):
            raise MalformedHexCluster(hex_cluster, f"{component!r} is not hex")
        codepoint = int(component, 16)
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            raise MalformedHexCluster(hex_cluster, f"{component!r} is not a Unicode scalar value")
        cluster.append(chr(codepoint))
    return "".join(cluster)


def hex_from_cluster(cluster: str) -> str:
    return "-".join(f"{ord(c):X}" for c in cluster)


def label_for_cluster(cluster: str) -> str:
    """Make a comment label for a grapheme cluster in generated code."""
    if cluster == "\u00ad":
        return '"\\u00AD" Soft Hyphen'
    if cluster == "\u00a0":
        return '"\\u00A0" No-Break Space'
    # Single codepoint clusters (normalization form C) just show the character,
    # multi-codepoint clusters also get the hex form
    label = '"' + cluster.replace("\\", "\\\\").replace('"', '\\"') + '"'
    if len(cluster) > 1:
        label += " " + hex_from_cluster(cluster)
    return label


@dataclass(frozen=True)
class CharSpec:
    """Maps a hex grapheme cluster to its cell in the sprite sheet glyph grid."""
    hex: str
    row: int
    col: int

    @property
    def cluster(self) -> str:
        return cluster_from_hex(self.hex)

    @property
    def first_codepoint(self) -> int:
        return ord(self.cluster[0])


@dataclass(frozen=True)
class GCAlias:
    """An alias cluster that should render with the canonical cluster's glyph."""
    canon_hex: str
    alias_hex: str


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].strip()


def parse_row_major_index(text: str, columns: int) -> list[CharSpec]:
    """
    Parse an index file with one hex grapheme cluster per line.

    Line order follows a row-major traversal of the glyph grid, starting at the
    top left cell. Comments start with "#"; blank lines are skipped.
    """
    char_specs = []
    row = 0
    col = 0
    for line in text.splitlines():
        hex_cluster = _strip_comment(line)
        if not hex_cluster:
            continue
        cluster_from_hex(hex_cluster)
        char_specs.append(CharSpec(hex_cluster, row, col))
        col += 1
        if col == columns:
            row += 1
            col = 0
    return char_specs


def parse_grid_coord_index(data: dict) -> list[CharSpec]:
    """Build char specs from a parsed index document with explicit grid coordinates."""
    char_specs = []
    for entry in data.get("map", []):
        hex_cluster = entry["hex"]
        row, col = int(entry["row"]), int(entry["col"])
        # Unquoted YAML like 0041 or 010 loads as an int with the wrong value
        if not isinstance(hex_cluster, str):
            raise MalformedHexCluster(
                str(hex_cluster),
                f"cell (row={row}, col={col}) needs a quoted hex string, got {type(hex_cluster).__name__}",
            )
        cluster_from_hex(hex_cluster)
        char_specs.append(CharSpec(hex_cluster, row, col))
    return char_specs


def parse_aliases(text: str) -> list[GCAlias]:
    """
    Parse alias lines like "1f004 1f004-fe0f  # comment".

    The first cluster is the canonical one from the primary index, the second
    is the alias that gets the same glyph. Lines that don't hold exactly two
    clusters are skipped.
    """
    aliases = []
    for line in text.splitlines():
        clusters = _strip_comment(line).split()
        if len(clusters) == 2:
            canon_hex, alias_hex = clusters
            cluster_from_hex(canon_hex)
            cluster_from_hex(alias_hex)
            aliases.append(GCAlias(canon_hex, alias_hex))
    return aliases


def nfd_aliases(hex_clusters: list[str]) -> list[GCAlias]:
    """
    Alias each normalization form C cluster to its form D decomposition.

    Clusters that don't decompose are left out, so "E9" gives
    GCAlias("E9", "65-301") and "41" gives nothing.
    """
    aliases = []
    for hex_c in hex_clusters:
        cluster_c = cluster_from_hex(hex_c)
        cluster_d = unicodedata.normalize("NFD", cluster_c)
        if cluster_d != cluster_c:
            aliases.append(GCAlias(hex_c, hex_from_cluster(cluster_d)))
    return aliases


def format_alias_line(alias: GCAlias) -> str:
    """Format an alias as a line of an alias file, readable by parse_aliases."""
    canon = cluster_from_hex(alias.canon_hex)
    alias_cluster = cluster_from_hex(alias.alias_hex)
    return (
        f"{alias.canon_hex} {alias.alias_hex}   "
        f"# nfc: [{alias.canon_hex}, {canon}],  nfd: [{alias.alias_hex}, {alias_cluster}]"
    )
