#!/usr/bin/env python3
"""
Generate an alias file mapping normalization form C clusters to form D.

Reads the hex clusters of a font index (one cluster per line, or a YAML grid
coordinate index) and prints an alias line for every cluster whose NFD form
differs, so the decomposed spelling renders with the composed glyph.

Usage:
    uv run python gen_nfd_aliases.py <index.txt|index.yaml> > latin_alias.txt
"""

import sys
from pathlib import Path

import yaml

from charmap import format_alias_line, nfd_aliases, parse_grid_coord_index, parse_row_major_index


def index_hex_clusters(path: Path) -> list[str]:
    """Return the hex clusters of an index file in file order."""
    text = path.read_text(encoding="utf-8")
    if path.suffix in (".yaml", ".yml"):
        char_specs = parse_grid_coord_index(yaml.safe_load(text) or {})
    else:
        # Grid positions don't matter here
        char_specs = parse_row_major_index(text, 1)
    return [cs.hex for cs in char_specs]


def main():
    if len(sys.argv) != 2:
        print("Usage: uv run python gen_nfd_aliases.py <index.txt|index.yaml> > aliases.txt")
        sys.exit(1)

    index_path = Path(sys.argv[1])
    if not index_path.exists():
        print(f"Error: Index file not found: {index_path}")
        sys.exit(1)

    print("# nfc nfd")
    for alias in nfd_aliases(index_hex_clusters(index_path)):
        print(format_alias_line(alias))


if __name__ == "__main__":
    main()
