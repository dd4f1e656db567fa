#!/usr/bin/env python3
"""
Build blit pattern fonts from glyph grid sprite sheets.

Each glyph set in the config names a PNG sprite sheet, its grid geometry, an
index mapping grapheme clusters to grid cells, and optional aliases. Glyphs
are trimmed and packed into 1-bit XOR blit patterns, then indexed by murmur3
hash per Unicode block and rendered as a Rust source module.

Usage:
    uv run python build_blits.py <config.yaml> [--write] [--debug]

    Without --write the fonts are compiled and checked, but nothing is written.
    --debug prints an ASCII dump of every trimmed glyph.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from PIL import Image

from blit_pattern import BlitPattern, check_pattern_fits, format_words, pack_pattern, unpack_pattern
from charmap import (
    CharSpec,
    GCAlias,
    label_for_cluster,
    parse_aliases,
    parse_grid_coord_index,
    parse_row_major_index,
)
from cluster_index import GlyphSet
from glyph_matrix import (
    GridGeometry,
    TrimLimits,
    TrimPolicy,
    extract_matrix,
    matrix_to_text,
    trim_matrix,
    trim_policy_for,
)
from murmur3 import LENGTH_MODES

LENGTH_TERMS = {
    "codepoints": "codepoint count of the cluster",
    "utf8": "UTF-8 byte length of the cluster",
}


@dataclass
class FontSpec:
    """Sprite sheet, character map and output settings for one font."""
    name: str
    sprites: Path
    geometry: GridGeometry
    char_specs: list[CharSpec]
    aliases: list[GCAlias] = field(default_factory=list)
    legal: str = ""
    rust_out: Path | None = None
    trim_policy: TrimPolicy | None = None
    m3_seed: int = 0
    m3_length: str = "codepoints"

    def __post_init__(self):
        if self.trim_policy is None:
            self.trim_policy = TrimPolicy(self.geometry.size)
        if self.m3_length not in LENGTH_MODES:
            raise ValueError(f"Font {self.name}: unknown m3_length {self.m3_length!r}")


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------

def _read_text(base: Path, name: str | None) -> str:
    if not name:
        return ""
    return (base / name).read_text(encoding="utf-8")


def _parse_trim_overrides(raw: list | None) -> dict[tuple[int, int], TrimLimits]:
    overrides = {}
    for entry in raw or []:
        overrides[(int(entry["row"]), int(entry["col"]))] = TrimLimits(
            int(entry["top"]), int(entry["right"]), int(entry["bottom"]), int(entry["left"])
        )
    return overrides


def font_spec_from_config(glyph_set: dict, base: Path) -> FontSpec:
    """Build a FontSpec from one entry of a config's glyph_sets list."""
    name = glyph_set["name"]
    geometry = GridGeometry(
        glyph_set["size"],
        glyph_set["cols"],
        glyph_set.get("gutter", 0),
        glyph_set.get("border", 0),
    )

    index_type = glyph_set.get("index_type", "txt-row-major")
    if index_type == "txt-row-major":
        char_specs = parse_row_major_index(_read_text(base, glyph_set["index"]), geometry.cols)
    elif index_type == "yaml-grid-coord":
        with open(base / glyph_set["index"], encoding="utf-8") as f:
            char_specs = parse_grid_coord_index(yaml.safe_load(f) or {})
    else:
        raise ValueError(f"Font {name}: bad index_type {index_type!r}")

    rust_out = glyph_set.get("rust_out")
    return FontSpec(
        name=name,
        sprites=base / glyph_set["sprites"],
        geometry=geometry,
        char_specs=char_specs,
        aliases=parse_aliases(_read_text(base, glyph_set.get("aliases"))),
        legal=_read_text(base, glyph_set.get("legal")).strip(),
        rust_out=base / rust_out if rust_out else None,
        trim_policy=trim_policy_for(
            glyph_set.get("glyph_trim"),
            geometry.size,
            _parse_trim_overrides(glyph_set.get("trim_overrides")),
        ),
        m3_seed=glyph_set.get("m3_seed", 0),
        m3_length=glyph_set.get("m3_length", "codepoints"),
    )


def load_config(path: Path) -> list[FontSpec]:
    """Load font specs from a YAML config; file paths are relative to the config."""
    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    base = path.parent
    return [font_spec_from_config(gs, base) for gs in config.get("glyph_sets", [])]


# ---------------------------------------------------------------------------
# Compiling
# ---------------------------------------------------------------------------

def compile_glyph(image: Image.Image, font: FontSpec, cs: CharSpec, debug: bool = False) -> BlitPattern:
    """Extract, trim and pack the glyph for one character spec."""
    matrix = extract_matrix(image, font.geometry, cs.row, cs.col)
    matrix, y_offset = trim_matrix(matrix, font.trim_policy.limits(cs.row, cs.col))
    check_pattern_fits(matrix, y_offset, f"{font.name} {cs.hex} (row={cs.row}, col={cs.col})")
    words = pack_pattern(matrix, y_offset)
    if debug:
        # Dump what the renderer will see, decoded from the packed words
        packed, packed_y_offset = unpack_pattern(words)
        print(f"{cs.first_codepoint:X}: {label_for_cluster(cs.cluster)} y_offset={packed_y_offset}")
        print(matrix_to_text(packed))
    return BlitPattern(words, cs)


def compile_font(font: FontSpec, image: Image.Image, debug: bool = False) -> GlyphSet:
    """Compile all glyphs of a font into pattern data plus a cluster index with aliases."""
    patterns = [compile_glyph(image, font, cs, debug) for cs in font.char_specs]
    glyph_set = GlyphSet.from_patterns(patterns, font.m3_seed, font.m3_length)
    glyph_set.add_aliases(font.aliases)
    return glyph_set


# ---------------------------------------------------------------------------
# Rust source rendering
# ---------------------------------------------------------------------------

def _legal_comment(legal: str) -> list[str]:
    if not legal:
        return []
    lines = ["// CREDITS:"]
    for line in legal.splitlines():
        if line.startswith("//"):
            lines.append(line)
        else:
            lines.append(f"// {line}".rstrip())
    lines.append("//")
    return lines


def multibyte_clusters(glyph_set: GlyphSet) -> list[str]:
    """
    Clusters whose codepoint count differs from their UTF-8 byte length.

    In "codepoints" length mode these hash differently from a renderer that
    mixes in the UTF-8 length, so they can only be found by a matching renderer.
    """
    return [
        entry.cluster
        for block in glyph_set.index
        for entry in glyph_set.index[block]
        if not entry.cluster.isascii()
    ]


def render_rust(font: FontSpec, glyph_set: GlyphSet) -> str:
    """Render a font's pattern data and hash index as a Rust module."""
    index = glyph_set.index
    blocks = index.index_keys()
    max_height = max((p.height + p.y_offset for _, p in glyph_set.patterns), default=0)
    variant = font.name.replace(" ", "")

    lines = [
        "// DO NOT MAKE EDITS HERE because this file is automatically generated.",
        "// To make changes, see build_blits.py",
        "//",
        "// NOTE: Bitmap graphics encoded in the DATA array may carry their own",
        "// license terms (see credits).",
        "//",
    ]
    if font.m3_length == "codepoints" and multibyte_clusters(glyph_set):
        lines += [
            "// WARNING: HASH_* entries mix in the codepoint count, not the UTF-8 byte",
            "// length. Non-ASCII clusters only match a renderer that hashes the same way.",
            "//",
        ]
    lines += _legal_comment(font.legal)
    lines += [
        f"//! {font.name} Font",
        "#![forbid(unsafe_code)]",
        "#![allow(dead_code)]",
        "",
        "use super::{GlyphData, NoGlyphErr};",
        "",
        "/// Maximum height of glyph patterns in this bitmap typeface.",
        "/// This will be true: h + y_offset <= MAX_HEIGHT",
        f"pub const MAX_HEIGHT: u8 = {max_height};",
        "",
        "/// Seed for Murmur3 hashes in the HASH_* index arrays",
        f"pub const M3_SEED: u32 = {font.m3_seed};",
        "",
        f"/// Length term mixed into the murmur3 finalizer: {LENGTH_TERMS[font.m3_length]}",
        f"pub const M3_LENGTH: &str = \"{font.m3_length}\";",
        "",
        "/// Return Ok(offset into DATA[]) for start of blit pattern for grapheme cluster.",
        "///",
        "/// Dispatches on the Unicode block of the first character, then tries the",
        "/// cluster lengths present in that block's index, longest first.",
        "pub fn get_blit_pattern_offset(cluster: &str) -> Result<(GlyphData, usize), NoGlyphErr> {",
        "    let first_char: u32;",
        "    match cluster.chars().next() {",
        "        Some(c) => first_char = c as u32,",
        "        None => return Err(NoGlyphErr),",
        "    }",
        "    return match first_char {",
    ]
    for block in blocks:
        fn_name = f"find_{block.name.lower()}"
        lines.append(f"        0x{block.low:X}..=0x{block.high:X} => {{")
        for i, gc_len in enumerate(index[block].cluster_length_list()):
            keyword = "if" if i == 0 else "} else if"
            lines.append(f"            {keyword} let Some((offset, bytes_used)) = {fn_name}(cluster, {gc_len}) {{")
            lines.append(f"                Ok((GlyphData::{variant}(offset), bytes_used))")
        lines += [
            "            } else {",
            "                Err(NoGlyphErr)",
            "            }",
            "        }",
        ]
    lines += [
        "        _ => Err(NoGlyphErr),",
        "    };",
        "}",
    ]

    for block in blocks:
        block_index = index[block]
        suffix = block.name.upper()
        lines += [
            "",
            "/// Use binary search on table of grapheme cluster hashes to find blit pattern for grapheme cluster.",
            "/// Only attempt to match grapheme clusters of length limit codepoints.",
            f"fn find_{block.name.lower()}(cluster: &str, limit: u32) -> Option<(usize, usize)> {{",
            "    let (key, bytes_hashed) = super::murmur3(cluster, M3_SEED, limit);",
            f"    match HASH_{suffix}.binary_search(&key) {{",
            f"        Ok(index) => return Some((OFFSET_{suffix}[index], bytes_hashed)),",
            "        _ => None,",
            "    }",
            "}",
            "",
            f"/// Index of murmur3(grapheme cluster); sort matches OFFSET_{suffix}",
            f"const HASH_{suffix}: [u32; {len(block_index)}] = [",
        ]
        for entry in block_index:
            lines.append(f"    0x{entry.m3_hash:08X},  // {label_for_cluster(entry.cluster)}")
        lines += [
            "];",
            "",
            f"/// Lookup table of blit pattern offsets; sort matches HASH_{suffix}",
            f"const OFFSET_{suffix}: [usize; {len(block_index)}] = [",
        ]
        for entry in block_index:
            offset = f"{entry.data_offset},"
            lines.append(f"    {offset:<5} // {label_for_cluster(entry.cluster)}")
        lines.append("];")

    lines += [
        "",
        "/// Packed 1-bit pixel data for blit patterns.",
        "/// Header word: (w << 16) | (h << 8) | y_offset",
        "/// Pixels are packed in top to bottom, left to right order with MSB of first",
        "/// pixel word containing the top left pixel.",
        f"pub const DATA: [u32; {glyph_set.data_len}] = [",
    ]
    for offset, pattern in glyph_set.patterns:
        cs = pattern.char_spec
        lines.append(f"    // [{offset}]: {cs.hex} {label_for_cluster(cs.cluster)}")
        lines.append(format_words(pattern.words))
    lines += [
        "];",
        "",
        "#[cfg(test)]",
        "mod tests {",
        "    use super::*;",
        "",
        "    #[test]",
        "    // If this fails, there's probably a hash collision, so change the seed.",
        "    fn test_hashes_unique_and_sorted() {",
    ]
    for block in blocks:
        suffix = block.name.upper()
        lines += [
            f"        for i in 0..HASH_{suffix}.len()-1 {{",
            f"            assert!(HASH_{suffix}[i] < HASH_{suffix}[i+1]);",
            "        }",
        ]
    lines += [
        "    }",
        "}",
    ]
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------

def build_all(fonts: list[FontSpec], write: bool = False, debug: bool = False):
    for font in fonts:
        with Image.open(font.sprites) as image:
            image.load()
            glyph_set = compile_font(font, image, debug)
        code = render_rust(font, glyph_set)
        multibyte = multibyte_clusters(glyph_set) if font.m3_length == "codepoints" else []

        print(f"Font: {font.name}")
        print(f"  Glyphs: {len(font.char_specs)}")
        print(f"  Aliases: {len(font.aliases)}")
        print(f"  Blocks: {len(glyph_set.index.index_keys())}")
        print(f"  Data words: {glyph_set.data_len}")
        if multibyte:
            print(
                f"  Warning: {len(multibyte)} non-ASCII clusters hashed with m3_length: codepoints; "
                "a renderer hashing UTF-8 byte lengths won't find them (set m3_length: utf8)"
            )
        if font.rust_out is None:
            print("  No rust_out configured, skipping")
        elif write:
            font.rust_out.parent.mkdir(parents=True, exist_ok=True)
            font.rust_out.write_text(code, encoding="utf-8")
            print(f"  Rust source saved to: {font.rust_out}")
        else:
            print(f"  Would write: {font.rust_out} (use --write)")


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    flags = {a for a in sys.argv[1:] if a.startswith("--")}
    if len(args) != 1 or not flags <= {"--write", "--debug"}:
        print("Usage: uv run python build_blits.py <config.yaml> [--write] [--debug]")
        print("\nOptions:")
        print("  --write  write generated Rust source files (default: dry run)")
        print("  --debug  print an ASCII dump of every trimmed glyph")
        print("\nExample:")
        print("  uv run python build_blits.py codegen.yaml --write")
        sys.exit(1)

    config_path = Path(args[0])
    if not config_path.exists():
        print(f"Error: Config file not found: {config_path}")
        sys.exit(1)

    fonts = load_config(config_path)
    build_all(fonts, write="--write" in flags, debug="--debug" in flags)


if __name__ == "__main__":
    main()
