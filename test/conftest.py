import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def parse_rows(rows: list[str]) -> list[list[int]]:
    """Convert "#"/"." string rows to a 0/1 pixel matrix."""
    return [[1 if c == "#" else 0 for c in row] for row in rows]


@pytest.fixture
def bitmap():
    return parse_rows


@pytest.fixture
def make_sheet():
    """
    Return a factory drawing glyphs onto a white sprite sheet.

    cells maps (row, col) to "#"/"." string rows drawn at the top left of the
    grid cell. Gutters and borders are filled with light gray so they never
    read as foreground.
    """
    def factory(geometry, rows: int, cells: dict, mode: str = "RGB") -> Image.Image:
        width = geometry.border + geometry.cols * geometry.pitch
        height = geometry.border + rows * geometry.pitch
        image = Image.new("RGB", (width, height), (200, 200, 200))
        pixels = image.load()
        for row in range(rows):
            for col in range(geometry.cols):
                x0, y0 = geometry.cell_origin(row, col)
                for y in range(geometry.size):
                    for x in range(geometry.size):
                        pixels[x0 + x, y0 + y] = (255, 255, 255)
        for (row, col), glyph in cells.items():
            x0, y0 = geometry.cell_origin(row, col)
            for y, line in enumerate(glyph):
                for x, c in enumerate(line):
                    if c == "#":
                        pixels[x0 + x, y0 + y] = (0, 0, 0)
        return image.convert(mode) if mode != "RGB" else image

    return factory
