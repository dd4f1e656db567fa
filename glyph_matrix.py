"""
Pixel matrices for glyphs cut from a sprite sheet grid.

A matrix is a list of rows of 0 (background) / 1 (foreground) ints. Trimming
can shrink it all the way down to [] for a blank glyph.
"""

from dataclasses import dataclass, field
from typing import NamedTuple

from PIL import Image


# Grid cell of the space glyph in sprite sheets with a proportional trim style
SPACE_CELL = (0, 2)


class GlyphCellOutOfRange(ValueError):
    """A grid cell address is outside the sprite sheet's glyph grid."""

    def __init__(self, row: int, col: int, rows: int, cols: int):
        self.row = row
        self.col = col
        super().__init__(
            f"Glyph cell (row={row}, col={col}) is out of range for a "
            f"{rows} row x {cols} column grid"
        )


@dataclass(frozen=True)
class GridGeometry:
    """
    Layout of the glyph grid on a sprite sheet.

    size:   pixels on a side of each (square) glyph cell
    cols:   glyph cells per grid row
    gutter: pixels between neighbouring cells
    border: pixels of top and left border before the first cell
    """
    size: int
    cols: int
    gutter: int = 0
    border: int = 0

    def __post_init__(self):
        for name in ("size", "cols", "gutter", "border"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"Grid {name} must be a non-negative integer, got {value!r}")

    @property
    def pitch(self) -> int:
        return self.size + self.gutter

    def rows_in(self, image_height: int) -> int:
        if self.pitch == 0:
            return 0
        return max(0, (image_height - self.border) // self.pitch)

    def cell_origin(self, row: int, col: int) -> tuple[int, int]:
        """Return (x, y) of the top left pixel of a grid cell."""
        return self.border + col * self.pitch, self.border + row * self.pitch


def extract_matrix(image: Image.Image, geometry: GridGeometry, row: int, col: int) -> list[list[int]]:
    """
    Cut the size x size pixel matrix for one glyph cell out of a sprite sheet.

    Pixels with a red channel of exactly 0 are foreground; sprite sheets are
    expected to be pure black on white.
    """
    rows = geometry.rows_in(image.height)
    if not (0 <= row < rows and 0 <= col < geometry.cols):
        raise GlyphCellOutOfRange(row, col, rows, geometry.cols)
    x0, y0 = geometry.cell_origin(row, col)
    if x0 + geometry.size > image.width or y0 + geometry.size > image.height:
        raise GlyphCellOutOfRange(row, col, rows, geometry.cols)
    if image.mode not in ("RGB", "RGBA", "L", "LA", "1"):
        # Palette and other modes don't keep red in band 0
        image = image.convert("RGB")
    red = image.getchannel(0).load()
    return [
        [1 if red[x, y] == 0 else 0 for x in range(x0, x0 + geometry.size)]
        for y in range(y0, y0 + geometry.size)
    ]


class TrimLimits(NamedTuple):
    """Most rows/columns that may be trimmed from each edge."""
    top: int
    right: int
    bottom: int
    left: int


@dataclass
class TrimPolicy:
    """Trim limits per grid cell, with full trimming unless a cell is overridden."""
    size: int
    overrides: dict[tuple[int, int], TrimLimits] = field(default_factory=dict)

    def limits(self, row: int, col: int) -> TrimLimits:
        override = self.overrides.get((row, col))
        if override is not None:
            return override
        return TrimLimits(self.size, self.size, self.size, self.size)


def space_trim_limits(size: int) -> TrimLimits:
    """Half-cell trim that keeps a small blank area for the space glyph."""
    lr = max(0, size // 2 - 2)
    tb = max(0, size // 2 - 1)
    return TrimLimits(tb, lr, tb, lr)


def trim_policy_for(
    glyph_trim: str | None,
    size: int,
    overrides: dict[tuple[int, int], TrimLimits] | None = None,
) -> TrimPolicy:
    """
    Build the trim policy for a font's glyph trim style.

    "proportional": Latin fonts whose space glyph sits at SPACE_CELL
    "CJK" / None:   every cell trims fully
    Explicit per-cell overrides take precedence over the style.
    """
    if glyph_trim == "proportional":
        cells = {SPACE_CELL: space_trim_limits(size)}
    elif glyph_trim in (None, "", "CJK"):
        cells = {}
    else:
        raise ValueError(f"Unknown glyph trim style: {glyph_trim!r}")
    if overrides:
        cells.update(overrides)
    return TrimPolicy(size, cells)


def transpose(matrix: list[list[int]]) -> list[list[int]]:
    return [list(column) for column in zip(*matrix)]


def trim_leading_empty_rows(matrix: list[list[int]], limit: int) -> list[list[int]]:
    """Drop up to limit all-background rows from the top of matrix."""
    start = 0
    while start < min(limit, len(matrix)) and sum(matrix[start]) == 0:
        start += 1
    return matrix[start:]


def trim_matrix(matrix: list[list[int]], limits: TrimLimits) -> tuple[list[list[int]], int]:
    """
    Trim background around a glyph.

    Returns the trimmed matrix and the y-offset (rows trimmed from the top),
    which the renderer needs to place the glyph vertically.
    """
    if not matrix or not matrix[0]:
        return [], 0
    height = len(matrix)
    # Left and right edges are trimmed as rows of the transposed matrix
    columns = transpose(matrix)
    columns = trim_leading_empty_rows(columns, limits.left)
    columns = trim_leading_empty_rows(columns[::-1], limits.right)[::-1]
    if not columns:
        # Everything trimmed horizontally: all rows are now empty
        matrix = [[] for _ in range(height)]
    else:
        matrix = transpose(columns)

    pre_trim_h = len(matrix)
    matrix = trim_leading_empty_rows(matrix, limits.top)
    y_offset = pre_trim_h - len(matrix)
    matrix = trim_leading_empty_rows(matrix[::-1], limits.bottom)[::-1]
    if matrix and not matrix[0]:
        # Zero-width rows can't keep a height
        matrix = []
    return matrix, y_offset


def matrix_to_text(matrix: list[list[int]]) -> str:
    """Return glyph as text with one ASCII char per pixel."""
    return "".join(
        "".join("#" if px else "." for px in row) + "\n"
        for row in matrix
    )
