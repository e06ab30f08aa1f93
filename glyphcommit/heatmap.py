"""
PNG previews of the glyph grids.

Each cell gets a simulated commit count and is shaded on a white-to-green
scale relative to the busiest cell, roughly how the calendar will look.
"""

import random
from pathlib import Path
from typing import List, Optional, Sequence

from PIL import Image, ImageDraw

from glyphcommit.patterns import E_GRID, H_GRID, sample_commit_count

CELL_SIZE = 50


def simulate_counts(grid: Sequence[Sequence[str]], rng: random.Random) -> List[List[int]]:
    return [[sample_commit_count(cell, rng) for cell in row] for row in grid]


def cell_color(count: int, max_count: int):
    intensity = count / max_count if max_count else 0
    value = int(255 - intensity * 255)
    return (value, 255, value)


def render_heatmap(counts: List[List[int]], path, cell_size: int = CELL_SIZE) -> Path:
    """Paint one square per count into a PNG at `path`."""
    rows = len(counts)
    cols = len(counts[0])
    img = Image.new("RGB", (cols * cell_size, rows * cell_size), "white")
    drw = ImageDraw.Draw(img)

    max_count = max(max(row) for row in counts)
    for y, row in enumerate(counts):
        for x, count in enumerate(row):
            x0, y0 = x * cell_size, y * cell_size
            drw.rectangle(
                [x0, y0, x0 + cell_size - 1, y0 + cell_size - 1],
                fill=cell_color(count, max_count),
            )

    path = Path(path)
    img.save(path, format="PNG")
    return path


def render_glyph_heatmaps(out_dir=".", rng: Optional[random.Random] = None) -> List[Path]:
    rng = rng or random.Random()
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for glyph, grid in (("H", H_GRID), ("E", E_GRID)):
        print(f"Generating heatmap for {glyph} pattern...")
        path = render_heatmap(simulate_counts(grid, rng), out_dir / f"{glyph}PatternHeatmap.png")
        print(f"Heatmap saved to {path}")
        written.append(path)
    return written
