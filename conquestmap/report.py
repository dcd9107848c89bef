from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

import numpy as np

from .generator import WorldGenerator
from .model import Country, World


def _cell(label: str) -> str:
    return label + ("  " if len(label) == 1 else " ")


def _grid_lines(generator: WorldGenerator, labels: Mapping[Country, str]) -> List[str]:
    lines = []
    for y in range(generator.grid_height):
        row = ""
        for x in range(generator.grid_width):
            label = labels.get(generator.cell_grid[x, y])
            row += _cell(label) if label is not None else "   "
        lines.append(row)
    return lines


def format_country_layout(generator: WorldGenerator) -> str:
    labels = {country: str(idx) for country, idx in generator.temporary_ids.items()}
    lines = [
        "",
        "Country view:",
        "// All of the grid cells that contain the same number are the space filled by that country #.",
    ]
    lines.extend(_grid_lines(generator, labels))
    return "\n".join(lines) + "\n"


def format_continent_layout(generator: WorldGenerator, world: World) -> str:
    labels = {country: str(c.id) for country, c in world.continents_by_country().items()}
    lines = [
        "",
        "Continent view:",
        "// All of the grid cells that contain the same number are the space filled by that continent #.",
    ]
    lines.extend(_grid_lines(generator, labels))
    lines.append("")
    return "\n".join(lines) + "\n"


def format_continent_summary(world: World) -> str:
    lines = [
        f"Continent #{c.id} contains {len(c)} countries and has a bonus of {c.bonus}"
        for c in world.continents
    ]
    lines.append("")
    return "\n".join(lines) + "\n"


def format_report(generator: WorldGenerator, world: World) -> str:
    return (
        format_country_layout(generator)
        + format_continent_layout(generator, world)
        + format_continent_summary(world)
    )


def _country_centers(generator: WorldGenerator) -> Dict[Country, Tuple[float, float]]:
    cells: Dict[Country, List[Tuple[int, int]]] = {}
    for x in range(generator.grid_width):
        for y in range(generator.grid_height):
            cells.setdefault(generator.cell_grid[x, y], []).append((x, y))
    return {
        country: tuple(np.mean(np.array(coords, dtype=float), axis=0) + 0.5)
        for country, coords in cells.items()
    }


def render_layout_png(
    generator: WorldGenerator,
    world: World,
    *,
    out_path: Path,
) -> None:
    """Draw the continent layout: one colored square per grid cell, labelled by country id.

    Starting countries are marked with `*`, wastelands with `w`.
    """
    os.environ.setdefault("MPLCONFIGDIR", "/tmp/mpl")
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.patches import Rectangle

    width, height = generator.grid_width, generator.grid_height
    by_country = world.continents_by_country()
    cmap = matplotlib.colormaps["tab20"]

    fig, ax = plt.subplots(figsize=(max(4, width * 0.6), max(4, height * 0.6)))
    ax.set_aspect("equal")

    for x in range(width):
        for y in range(height):
            continent = by_country.get(generator.cell_grid[x, y])
            face = "#ffffff" if continent is None else cmap((continent.id - 1) % cmap.N)
            # Row 0 at the top, matching the text layout.
            ax.add_patch(
                Rectangle(
                    (x, height - y - 1),
                    1,
                    1,
                    facecolor=face,
                    edgecolor="#5a4f4b",
                    linewidth=0.4,
                )
            )

    for country, (cx, cy) in _country_centers(generator).items():
        if country not in world.country_ids:
            continue
        label = str(world.country_ids[country])
        if country in world.starting_countries:
            label += "*"
        if country in world.wasteland_countries:
            label += "w"
        ax.text(cx, height - cy, label, ha="center", va="center", fontsize=7)

    ax.set_xlim(0, width)
    ax.set_ylim(0, height)
    ax.axis("off")

    out_path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_path, dpi=160)
    plt.close(fig)
