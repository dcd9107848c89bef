"""Random territory-conquest map generation (countries, continents, setup text)."""

from .generator import (
    GRID_CELL_COMBINES_PER_COUNTRY,
    MAX_CONTINENT_SIZE,
    MIN_CONTINENT_SIZE,
    UNUSED_COUNTRY_OVERAGE,
    WorldGenerator,
    choose_continent_bonus,
    generate,
)
from .model import Continent, Country, Edge, World
from .report import format_report, render_layout_png
from .setup_text import format_setup, parse_setup

__all__ = [
    "Continent",
    "Country",
    "Edge",
    "GRID_CELL_COMBINES_PER_COUNTRY",
    "MAX_CONTINENT_SIZE",
    "MIN_CONTINENT_SIZE",
    "UNUSED_COUNTRY_OVERAGE",
    "World",
    "WorldGenerator",
    "choose_continent_bonus",
    "format_report",
    "format_setup",
    "generate",
    "parse_setup",
    "render_layout_png",
]

