from __future__ import annotations

import math
import random
from typing import Callable, Dict, List, Optional

import numpy as np

from .model import Continent, Country, Edge, World, collect_countries, dedupe_edges

GRID_CELL_COMBINES_PER_COUNTRY = 2.5
MAX_CONTINENT_SIZE = 6
MIN_CONTINENT_SIZE = 2
UNUSED_COUNTRY_OVERAGE = 1.12

CONTINUE_GROWTH_CHANCE = 0.7
MAX_ROUNDS_PER_COUNTRY = 2.5
CONTINENTS_PER_WASTELAND = 2.4
BONUS_JITTER = (-1.5, 2.5)

LogFn = Optional[Callable[[str], None]]


def _log(log_fn: LogFn, msg: str) -> None:
    if log_fn is not None:
        log_fn(msg)


def _validate_goal(goal_country_count: int) -> int:
    if isinstance(goal_country_count, bool) or not isinstance(goal_country_count, int):
        raise ValueError(f"goal_country_count must be an integer, got {goal_country_count!r}")
    if goal_country_count <= 0:
        raise ValueError(f"goal_country_count must be positive, got {goal_country_count}")
    return goal_country_count


def grid_cell_count(goal_country_count: int) -> int:
    return int(goal_country_count * GRID_CELL_COMBINES_PER_COUNTRY * UNUSED_COUNTRY_OVERAGE)


def choose_continent_bonus(size: int, rng: random.Random) -> int:
    """Larger continents get larger bonuses, with jitter around size - 1."""
    return int((size - 1) + rng.uniform(*BONUS_JITTER))


class WorldGenerator:
    """Builds a World by merging grid cells into countries and countries into continents.

    Each phase is a method so callers can stop part way (reports, tests).
    `run()` executes them in order and returns the finished world.
    """

    def __init__(
        self,
        goal_country_count: int,
        *,
        rng: random.Random | None = None,
        log_fn: LogFn = None,
    ) -> None:
        self.goal_country_count = _validate_goal(goal_country_count)
        self.rng = rng if rng is not None else random.Random()
        self.log_fn = log_fn

        self.cell_count = grid_cell_count(self.goal_country_count)
        self.grid_width = int(math.sqrt(self.cell_count))
        # One taller than wide so the layout is never symmetric.
        self.grid_height = self.grid_width + 1
        self.cell_grid = np.empty((self.grid_width, self.grid_height), dtype=object)

        self.world = World()
        self.temporary_ids: Dict[Country, int] = {}
        self.used_countries: Dict[Country, None] = {}
        self.discarded_continents = 0
        self.removed_continents: List[Continent] = []

    def run(self) -> World:
        self.init_countries()
        self.init_edges()
        self.combine_country_cells()
        self.assign_temporary_ids()
        self.make_continents()
        self.remove_unused_edges()
        self.remove_unconnected_continents()
        self.assign_final_ids()
        self.calculate_max_rounds()
        self.choose_wasteland_countries()
        self.choose_starting_countries()
        return self.world

    def init_countries(self) -> None:
        for x in range(self.grid_width):
            for y in range(self.grid_height):
                self.cell_grid[x, y] = Country(x, y)
        _log(
            self.log_fn,
            f"Grid {self.grid_width}x{self.grid_height} ({self.cell_count} cells requested) "
            f"for goal of {self.goal_country_count} countries",
        )

    def init_edges(self) -> None:
        edges = self.world.edges
        for x in range(self.grid_width):
            for y in range(self.grid_height):
                if x + 1 < self.grid_width:
                    edges.append(Edge(self.cell_grid[x, y], self.cell_grid[x + 1, y]))
                if y + 1 < self.grid_height:
                    edges.append(Edge(self.cell_grid[x, y], self.cell_grid[x, y + 1]))
        _log(self.log_fn, f"Initial edges: {len(edges)}")

    def combine_target(self) -> int:
        cells = self.grid_width * self.grid_height
        target = cells * (GRID_CELL_COMBINES_PER_COUNTRY - 1) / GRID_CELL_COMBINES_PER_COUNTRY
        return math.ceil(target)

    def combine_country_cells(self) -> int:
        target = self.combine_target()
        merges = 0
        while merges < target and self.world.edges:
            into = self.rng.choice(collect_countries(self.world.edges))
            country = self.rng.choice(self.world.neighbors_of(into))
            if country == into:
                continue
            self.merge_into(country, into)
            self.world.edges = dedupe_edges(self.world.edges)
            merges += 1
        _log(
            self.log_fn,
            f"Merged {merges}/{target} cells, "
            f"{len(collect_countries(self.world.edges))} countries remain",
        )
        return merges

    def merge_into(self, country: Country, into: Country) -> None:
        for edge in self.world.edges:
            if edge.left == country:
                edge.left = into
            if edge.right == country:
                edge.right = into
        self.cell_grid[self.cell_grid == country] = into

    def assign_temporary_ids(self) -> None:
        self.temporary_ids = {
            country: idx for idx, country in enumerate(collect_countries(self.world.edges))
        }

    def unused_countries(self) -> List[Country]:
        return [c for c in collect_countries(self.world.edges) if c not in self.used_countries]

    def grow_continent(self, seed: Country) -> Continent:
        continent = Continent(countries=[seed])
        self.used_countries[seed] = None
        while True:
            candidates = [
                c
                for c in self.world.neighbors_of_continent(continent)
                if c not in self.used_countries
            ]
            if not candidates:
                break
            country = self.rng.choice(candidates)
            continent.add(country)
            self.used_countries[country] = None
            if len(continent) >= MAX_CONTINENT_SIZE:
                break
            if self.rng.random() >= CONTINUE_GROWTH_CHANCE:
                break
        return continent

    def make_continents(self) -> None:
        continents = self.world.continents
        pool = self.unused_countries()
        while pool:
            continent = self.grow_continent(self.rng.choice(pool))
            if len(continent) >= MIN_CONTINENT_SIZE:
                continent.id = len(continents) + 1
                continent.bonus = choose_continent_bonus(len(continent), self.rng)
                continents.append(continent)
            else:
                # Only a seed with no free neighbors ends up here; it stays used.
                self.discarded_continents += 1
            pool = self.unused_countries()
        _log(
            self.log_fn,
            f"Grew {len(continents)} continents, discarded {self.discarded_continents}",
        )

    def remove_unused_edges(self) -> int:
        in_continents = set(self.world.countries_in_continents())
        before = len(self.world.edges)
        self.world.edges = [
            edge
            for edge in self.world.edges
            if edge.left in in_continents and edge.right in in_continents
        ]
        removed = before - len(self.world.edges)
        _log(self.log_fn, f"Removed {removed} edges touching unused countries")
        return removed

    def remove_unconnected_continents(self) -> List[Continent]:
        """Drop continents with no neighbor outside themselves.

        Only looks at each continent on its own: a pair of continents that touch each
        other and nothing else both survive.
        """
        world = self.world
        if len(world.continents) <= 1:
            return []
        kept: List[Continent] = []
        removed: List[Continent] = []
        for continent in world.continents:
            if len(world.neighbors_of_continent(continent)) == len(continent):
                removed.append(continent)
            else:
                kept.append(continent)
        if removed:
            dropped = {c for continent in removed for c in continent.countries}
            world.edges = [e for e in world.edges if e.left not in dropped]
        world.continents = kept
        self.removed_continents.extend(removed)
        _log(self.log_fn, f"Removed {len(removed)} disconnected continents")
        return removed

    def assign_final_ids(self) -> None:
        world = self.world
        for idx, continent in enumerate(world.continents, start=1):
            continent.id = idx
        world.country_ids = {}
        world.countries_by_id = {}
        for idx, country in enumerate(world.countries_in_continents()):
            world.country_ids[country] = idx
            world.countries_by_id[idx] = country
        _log(
            self.log_fn,
            f"Final map: {len(world.countries_by_id)} countries in {len(world.continents)} continents",
        )

    def calculate_max_rounds(self) -> None:
        self.world.max_rounds = int(len(self.world.countries_by_id) * MAX_ROUNDS_PER_COUNTRY)

    def choose_wasteland_countries(self) -> None:
        countries = self.world.countries_in_continents()
        count = int(len(self.world.continents) / CONTINENTS_PER_WASTELAND)
        for _ in range(count):
            # Repeated draws collapse, so the set may end up smaller than count.
            self.world.wasteland_countries[self.rng.choice(countries)] = None

    def choose_starting_countries(self) -> None:
        world = self.world
        for continent in world.continents:
            world.starting_countries[self.rng.choice(continent.countries)] = None
        for country in world.starting_countries:
            world.wasteland_countries.pop(country, None)
        _log(
            self.log_fn,
            f"Chose {len(world.wasteland_countries)} wastelands and "
            f"{len(world.starting_countries)} starting countries",
        )


def generate(
    goal_country_count: int,
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
    log_fn: LogFn = None,
) -> World:
    """Generate a world of roughly `goal_country_count` countries."""
    if rng is None:
        rng = random.Random(seed)
    return WorldGenerator(goal_country_count, rng=rng, log_fn=log_fn).run()
