from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class Country:
    """A territory node, identified by the grid cell it was created from."""

    x: int
    y: int


@dataclass
class Edge:
    """Adjacency between two countries. Either endpoint may be repointed."""

    left: Country
    right: Country

    @property
    def key(self) -> Tuple[Country, Country]:
        # Order-sensitive: (a, b) and (b, a) are different keys.
        return (self.left, self.right)

    def touches(self, country: Country) -> bool:
        return self.left == country or self.right == country

    def is_loop(self) -> bool:
        return self.left == self.right


@dataclass
class Continent:
    id: int = 0
    bonus: int = 0
    countries: List[Country] = field(default_factory=list)

    def add(self, country: Country) -> None:
        if country not in self.countries:
            self.countries.append(country)

    def __contains__(self, country: object) -> bool:
        return country in self.countries

    def __len__(self) -> int:
        return len(self.countries)


def dedupe_edges(edges: Iterable[Edge]) -> List[Edge]:
    """Drop repeated (left, right) pairs, keeping the first, and all self-loops."""
    unique: Dict[Tuple[Country, Country], Edge] = {}
    for edge in edges:
        unique.setdefault(edge.key, edge)
    return [edge for edge in unique.values() if not edge.is_loop()]


def collect_countries(edges: Iterable[Edge]) -> List[Country]:
    """Distinct countries referenced by the edges, in first-seen order."""
    seen: Dict[Country, None] = {}
    for edge in edges:
        seen.setdefault(edge.left, None)
        seen.setdefault(edge.right, None)
    return list(seen)


@dataclass
class World:
    edges: List[Edge] = field(default_factory=list)
    continents: List[Continent] = field(default_factory=list)
    countries_by_id: Dict[int, Country] = field(default_factory=dict)
    country_ids: Dict[Country, int] = field(default_factory=dict)
    # Insertion-ordered sets.
    starting_countries: Dict[Country, None] = field(default_factory=dict)
    wasteland_countries: Dict[Country, None] = field(default_factory=dict)
    max_rounds: int = 0

    def neighbors_of(self, country: Country) -> List[Country]:
        """Countries sharing an edge with `country`, in either orientation."""
        found: Dict[Country, None] = {}
        for edge in self.edges:
            if edge.left == country:
                found.setdefault(edge.right, None)
            if edge.right == country:
                found.setdefault(edge.left, None)
        return list(found)

    def neighbors_of_continent(self, continent: Continent) -> List[Country]:
        """Union of member neighbor sets. Includes members adjacent to each other."""
        members = set(continent.countries)
        found: Dict[Country, None] = {}
        for edge in self.edges:
            if edge.left in members:
                found.setdefault(edge.right, None)
            if edge.right in members:
                found.setdefault(edge.left, None)
        return list(found)

    def continents_by_country(self) -> Dict[Country, Continent]:
        return {
            country: continent
            for continent in self.continents
            for country in continent.countries
        }

    def countries_in_continents(self) -> List[Country]:
        seen: Dict[Country, None] = {}
        for continent in self.continents:
            for country in continent.countries:
                seen.setdefault(country, None)
        return list(seen)
