from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .model import World


def _section(header: str, tokens: List[str]) -> str:
    return " ".join([header] + tokens)


def format_setup(world: World) -> str:
    """Render the engine setup commands for a finished world.

    Every section is one line followed by a blank line. Neighbor ids of a
    country are comma-joined; everything else is space-joined.
    """
    ids = world.country_ids

    super_regions: List[str] = []
    regions: List[str] = []
    neighbors: List[str] = []
    for continent in world.continents:
        super_regions.extend([str(continent.id), str(continent.bonus)])
        for country in continent.countries:
            regions.extend([str(ids[country]), str(continent.id)])
            neighbors.append(str(ids[country]))
            adjacent = [str(ids[n]) for n in world.neighbors_of(country)]
            if adjacent:
                neighbors.append(",".join(adjacent))

    lines = [
        f"settings max_rounds {world.max_rounds}",
        _section("setup_map super_regions", super_regions),
        _section("setup_map regions", regions),
        _section("setup_map neighbors", neighbors),
        _section("setup_map wastelands", [str(ids[c]) for c in world.wasteland_countries]),
        _section("settings starting_regions", [str(ids[c]) for c in world.starting_countries]),
    ]
    return "".join(line + "\n\n" for line in lines)


def _pairs(tokens: List[str], line: str) -> List[Tuple[int, int]]:
    if len(tokens) % 2:
        raise ValueError(f"Expected id pairs in setup line: {line!r}")
    try:
        values = [int(t) for t in tokens]
    except ValueError as exc:
        raise ValueError(f"Non-integer token in setup line: {line!r}") from exc
    return list(zip(values[0::2], values[1::2]))


def _parse_neighbors(tokens: List[str], line: str) -> Dict[int, List[int]]:
    if len(tokens) % 2:
        raise ValueError(f"Expected country/neighbor-list pairs in: {line!r}")
    neighbors: Dict[int, List[int]] = {}
    try:
        for country, adjacent in zip(tokens[0::2], tokens[1::2]):
            neighbors[int(country)] = [int(n) for n in adjacent.split(",")]
    except ValueError as exc:
        raise ValueError(f"Malformed neighbors line: {line!r}") from exc
    return neighbors


def parse_setup(text: str) -> Dict[str, Any]:
    """Parse setup text back into plain ids.

    Neighbors are read as alternating country id / comma list tokens, which holds
    for generated worlds since every kept country touches at least one other.
    """
    parsed: Dict[str, Any] = {
        "max_rounds": None,
        "super_regions": [],
        "regions": [],
        "neighbors": {},
        "wastelands": [],
        "starting_regions": [],
    }
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) < 2:
            raise ValueError(f"Unknown setup line: {line!r}")
        head, tokens = " ".join(parts[:2]), parts[2:]
        if head == "settings max_rounds":
            if len(tokens) != 1:
                raise ValueError(f"Expected one value in: {line!r}")
            parsed["max_rounds"] = int(tokens[0])
        elif head == "setup_map super_regions":
            parsed["super_regions"] = _pairs(tokens, line)
        elif head == "setup_map regions":
            parsed["regions"] = _pairs(tokens, line)
        elif head == "setup_map neighbors":
            parsed["neighbors"] = _parse_neighbors(tokens, line)
        elif head == "setup_map wastelands":
            parsed["wastelands"] = [int(t) for t in tokens]
        elif head == "settings starting_regions":
            parsed["starting_regions"] = [int(t) for t in tokens]
        else:
            raise ValueError(f"Unknown setup line: {line!r}")
    return parsed
