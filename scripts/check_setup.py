#!/usr/bin/env python3
"""Check a generated setup file.

Reports neighbor entries that are not mirrored (A lists B but B does not list A)
and countries that cannot be reached from the first region. The generator only
removes continents with no outside neighbor, so a pair of continents touching
only each other shows up here as unreachable.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conquestmap.setup_text import parse_setup  # noqa: E402


def find_asymmetric(neighbors: dict[int, list[int]]) -> list[tuple[int, int]]:
    missing = []
    for country, adjacent in neighbors.items():
        for neighbor in adjacent:
            if country not in neighbors.get(neighbor, []):
                missing.append((country, neighbor))
    return missing


def find_unreachable(regions: list[int], neighbors: dict[int, list[int]]) -> list[int]:
    if not regions:
        return []
    seen = {regions[0]}
    stack = [regions[0]]
    while stack:
        country = stack.pop()
        for neighbor in neighbors.get(country, []):
            if neighbor not in seen:
                seen.add(neighbor)
                stack.append(neighbor)
    return [country for country in regions if country not in seen]


def check_setup(text: str) -> list[str]:
    parsed = parse_setup(text)
    regions = [country for country, _continent in parsed["regions"]]
    problems = []
    for country, neighbor in find_asymmetric(parsed["neighbors"]):
        problems.append(f"{country} lists {neighbor} but not the reverse")
    unreachable = find_unreachable(regions, parsed["neighbors"])
    if unreachable:
        problems.append(
            "Unreachable from region "
            f"{regions[0]}: {' '.join(str(c) for c in unreachable)}"
        )
    overlap = set(parsed["wastelands"]) & set(parsed["starting_regions"])
    if overlap:
        problems.append(f"Starting regions marked as wastelands: {sorted(overlap)}")
    return problems


def main() -> None:
    parser = argparse.ArgumentParser(description="Check a generated setup file.")
    parser.add_argument("path", help="Path to setup text")
    args = parser.parse_args()

    path = Path(args.path)
    if not path.exists():
        raise SystemExit(f"File not found: {path}")

    try:
        problems = check_setup(path.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise SystemExit(f"Failed to parse {path}: {exc}")

    if not problems:
        print("No problems found.")
        return
    for problem in problems:
        print(problem)
    raise SystemExit(1)


if __name__ == "__main__":
    main()
