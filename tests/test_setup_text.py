import unittest

from conquestmap.generator import generate
from conquestmap.model import Continent, Country, Edge, World
from conquestmap.setup_text import format_setup, parse_setup


def _small_world() -> World:
    a, b, c, d = Country(0, 0), Country(1, 0), Country(0, 1), Country(1, 1)
    world = World(
        edges=[Edge(a, b), Edge(a, c), Edge(b, d), Edge(c, d)],
        continents=[
            Continent(id=1, bonus=1, countries=[a, b]),
            Continent(id=2, bonus=0, countries=[c, d]),
        ],
        max_rounds=10,
    )
    for idx, country in enumerate([a, b, c, d]):
        world.country_ids[country] = idx
        world.countries_by_id[idx] = country
    world.wasteland_countries[b] = None
    world.starting_countries[a] = None
    world.starting_countries[d] = None
    return world


class SetupTextTests(unittest.TestCase):
    def test_format_small_world(self) -> None:
        expected = (
            "settings max_rounds 10\n\n"
            "setup_map super_regions 1 1 2 0\n\n"
            "setup_map regions 0 1 1 1 2 2 3 2\n\n"
            "setup_map neighbors 0 1,2 1 0,3 2 0,3 3 1,2\n\n"
            "setup_map wastelands 1\n\n"
            "settings starting_regions 0 3\n\n"
        )
        self.assertEqual(format_setup(_small_world()), expected)

    def test_empty_sections_keep_headers(self) -> None:
        text = format_setup(World())
        self.assertIn("setup_map wastelands\n\n", text)
        self.assertEqual(len(text.splitlines()), 12)

    def test_parse_generated_setup(self) -> None:
        world = generate(30, seed=4)
        parsed = parse_setup(format_setup(world))
        self.assertEqual(parsed["max_rounds"], world.max_rounds)
        self.assertEqual(parsed["super_regions"], [(c.id, c.bonus) for c in world.continents])
        self.assertEqual(len(parsed["regions"]), len(world.countries_by_id))
        self.assertEqual(set(parsed["neighbors"]), set(world.countries_by_id))
        self.assertEqual(
            parsed["starting_regions"], [world.country_ids[c] for c in world.starting_countries]
        )

    def test_parse_rejects_unknown_and_malformed(self) -> None:
        with self.assertRaises(ValueError):
            parse_setup("setup_map oceans 1 2\n")
        with self.assertRaises(ValueError):
            parse_setup("setup_map regions 1 2 3\n")
        with self.assertRaises(ValueError):
            parse_setup("setup_map neighbors 0 1,x\n")


if __name__ == "__main__":
    unittest.main()
