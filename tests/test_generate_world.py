import contextlib
import io
import json
import os
import tempfile
import unittest
from pathlib import Path

import generate_world

LABEL = "worldgen_cli_test"


def _cleanup_logs() -> None:
    logs = Path("logs")
    if not logs.exists():
        return
    for entry in logs.iterdir():
        if entry.is_file() and entry.name.startswith(LABEL):
            entry.unlink()


class GenerateWorldCliTests(unittest.TestCase):
    def tearDown(self) -> None:
        _cleanup_logs()

    def _run(self, argv: list[str]) -> str:
        buf = io.StringIO()
        with contextlib.redirect_stdout(buf):
            code = generate_world.main(argv + ["--label", LABEL])
        self.assertEqual(code, 0)
        return buf.getvalue()

    def test_prints_report_and_setup(self) -> None:
        out = self._run(["--count", "10", "--seed", "3"])
        self.assertIn("Country view:", out)
        self.assertIn("settings max_rounds", out)
        logs = [p for p in Path("logs").iterdir() if p.name.startswith(LABEL)]
        self.assertTrue(logs)
        self.assertIn("Grid 5x6", logs[0].read_text(encoding="utf-8"))

    def test_writes_setup_file_from_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            config_path = Path(tmp_dir) / "config.json"
            out_path = Path(tmp_dir) / "out" / "setup.txt"
            config_path.write_text(
                json.dumps({"count": 12, "seed": 7, "out": str(out_path)}), encoding="utf-8"
            )
            out = self._run(["--config", str(config_path), "--quiet"])
            self.assertNotIn("Country view:", out)
            self.assertIn(f"Saved setup to {out_path}", out)
            self.assertTrue(out_path.read_text(encoding="utf-8").startswith("settings max_rounds"))

    def test_flags_override_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            config_path = Path(tmp_dir) / "config.json"
            config_path.write_text(json.dumps({"count": 12, "seed": -1}), encoding="utf-8")
            args = generate_world._parse_args(["--config", str(config_path), "--count", "20"])
            settings = generate_world.resolve_settings(args)
            self.assertEqual(settings["count"], 20)
            self.assertGreaterEqual(settings["seed"], 0)

    def test_bad_inputs_exit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            config_path = Path(tmp_dir) / "config.json"
            config_path.write_text(json.dumps(["not", "an", "object"]), encoding="utf-8")
            with self.assertRaises(SystemExit):
                self._run(["--config", str(config_path)])
            with self.assertRaises(SystemExit):
                self._run(["--config", os.path.join(tmp_dir, "missing.json")])
        with self.assertRaises(SystemExit):
            self._run(["--count", "0"])

    def test_non_integer_config_values_exit(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            config_path = Path(tmp_dir) / "config.json"
            for config in ({"count": 12.5}, {"count": True}, {"count": 10, "seed": "7"}):
                config_path.write_text(json.dumps(config), encoding="utf-8")
                args = generate_world._parse_args(["--config", str(config_path)])
                with self.assertRaises(SystemExit):
                    generate_world.resolve_settings(args)


if __name__ == "__main__":
    unittest.main()
