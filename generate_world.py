from __future__ import annotations

import argparse
import datetime as dt
import json
import os
import random
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from conquestmap.generator import WorldGenerator
from conquestmap.report import format_report, render_layout_png
from conquestmap.setup_text import format_setup

DEFAULTS: Dict[str, Any] = {
    "count": 42,
    "seed": None,
    "out": None,
    "label": "worldgen",
    "show": False,
}


class RunLog:
    """Plain-text run log under logs/, one file per run."""

    def __init__(self, *, run_label: str) -> None:
        os.makedirs("logs", exist_ok=True)
        run_id = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.log_path = os.path.join("logs", f"{run_label}_{run_id}.log")
        self._log_fp = open(self.log_path, "w", encoding="utf-8")

    def close(self) -> None:
        self._log_fp.close()

    def log(self, msg: str) -> None:
        self._log_fp.write(msg + "\n")
        self._log_fp.flush()


def _load_config(path: str) -> Dict[str, Any]:
    config_path = Path(path)
    if not config_path.exists():
        raise SystemExit(f"Config file not found: {config_path}")
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Failed to read JSON from {config_path}: {exc}")
    if not isinstance(data, dict):
        raise SystemExit(f"Expected top-level object in {config_path}.")
    unknown = sorted(set(data) - set(DEFAULTS))
    if unknown:
        raise SystemExit(f"Unknown config keys in {config_path}: {', '.join(unknown)}")
    return data


def _normalize_seed(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    seed = int(raw)
    if seed < 0:
        return random.SystemRandom().randint(0, 2**31 - 1)
    return seed


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a random conquest map.")
    parser.add_argument("--config", type=str, default=None, help="Optional JSON config file")
    parser.add_argument("--count", type=int, default=None, help="Approximate number of countries")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (negative: fresh seed)")
    parser.add_argument("--out", type=str, default=None, help="Write setup text to this path")
    parser.add_argument("--label", type=str, default=None, help="Run label used for the log file")
    parser.add_argument("--show", action="store_true", help="Render the continent layout PNG")
    parser.add_argument("--quiet", action="store_true", help="Skip the grid and continent report")
    return parser.parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> Dict[str, Any]:
    settings = dict(DEFAULTS)
    if args.config:
        settings.update(_load_config(args.config))
    for key in ("count", "seed", "out", "label"):
        value = getattr(args, key)
        if value is not None:
            settings[key] = value
    if args.show:
        settings["show"] = True
    for key in ("count", "seed"):
        value = settings[key]
        if value is None and key == "seed":
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise SystemExit(f"Setting {key!r} must be an integer, got {value!r}")
    settings["seed"] = _normalize_seed(settings["seed"])
    return settings


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = resolve_settings(args)

    run_log = RunLog(run_label=settings["label"])
    try:
        run_log.log(f"Settings: {settings}")
        try:
            generator = WorldGenerator(
                settings["count"],
                rng=random.Random(settings["seed"]),
                log_fn=run_log.log,
            )
        except ValueError as exc:
            raise SystemExit(str(exc))
        world = generator.run()

        if not args.quiet:
            print(format_report(generator, world), end="")

        setup = format_setup(world)
        if settings["out"]:
            out_path = Path(settings["out"])
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_text(setup, encoding="utf-8")
            print(f"Saved setup to {out_path}")
        else:
            print(setup, end="")

        if settings["show"]:
            png_path = Path("visualizations") / f"{settings['label']}_layout.png"
            render_layout_png(generator, world, out_path=png_path)
            print(f"Saved layout PNG to {png_path}")
    finally:
        run_log.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
