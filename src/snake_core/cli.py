"""Command-line tools for running the simulation core headless."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-core",
        description="Headless simulation and speed-curve tools for snake-core.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play autopilot games through the game loop.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--games", type=int, default=10)
    sim_p.add_argument("--grid-size", type=str, default=None)
    sim_p.add_argument(
        "--speed", type=str, default=None,
        choices=["slow", "normal", "fast"],
    )
    sim_p.add_argument("--max-frames", type=int, default=20_000)
    sim_p.add_argument("--fps", type=float, default=60.0)
    sim_p.add_argument("--turn-prob", type=float, default=0.1)
    sim_p.add_argument("--seed", type=int, default=42)

    # --- curve ---
    curve_p = sub.add_parser(
        "curve", help="Print the target interval per food eaten.",
    )
    curve_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    curve_p.add_argument(
        "--speed", type=str, default=None,
        choices=["slow", "normal", "fast"],
    )
    curve_p.add_argument("--foods", type=int, default=30)

    return parser


def _load_config(args: argparse.Namespace):
    """Config from --config plus flag overrides, or None if the file is unusable."""
    from snake_core.config import GameConfig

    config = GameConfig()
    if args.config:
        try:
            config = GameConfig.load(args.config)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Cannot read config %s: %s", args.config, exc)
            return None

    overrides: dict = {}
    if getattr(args, "speed", None) is not None:
        overrides["initial_speed_preset"] = args.speed
    if getattr(args, "grid_size", None) is not None:
        overrides["grid_size"] = args.grid_size
    if overrides:
        merged = config.to_dict()
        merged.update(overrides)
        config = GameConfig.from_preferences(merged)
    return config


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_core.simulate import simulate_games

    if args.fps <= 0:
        logger.error("--fps must be positive.")
        return 2

    config = _load_config(args)
    if config is None:
        return 2

    result = simulate_games(
        config=config,
        num_games=args.games,
        frame_ms=1000.0 / args.fps,
        max_frames=args.max_frames,
        turn_prob=args.turn_prob,
        seed=args.seed,
    )
    print(result.summary())  # noqa: T201
    return 0


def _run_curve(args: argparse.Namespace) -> int:
    from snake_core.simulate import curve_table

    config = _load_config(args)
    if config is None:
        return 2
    print(f"{'foods':>5}  {'interval':>9}  {'level':>5}")  # noqa: T201
    for eaten, interval, level in curve_table(config, args.foods):
        print(f"{eaten:>5}  {interval:>7.1f}ms  {level:>5}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-core`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "curve": _run_curve,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
