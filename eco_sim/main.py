# eco_sim/main.py
from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from .sim.config import SIM, Settings
from .sim.live import LiveSim
from .sim.metrics import HistoryCsvLogger, summarize_population


def _add_toggle(parser: argparse.ArgumentParser, name: str, default: bool, help: str) -> None:
    parser.add_argument(f"--{name}", dest=name, action=argparse.BooleanOptionalAction,
                        default=default, help=help)


def build_parser() -> argparse.ArgumentParser:
    d = Settings()
    parser = argparse.ArgumentParser(description="Plant / herbivore / carnivore ecosystem (headless run)")
    parser.add_argument("--seconds", type=float, default=SIM.seconds, help="simulated seconds to run")
    parser.add_argument("--fps", type=int, default=SIM.fps, help="frames per simulated second (dt = 1/fps)")
    parser.add_argument("--seed", type=int, default=SIM.seed)
    parser.add_argument("--herb", type=int, default=d.init_herbivores)
    parser.add_argument("--carn", type=int, default=d.init_carnivores)
    parser.add_argument("--plants", type=int, default=d.init_plants)
    parser.add_argument("--regen", type=float, default=d.plant_regen, help="plants per second before season")
    parser.add_argument("--cap", type=int, default=d.plant_cap, help="plant capacity")
    parser.add_argument("--herb-speed", type=float, default=d.herb_speed)
    parser.add_argument("--carn-speed", type=float, default=d.carn_speed)
    parser.add_argument("--vision", type=float, default=d.vision_range)
    parser.add_argument("--move-cost", type=float, default=d.move_cost)
    _add_toggle(parser, "flocking", d.flocking, "herbivore flocking")
    _add_toggle(parser, "territory", d.territory, "carnivore territories")
    _add_toggle(parser, "memory", d.memory, "remember last food sighting")
    _add_toggle(parser, "season", d.season, "seasonal plant regrowth")
    parser.add_argument("--paused", action="store_true", help="keep agents frozen (plants still regrow)")
    parser.add_argument("--csv", type=str, default=SIM.track_csv, help="append samples here ('' disables)")
    parser.add_argument("--print-every", type=int, default=SIM.print_every,
                        help="print one line every N stats samples (0 = only the final line)")
    parser.add_argument("--verbose", "-v", action="count", default=0)
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    s = Settings(
        plant_regen=args.regen,
        plant_cap=args.cap,
        herb_speed=args.herb_speed,
        carn_speed=args.carn_speed,
        vision_range=args.vision,
        move_cost=args.move_cost,
        flocking=args.flocking,
        territory=args.territory,
        memory=args.memory,
        season=args.season,
        init_herbivores=args.herb,
        init_carnivores=args.carn,
        init_plants=args.plants,
    )
    s.validate()
    return s


def _line(summary: dict) -> str:
    return (
        f"[eco_sim] t={summary['time']:7.1f} | "
        f"H={summary['herbivores']:4d} C={summary['carnivores']:4d} P={summary['plants']:4d} | "
        f"herb speed={summary['avg_herb_speed']:.2f} vision={summary['avg_herb_vision']:.1f} | "
        f"carn speed={summary['avg_carn_speed']:.2f} vision={summary['avg_carn_vision']:.1f}"
    )


def run(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING if args.verbose == 0 else (logging.INFO if args.verbose == 1 else logging.DEBUG)
    logging.basicConfig(level=level, format="[%(name)s] %(levelname)s %(message)s")

    if args.fps <= 0:
        parser.error("--fps must be positive")
    try:
        settings = settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    live = LiveSim(settings, seed=args.seed)
    if args.paused:
        live.stop()
    logger = HistoryCsvLogger(args.csv) if args.csv else None

    dt = 1.0 / args.fps
    frames = int(round(args.seconds * args.fps))
    samples = 0
    for _ in range(frames):
        sample = live.step(dt)
        if sample is None:
            continue
        samples += 1
        if logger is not None:
            logger.append_sample(live.world, sample)
        if args.print_every and samples % args.print_every == 0:
            print(_line(summarize_population(live.world)))

    print(_line(summarize_population(live.world)))
    if logger is not None:
        print(f"[eco_sim] session {logger.session_id}: {logger.rows_written} samples -> {args.csv}")
    return 0


if __name__ == "__main__":
    raise SystemExit(run())
