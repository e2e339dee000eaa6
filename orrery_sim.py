#!/usr/bin/env python3
"""
Orrery command-line driver.

What this module does
- Loads a body catalogue, builds a SimulationController at the requested date and ticks it
  forward in fixed steps, the same way an interactive renderer would every frame.
- Prints each body's heliocentric position and the size of its windowed trail, which is
  what a renderer would draw.

Running
1) Install: `pip install -e .`
2) Run: `python orrery_sim.py --date 2024-01-01 --days 365 --step 1 --span 90`
"""
import argparse
import logging
import sys
from typing import List, Optional

from orrery.presets_loader import DEFAULT_CATALOGUE, list_catalogues, load_catalogue
from orrery.simulation import SimulationController
from orrery.time_utils import datetime_to_julian_day, format_julian_day, now_julian_day, parse_date
from orrery.trails import TrailSettings

logger = logging.getLogger("orrery")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Propagate solar-system bodies and report their trails.")
    p.add_argument("--date", help="start date, YYYY-MM-DD or 'YYYY-MM-DD HH:MM' (UTC); default now")
    p.add_argument("--days", type=float, default=365.0, help="simulated days to run (negative runs backwards)")
    p.add_argument("--step", type=float, default=1.0, help="days per tick")
    p.add_argument("--span", type=float, default=None,
                   help="trail display window in days; default derives it from each orbital period")
    p.add_argument("--history", type=float, default=None, help="days of trail history kept (1-3650)")
    p.add_argument("--max-points", type=int, default=None, help="stored points per trail")
    p.add_argument("--catalogue", default=DEFAULT_CATALOGUE, help="catalogue JSON file name or path")
    p.add_argument("--list", action="store_true", help="list bundled catalogues and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list:
        for fn, display in list_catalogues():
            print(f"{fn:28s} {display}")
        return 0

    if args.date:
        try:
            start_jd = datetime_to_julian_day(parse_date(args.date))
        except ValueError as exc:
            parser.error(str(exc))
    else:
        start_jd = now_julian_day()

    bodies = load_catalogue(args.catalogue)
    if not bodies:
        logger.error("No bodies loaded from %s", args.catalogue)
        return 1

    overrides = {}
    if args.history is not None:
        overrides["time_span"] = args.history
    if args.max_points is not None:
        overrides["max_points"] = args.max_points

    sim = SimulationController(bodies, julian_day=start_jd, trail_settings=TrailSettings(**overrides))
    logger.info("Start %s (JD %.3f), %d bodies", format_julian_day(start_jd), start_jd, len(bodies))
    end_jd = sim.run(args.days, args.step)
    logger.info("End   %s (JD %.3f)", format_julian_day(end_jd), end_jd)

    print(f"{'body':10s} {'x [AU]':>10s} {'y [AU]':>10s} {'z [AU]':>10s} {'r [AU]':>9s} {'trail':>6s}")
    for b in sim.bodies:
        trail = sim.get_trail(b.name, args.span)
        n = len(trail) if trail is not None else 0
        print(f"{b.name:10s} {b.x:10.5f} {b.y:10.5f} {b.z:10.5f} {b.r:9.5f} {n:6d}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
