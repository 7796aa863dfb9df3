"""Quick probe for KBO schedule source availability."""

from __future__ import annotations

import argparse
import logging

from ybsports.schedule.errors import ConfigError, ScheduleError
from ybsports.schedule.filters import parse_date_param, parse_month_param
from ybsports.schedule.service import load_schedule
from ybsports.schedule.sources import SOURCES
from ybsports.settings import get_settings


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Probe a KBO schedule source and print the game count.",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=get_settings().kbo_source,
        choices=sorted(SOURCES),
        help="Schedule source type (default: KBO_SOURCE or json).",
    )
    parser.add_argument(
        "--date",
        type=str,
        default=None,
        help="Date in YYYY-MM-DD format.",
    )
    parser.add_argument(
        "--month",
        type=str,
        default=None,
        help="Month in YYYY-MM format (ignored when --date is given).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    args = _parse_args(argv)

    try:
        game_date = parse_date_param(args.date)
        month = parse_month_param(args.month)
    except ConfigError as exc:
        raise SystemExit(str(exc))

    try:
        games = load_schedule(args.source, date=game_date, month=month)
    except ScheduleError as exc:
        logging.error("KBO schedule error: %s", exc)
        cause = getattr(exc, "cause", None)
        if cause:
            logging.error("Details: %s", cause)
        raise SystemExit(1)

    logging.info(
        "Fetched %s games source=%s date=%s month=%s",
        len(games),
        args.source,
        args.date,
        args.month,
    )
    for game in games:
        logging.info(
            "%s %s %s vs %s %s %s",
            game.date,
            game.time,
            game.home,
            game.away,
            game.score,
            game.status,
        )


if __name__ == "__main__":
    main()
