"""Date and month filters over normalized schedule records."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Sequence, TypeVar

from ybsports.schedule.errors import ConfigError
from ybsports.schedule.schema import NormalizedGame

logger = logging.getLogger(__name__)

G = TypeVar("G", bound=NormalizedGame)


def parse_date_param(value: str | None) -> date | None:
    if value is None or not value.strip():
        return None
    cleaned = value.strip()
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", cleaned):
        raise ConfigError("date must be YYYY-MM-DD")
    try:
        return date.fromisoformat(cleaned)
    except ValueError as exc:
        raise ConfigError("date must be YYYY-MM-DD") from exc


def parse_month_param(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    cleaned = value.strip()
    match = re.fullmatch(r"(\d{4})-(\d{2})", cleaned)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise ConfigError("month must be YYYY-MM")
    return cleaned


def filter_games(
    games: Sequence[G],
    date: date | str | None = None,
    month: str | None = None,
) -> list[G]:
    """Keep games on ``date``, or in ``month`` when no date is given.

    When both are supplied the date wins and the month is ignored.
    """

    if date is not None:
        if month:
            logger.debug("Both date=%s and month=%s given; month ignored.", date, month)
        wanted = date.isoformat() if hasattr(date, "isoformat") else str(date)
        return [game for game in games if game.date == wanted]
    if month:
        return [game for game in games if game.date.startswith(month)]
    return list(games)
