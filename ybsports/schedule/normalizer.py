"""Map extractor output onto the canonical game record served to the frontend."""

from __future__ import annotations

import re
from typing import Iterable

from ybsports.schedule.schema import (
    LEAGUE,
    STATUS_LABELS,
    STATUS_SCHEDULED,
    ExtractedGame,
    NormalizedGame,
)

_SCORE_PATTERN = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")


def format_score(home_score: int | None, away_score: int | None) -> str:
    if home_score is None or away_score is None:
        return ""
    return f"{home_score} - {away_score}"


def _renormalize(game: NormalizedGame) -> NormalizedGame:
    match = _SCORE_PATTERN.match(game.score)
    score = format_score(int(match.group(1)), int(match.group(2))) if match else ""
    return NormalizedGame(
        date=game.date,
        time=game.time or "",
        home=game.home,
        away=game.away,
        score=score,
        status=game.status or STATUS_SCHEDULED,
        league=LEAGUE,
    )


def normalize(game: ExtractedGame | NormalizedGame) -> NormalizedGame:
    if isinstance(game, NormalizedGame):
        return _renormalize(game)

    status = STATUS_LABELS.get(game.status_code or "", STATUS_SCHEDULED)
    return NormalizedGame(
        date=game.date.isoformat(),
        time=game.time or "",
        home=game.team1,
        away=game.team2,
        score=format_score(game.score1, game.score2),
        status=status,
        league=LEAGUE,
    )


def normalize_all(games: Iterable[ExtractedGame | NormalizedGame]) -> list[NormalizedGame]:
    return [normalize(game) for game in games]
