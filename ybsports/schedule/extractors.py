"""Extraction strategies that turn upstream documents into ExtractedGame records.

Every strategy parses records one at a time. A record that does not have
the minimal shape (two team names, a date, integer scores where scores are
expected) is skipped; it never fails the whole batch.
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Optional

from bs4 import BeautifulSoup

from ybsports.schedule.errors import ConfigError, ParseError
from ybsports.schedule.schema import ExtractedGame, StatusCode
from ybsports.schedule.teams import split_team_names

logger = logging.getLogger(__name__)

HTML_PARSER = "lxml"


def _safe_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    match = re.match(r"(\d{4})[-./]?(\d{2})[-./]?(\d{2})", cleaned)
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def _parse_time(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    match = re.search(r"(\d{1,2}):(\d{2})", value)
    if not match:
        return None
    return f"{int(match.group(1)):02d}:{match.group(2)}"


class Extractor(ABC):
    """Turns one raw upstream document into a list of ExtractedGame."""

    source_key: str = ""

    @abstractmethod
    def _candidates(self, raw: str) -> Iterable[Any]:
        """Yield the raw per-game fragments contained in the document."""

    @abstractmethod
    def _parse_candidate(
        self, candidate: Any, default_date: date | None
    ) -> Optional[ExtractedGame]:
        """Parse one fragment; return None to skip it."""

    def extract(self, raw: str, *, default_date: date | None = None) -> list[ExtractedGame]:
        games: list[ExtractedGame] = []
        skipped = 0
        for candidate in self._candidates(raw):
            game = self._parse_candidate(candidate, default_date)
            if game is None:
                skipped += 1
                continue
            games.append(game)
        logger.debug(
            "Extracted %s games source=%s skipped=%s",
            len(games),
            self.source_key,
            skipped,
        )
        return games


# ── Text-pattern strategy ───────────────────────────────────────────────

LINE_PATTERN = re.compile(
    r"^(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})\s+"
    r"(?P<teams>.+?)\s+"
    r"(?P<score1>\d+)\s+(?P<score2>\d+)$"
)


class TextPatternExtractor(Extractor):
    """Matches ``YYYY/MM/DD <team1> <team2> <score1> <score2>`` lines."""

    source_key = "text"

    def _candidates(self, raw: str) -> Iterable[str]:
        if "<" in raw and ">" in raw:
            text = BeautifulSoup(raw, HTML_PARSER).get_text("\n")
        else:
            text = raw
        for line in text.splitlines():
            stripped = line.strip()
            if stripped:
                yield stripped

    def _parse_candidate(
        self, candidate: str, default_date: date | None
    ) -> Optional[ExtractedGame]:
        match = LINE_PATTERN.match(candidate)
        if not match:
            return None
        try:
            game_date = date(
                int(match.group("year")),
                int(match.group("month")),
                int(match.group("day")),
            )
        except ValueError:
            return None
        teams = split_team_names(match.group("teams"))
        if teams is None:
            return None
        return ExtractedGame(
            date=game_date,
            team1=teams[0],
            team2=teams[1],
            score1=int(match.group("score1")),
            score2=int(match.group("score2")),
            status_code="finished",
        )


# ── Structured-payload strategy ─────────────────────────────────────────

SOURCE_STATUS_CODES: dict[str, StatusCode] = {
    "BEFORE": "scheduled",
    "END": "finished",
    "RESULT": "finished",
    "LIVE": "live",
}

DATE_FIELDS = ("gameDate", "date", "gameDateTime")
TIME_FIELDS = ("gameTime", "time", "gameDateTime")
STATUS_FIELDS = ("statusCode", "gameStatus", "status")
HOME_NAME_FIELDS = ("homeTeamName", "homeTeam.name", "home.name", "homeTeam")
AWAY_NAME_FIELDS = ("awayTeamName", "awayTeam.name", "away.name", "awayTeam")
HOME_SCORE_FIELDS = ("homeTeamScore", "homeTeam.score", "home.score", "homeScore")
AWAY_SCORE_FIELDS = ("awayTeamScore", "awayTeam.score", "away.score", "awayScore")


def _lookup(record: dict[str, Any], path: str) -> Any:
    value: Any = record
    for key in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _first(record: dict[str, Any], paths: Iterable[str]) -> Any:
    """Return the first non-empty scalar found among ``paths``."""

    for path in paths:
        value = _lookup(record, path)
        if value is None or isinstance(value, (dict, list)):
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def map_status_code(value: Any) -> StatusCode:
    if isinstance(value, str):
        return SOURCE_STATUS_CODES.get(value.strip().upper(), "scheduled")
    return "scheduled"


class JsonPayloadExtractor(Extractor):
    """Reads the ``games`` array of a JSON schedule payload."""

    source_key = "json"

    def _candidates(self, raw: str) -> Iterable[Any]:
        try:
            document = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise ParseError(f"Schedule payload is not valid JSON: {exc}") from exc

        if not isinstance(document, dict):
            return []
        games = document.get("games")
        if games is None:
            games = _lookup(document, "result.games")
        if not isinstance(games, list):
            return []
        return games

    def _parse_candidate(
        self, candidate: Any, default_date: date | None
    ) -> Optional[ExtractedGame]:
        if not isinstance(candidate, dict):
            return None

        home = _first(candidate, HOME_NAME_FIELDS)
        away = _first(candidate, AWAY_NAME_FIELDS)
        if not isinstance(home, str) or not isinstance(away, str):
            return None

        game_date = _parse_date(_first(candidate, DATE_FIELDS)) or default_date
        if game_date is None:
            return None

        return ExtractedGame(
            date=game_date,
            team1=home.strip(),
            team2=away.strip(),
            score1=_safe_int(_first(candidate, HOME_SCORE_FIELDS)),
            score2=_safe_int(_first(candidate, AWAY_SCORE_FIELDS)),
            time=_parse_time(_first(candidate, TIME_FIELDS)),
            status_code=map_status_code(_first(candidate, STATUS_FIELDS)),
        )


# ── DOM-selector strategy ───────────────────────────────────────────────


@dataclass(frozen=True)
class DomSelectors:
    item: str = "li.game_item"
    time: str = ".game_time"
    home: str = ".team_home .team_name"
    away: str = ".team_away .team_name"
    home_score: str = ".team_home .team_score"
    away_score: str = ".team_away .team_score"
    date_attr: str = "data-date"


def _select_text(node: Any, selector: str) -> str:
    found = node.select_one(selector)
    if found is None:
        return ""
    return found.get_text(strip=True)


class DomSelectorExtractor(Extractor):
    """Reads schedule list items from an HTML fragment by CSS selectors."""

    source_key = "dom"

    def __init__(self, selectors: DomSelectors | None = None) -> None:
        self.selectors = selectors or DomSelectors()

    def _candidates(self, raw: str) -> Iterable[Any]:
        soup = BeautifulSoup(raw, HTML_PARSER)
        return soup.select(self.selectors.item)

    def _parse_candidate(
        self, candidate: Any, default_date: date | None
    ) -> Optional[ExtractedGame]:
        home = _select_text(candidate, self.selectors.home)
        away = _select_text(candidate, self.selectors.away)
        if not home or not away:
            return None

        game_date = _parse_date(candidate.get(self.selectors.date_attr)) or default_date
        if game_date is None:
            return None

        home_score = _safe_int(_select_text(candidate, self.selectors.home_score))
        away_score = _safe_int(_select_text(candidate, self.selectors.away_score))
        finished = home_score is not None and away_score is not None

        return ExtractedGame(
            date=game_date,
            team1=home,
            team2=away,
            score1=home_score if finished else None,
            score2=away_score if finished else None,
            time=_parse_time(_select_text(candidate, self.selectors.time)),
            status_code="finished" if finished else "scheduled",
        )


EXTRACTORS: dict[str, type[Extractor]] = {
    "text": TextPatternExtractor,
    "json": JsonPayloadExtractor,
    "dom": DomSelectorExtractor,
}


def get_extractor(source_key: str) -> Extractor:
    extractor_cls = EXTRACTORS.get(source_key)
    if extractor_cls is None:
        raise ConfigError(f"No extractor registered for source: {source_key}")
    return extractor_cls()
