"""Fetch, extract, normalize and filter KBO schedule data for one request."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from ybsports.schedule.extractors import get_extractor
from ybsports.schedule.fetcher import fetch_page
from ybsports.schedule.filters import filter_games
from ybsports.schedule.normalizer import normalize_all
from ybsports.schedule.schema import ExtractedGame, NormalizedGame
from ybsports.schedule.sources import build_source_url, get_source, page_windows, resolve_window
from ybsports.settings import get_settings

logger = logging.getLogger(__name__)

Fetch = Callable[..., str]


def today_local() -> date:
    return datetime.now(ZoneInfo(get_settings().timezone)).date()


def _fetch_and_extract(
    source_key: str,
    game_date: date | None,
    month: str | None,
    today: date,
    fetch: Fetch,
) -> list[ExtractedGame]:
    source = get_source(source_key)
    extractor = get_extractor(source.key)
    from_date, to_date = resolve_window(game_date, month, today)
    windows = page_windows(source, from_date, to_date)
    api_key = get_settings().kbo_api_key

    logger.info(
        "Fetching KBO schedule source=%s from=%s to=%s pages=%s",
        source.key,
        from_date,
        to_date,
        len(windows),
    )
    games: list[ExtractedGame] = []
    for page_from, page_to in windows:
        url = build_source_url(source, page_from, page_to, api_key)
        raw = fetch(url, accept=source.accept)
        games.extend(extractor.extract(raw, default_date=game_date or page_from))
    logger.info("Extracted %s KBO games source=%s", len(games), source.key)
    return games


def load_schedule(
    source_key: str,
    *,
    date: date | None = None,
    month: str | None = None,
    today: date | None = None,
    fetch: Fetch = fetch_page,
) -> list[NormalizedGame]:
    """Return normalized games for ``date`` or ``month``.

    Raises FetchError when the upstream is unreachable and ParseError when
    its document cannot be decoded; callers turn both into a degraded
    response.
    """

    resolved_today = today or today_local()
    extracted = _fetch_and_extract(source_key, date, month, resolved_today, fetch)
    return filter_games(normalize_all(extracted), date=date, month=month)


def load_extracted(
    source_key: str,
    *,
    date: date,
    fetch: Fetch = fetch_page,
) -> list[ExtractedGame]:
    """Return the pre-normalized records for a single date."""

    extracted = _fetch_and_extract(source_key, date, None, date, fetch)
    return [game for game in extracted if game.date == date]
