"""Supported upstream schedule sources and their URL templates."""

from __future__ import annotations

import calendar
import os
from dataclasses import dataclass
from datetime import date, timedelta

from ybsports.schedule.errors import ConfigError

TEXT_URL_TEMPLATE = os.getenv(
    "KBO_TEXT_URL",
    "https://mykbostats.com/schedule/week_of/{from_date}",
)
JSON_URL_TEMPLATE = os.getenv(
    "KBO_JSON_URL",
    "https://api-gw.sports.naver.com/schedule/games"
    "?fields=basic&upperCategoryId=kbaseball&categoryId=kbo"
    "&fromDate={from_date}&toDate={to_date}&size=500",
)
DOM_URL_TEMPLATE = os.getenv(
    "KBO_DOM_URL",
    "https://m.sports.naver.com/kbaseball/schedule/index?category=kbo&date={from_date}",
)


@dataclass(frozen=True)
class ScheduleSource:
    key: str
    url_template: str
    accept: str = "text/html"
    # Days one upstream page covers; None means a single request spans any window.
    page_days: int | None = None


SOURCES: dict[str, ScheduleSource] = {
    "text": ScheduleSource(key="text", url_template=TEXT_URL_TEMPLATE, page_days=7),
    "json": ScheduleSource(key="json", url_template=JSON_URL_TEMPLATE, accept="application/json"),
    "dom": ScheduleSource(key="dom", url_template=DOM_URL_TEMPLATE, page_days=1),
}


def get_source(key: str | None) -> ScheduleSource:
    normalized = (key or "").strip().lower()
    source = SOURCES.get(normalized)
    if source is None:
        supported = ", ".join(sorted(SOURCES))
        raise ConfigError(f"source must be one of: {supported}")
    return source


def month_bounds(month: str) -> tuple[date, date]:
    year, month_number = (int(part) for part in month.split("-"))
    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


def resolve_window(
    game_date: date | None,
    month: str | None,
    today: date,
) -> tuple[date, date]:
    """Return the (from, to) date range the upstream request should cover."""

    if game_date is not None:
        return game_date, game_date
    if month:
        return month_bounds(month)
    return today, today


def build_source_url(
    source: ScheduleSource,
    from_date: date,
    to_date: date,
    api_key: str = "",
) -> str:
    return source.url_template.format(
        from_date=from_date.isoformat(),
        to_date=to_date.isoformat(),
        date_compact=from_date.strftime("%Y%m%d"),
        year=from_date.year,
        month=f"{from_date.month:02d}",
        api_key=api_key,
    )


def page_windows(
    source: ScheduleSource,
    from_date: date,
    to_date: date,
) -> list[tuple[date, date]]:
    """Split a date range into the (from, to) windows of the source's pages."""

    if source.page_days is None:
        return [(from_date, to_date)]

    step = timedelta(days=source.page_days)
    windows: list[tuple[date, date]] = []
    page_start = from_date
    while page_start <= to_date:
        windows.append((page_start, min(page_start + step - timedelta(days=1), to_date)))
        page_start += step
    return windows
