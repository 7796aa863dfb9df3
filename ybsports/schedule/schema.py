"""Data contracts for the KBO schedule pipeline."""

from datetime import date as Date
from typing import Literal, Optional

from pydantic import BaseModel

LEAGUE = "KBO"
STATUS_SCHEDULED = "예정"
STATUS_LIVE = "경기중"
STATUS_FINISHED = "종료"

StatusCode = Literal["scheduled", "live", "finished"]

STATUS_LABELS: dict[str, str] = {
    "scheduled": STATUS_SCHEDULED,
    "live": STATUS_LIVE,
    "finished": STATUS_FINISHED,
}


class ExtractedGame(BaseModel):
    """
    Loosely-typed game record produced by an extractor; never persisted.
    """

    date: Date
    team1: str
    team2: str

    score1: Optional[int] = None
    score2: Optional[int] = None
    time: Optional[str] = None
    status_code: Optional[StatusCode] = None


class NormalizedGame(BaseModel):
    """
    Canonical record returned to the frontend. Field names are part of the
    public contract.
    """

    date: str
    time: str = ""
    home: str
    away: str
    score: str = ""
    status: Literal["예정", "경기중", "종료"] = STATUS_SCHEDULED
    league: Literal["KBO"] = LEAGUE
