"""KBO team names, used to split free-text schedule lines into two teams."""

from __future__ import annotations

import re

# Mapping: canonical English name -> known aliases (Korean full/short names)
_TEAM_MAP: dict[str, tuple[str, ...]] = {
    "Doosan Bears": ("두산 베어스", "두산"),
    "Hanwha Eagles": ("한화 이글스", "한화"),
    "Kia Tigers": ("KIA Tigers", "KIA 타이거즈", "KIA", "기아"),
    "Kiwoom Heroes": ("키움 히어로즈", "키움"),
    "KT Wiz": ("kt wiz", "KT 위즈", "KT", "kt"),
    "LG Twins": ("LG 트윈스", "LG"),
    "Lotte Giants": ("롯데 자이언츠", "롯데"),
    "NC Dinos": ("NC 다이노스", "NC"),
    "Samsung Lions": ("삼성 라이온즈", "삼성"),
    "SSG Landers": ("SSG 랜더스", "SSG"),
}

# Longest names first so "LG Twins" wins over "LG".
KNOWN_TEAM_NAMES: tuple[str, ...] = tuple(
    sorted(
        {name for canonical, aliases in _TEAM_MAP.items() for name in (canonical, *aliases)},
        key=len,
        reverse=True,
    )
)

_WIDE_GAP = re.compile(r"\t+|\s{2,}")


def _split_on_known_prefix(blob: str) -> tuple[str, str] | None:
    for name in KNOWN_TEAM_NAMES:
        if not blob.startswith(name):
            continue
        rest = blob[len(name):]
        if rest[:1].isspace() and rest.strip():
            return name, rest.strip()
    return None


def split_team_names(blob: str) -> tuple[str, str] | None:
    """Split ``"<team1> <team2>"`` into two names, or None when ambiguous.

    Tries, in order: a known team name at the start, a tab or run of two
    or more spaces, an even token count split in half, and first token
    versus the rest. A single token cannot be split.
    """

    cleaned = blob.strip()
    if not cleaned:
        return None

    known = _split_on_known_prefix(cleaned)
    if known:
        return known

    parts = [part for part in _WIDE_GAP.split(cleaned) if part.strip()]
    if len(parts) == 2:
        return parts[0].strip(), parts[1].strip()

    tokens = cleaned.split()
    if len(tokens) < 2:
        return None
    if len(tokens) % 2 == 0:
        half = len(tokens) // 2
        return " ".join(tokens[:half]), " ".join(tokens[half:])
    return tokens[0], " ".join(tokens[1:])
