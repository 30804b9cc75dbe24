"""Turn a calendar event's free-form text into a Fixture.

Event titles are written by hand, so this is a cascade of heuristics rather
than a grammar. The order of the steps matters: training beats everything,
an explicit "A v B" title beats the weekday/weekend fallback, and the
competition rules are checked most specific first.
"""
from __future__ import annotations

import re
import uuid
from datetime import datetime
from typing import Optional, Tuple

from .models import Fixture, Result
from .normalise import (
    CLUB,
    collapse_club_name,
    is_bare_club,
    mentions_club,
    same_name,
    strip_club_prefix,
    unescape_text,
)
from .utils import LONDON_TZ, is_weekday

SEPARATOR_RE = re.compile(r"^(.*?)(\s+(?:v|vs|V|VS|Vs|against)\.?\s+|\s+[-–—]\s+)(.*)$")
SCORE_RE = re.compile(r"\b(\d+)\s*[-–—]\s*(\d+)\b")
_DASHES_RE = re.compile(r"[-–—]")

DEFAULT_COMPETITION = "Fixture"
CLUB_EVENT = "Club Event"
INTERNAL_EVENT = "Internal Match / Event"

# (needles, tag, competition name or None to leave it alone); first hit wins
COMPETITION_RULES: Tuple[Tuple[Tuple[str, ...], str, Optional[str]], ...] = (
    (("gfsn shield",), "GFSN SHIELD", "GFSN Shield"),
    (("gfsn development",), "GFSN DEV", "GFSN Development League"),
    (("lul cup",), "LUL CUP", "LUL Cup"),
    (("london dev league",), "LDL", "London Dev League"),
    (("gfsn matchweek", "gfsn"), "GFSN", None),
    (("lul matchweek", "lul"), "LUL", None),
)

GENERIC_COMPETITIONS = (
    ("league", "League Match"),
    ("cup", "Cup Match"),
    ("friendly", "Friendly"),
)


def _contains(needles, *texts: str) -> bool:
    return any(n in t for n in needles for t in texts)


def split_teams(summary: str) -> Optional[Tuple[str, str, int, int]]:
    """Split "A v B" / "A - B" titles.

    Returns (A, B, end of A, start of B) or None when there is no separator
    or either side is blank.
    """
    m = SEPARATOR_RE.match(summary)
    if not m:
        return None
    if not m.group(1).strip() or not m.group(3).strip():
        return None
    return m.group(1), m.group(3), m.end(1), m.start(3)


def find_score(description: str, summary: str) -> Tuple[Optional[re.Match], bool]:
    """Score from the description, else the summary. Second item: came from summary."""
    m = SCORE_RE.search(description)
    if m:
        return m, False
    m = SCORE_RE.search(summary)
    return m, m is not None


def normalise_score(raw: str) -> str:
    return _DASHES_RE.sub("-", "".join(raw.split()))


def match_result(score1: int, score2: int, is_home: bool) -> Result:
    ours, theirs = (score1, score2) if is_home else (score2, score1)
    if ours > theirs:
        return "W"
    if ours < theirs:
        return "L"
    return "D"


def _strip_score_text(name: str, raw: str) -> str:
    return name.replace(raw, "", 1).strip(" \t-–—")


def _identity_failsafe(team_name: str, opponent: str) -> str:
    # The club never plays itself.
    if opponent and (same_name(team_name, opponent) or is_bare_club(opponent)):
        return CLUB_EVENT
    return opponent


def round_suffixes(competition: str, desc: str) -> str:
    comp_lower = competition.lower()
    if "quarter-final" in desc or "quarter final" in desc:
        if "quarter" not in comp_lower:
            competition += " Quarter-Final"
    elif "semi-final" in desc or "semi final" in desc:
        if "semi" not in comp_lower:
            competition += " Semi-Final"
    elif "final" in desc and "semi" not in desc:
        if "final" not in comp_lower:
            competition += " Final"

    if "plate" in desc and "plate" not in competition.lower():
        competition += " Plate"
    if "trophy" in desc and "trophy" not in competition.lower():
        competition += " Trophy"
    return competition


def classify_event(
    summary: str,
    date: datetime,
    now: datetime,
    location: str = "",
    description: str = "",
    uid: str = "",
    tz_name: str = LONDON_TZ,
) -> Fixture:
    summary = unescape_text(summary).strip() or "Match"
    location = unescape_text(location) or "TBC"
    description = unescape_text(description)

    is_home = True
    opponent = ""
    team_name = CLUB
    competition = DEFAULT_COMPETITION
    competition_tag: Optional[str] = None
    score: Optional[str] = None
    result: Optional[Result] = None

    summary_lower = summary.lower()
    teams = None

    if "training" in summary_lower:
        team_name = strip_club_prefix(summary)
        competition = "Training"
    else:
        teams = split_teams(summary)
        if teams:
            side_a, side_b = teams[0], teams[1]
            if mentions_club(side_b):
                is_home = False
                opponent, team_name = side_a.strip(), side_b.strip()
            elif mentions_club(side_a):
                opponent, team_name = side_b.strip(), side_a.strip()
            else:
                opponent = side_b.strip()
                if len(side_a) < 30:
                    team_name = side_a.strip()
        elif is_weekday(date, tz_name):
            # midweek entries are sessions and socials for one of our own sides
            team_name = strip_club_prefix(summary)
        else:
            opponent = summary
            if is_bare_club(summary):
                opponent = INTERNAL_EVENT
            elif mentions_club(summary):
                team_name, opponent = summary, CLUB_EVENT

    opponent = _identity_failsafe(team_name, opponent)

    m, from_summary = find_score(description, summary)
    if m:
        score = normalise_score(m.group(0))
        result = match_result(int(m.group(1)), int(m.group(2)), is_home)

    if m and from_summary and opponent:
        raw = m.group(0)
        cleaned = {}
        if teams and m.start() < teams[2] and m.end() > teams[3]:
            # "Stonewall FC 2 - 3 London Titans": the score dash was taken as the separator
            side_a, side_b, a_end, b_start = teams
            head = summary[m.start():a_end]
            tail = summary[b_start:m.end()]
            clean_a = side_a[: len(side_a) - len(head)].strip(" \t-–—")
            clean_b = side_b[len(tail):].strip(" \t-–—")
            if clean_a and clean_b:
                cleaned = {side_a.strip(): clean_a, side_b.strip(): clean_b}
        if cleaned:
            team_name = cleaned.get(team_name, team_name)
            opponent = cleaned.get(opponent, opponent)
        else:
            opponent = _strip_score_text(opponent, raw)
            team_name = _strip_score_text(team_name, raw)

    team_name = collapse_club_name(team_name) or CLUB
    opponent = _identity_failsafe(team_name, opponent)

    desc = description.lower()
    for needles, tag, name in COMPETITION_RULES:
        if _contains(needles, desc, summary_lower):
            competition_tag = tag
            if name:
                competition = name
            break

    if competition == DEFAULT_COMPETITION:
        for needle, name in GENERIC_COMPETITIONS:
            if _contains((needle,), desc, summary_lower):
                competition = name
                break
        else:
            if not opponent or teams is None:
                competition = CLUB_EVENT

    competition = round_suffixes(competition, desc)

    return Fixture(
        id=uid or f"ics-{uuid.uuid4().hex}",
        date=date,
        opponent=opponent,
        team_name=team_name,
        is_home=is_home,
        location=location,
        competition=competition,
        competition_tag=competition_tag,
        status="completed" if date < now else "upcoming",
        score=score,
        result=result,
    )
