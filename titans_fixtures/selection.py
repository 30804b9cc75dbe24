from __future__ import annotations

import calendar
from collections import OrderedDict
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional

from .models import Fixture
from .utils import LONDON_TZ, is_weekday, to_local


class FilterType(str, Enum):
    ALL = "ALL"
    HOME = "HOME"
    AWAY = "AWAY"


def filter_fixtures(fixtures: Iterable[Fixture], kind: FilterType = FilterType.ALL) -> List[Fixture]:
    if kind is FilterType.HOME:
        return [f for f in fixtures if f.is_home]
    if kind is FilterType.AWAY:
        return [f for f in fixtures if not f.is_home]
    return list(fixtures)


def is_derby(fixture: Fixture) -> bool:
    return "titan" in fixture.opponent.lower()


def local_day(fixture: Fixture, tz_name: str = LONDON_TZ) -> date:
    return to_local(fixture.date, tz_name).date()


def group_by_month(fixtures: Iterable[Fixture], tz_name: str = LONDON_TZ) -> Dict[str, List[Fixture]]:
    """Group by "October 2026" style labels, keeping the input order."""
    groups: Dict[str, List[Fixture]] = OrderedDict()
    for f in fixtures:
        label = to_local(f.date, tz_name).strftime("%B %Y")
        groups.setdefault(label, []).append(f)
    return groups


def fixtures_on(fixtures: Iterable[Fixture], day: date, tz_name: str = LONDON_TZ) -> List[Fixture]:
    return [f for f in fixtures if local_day(f, tz_name) == day]


def in_month(fixtures: Iterable[Fixture], year: int, month: int, tz_name: str = LONDON_TZ) -> List[Fixture]:
    out = []
    for f in fixtures:
        d = local_day(f, tz_name)
        if d.year == year and d.month == month:
            out.append(f)
    return out


def hidden_weekday_count(fixtures: Iterable[Fixture], year: int, month: int, tz_name: str = LONDON_TZ) -> int:
    """How many Mon-Fri fixtures a weekends-only view of the month leaves out."""
    return sum(1 for f in in_month(fixtures, year, month, tz_name) if is_weekday(f.date, tz_name))


def first_upcoming(fixtures: Iterable[Fixture]) -> Optional[Fixture]:
    return next((f for f in fixtures if f.status == "upcoming"), None)


def month_cells(year: int, month: int) -> List[date]:
    """Dates for a Monday-first grid covering the month, padded to whole weeks."""
    first = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    lead = first.weekday()
    total = lead + days_in_month
    total += (-total) % 7
    start = first - timedelta(days=lead)
    return [start + timedelta(days=i) for i in range(total)]
