from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional
from zoneinfo import ZoneInfo

from .errors import CalendarFormatError
from .utils import LONDON_TZ

logger = logging.getLogger(__name__)

RawEvent = Dict[str, str]

_LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")
_DATETIME_RE = re.compile(r"(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})Z?")
_DATE_RE = re.compile(r"(\d{4})(\d{2})(\d{2})")


def unfold_lines(text: str) -> List[str]:
    """Join continuation lines (leading space or tab) onto the line before them."""
    unfolded: List[str] = []
    for line in _LINE_BREAK_RE.split(text):
        if line.startswith((" ", "\t")):
            # nothing to continue yet: drop it
            if unfolded:
                unfolded[-1] += line.lstrip(" \t")
        else:
            unfolded.append(line)
    return unfolded


def iter_raw_events(text: str) -> Iterator[RawEvent]:
    """Yield one key/value mapping per VEVENT carrying both DTSTART and SUMMARY.

    Property parameters are dropped from keys (``DTSTART;TZID=..`` is stored
    as ``DTSTART``) and values are kept verbatim, still escaped.
    """
    current: Optional[RawEvent] = None
    for line in unfold_lines(text):
        if line.startswith("BEGIN:VEVENT"):
            if current is not None:
                logger.debug("Nested BEGIN:VEVENT, discarding the open event")
            current = {}
            continue
        if line.startswith("END:VEVENT"):
            if current is not None and current.get("DTSTART") and current.get("SUMMARY"):
                yield current
            current = None
            continue
        if current is None:
            continue
        sep = line.find(":")
        if sep > -1:
            key = line[:sep].split(";", 1)[0]
            current[key] = line[sep + 1:]


def parse_ics_date(value: str, tz_name: str = LONDON_TZ) -> Optional[datetime]:
    """Decode a basic-format DATE-TIME or DATE value.

    Timestamps are read as UTC whether or not they carry the trailing ``Z``.
    All-day dates become local midnight in ``tz_name``, returned in UTC.
    Returns None for anything else.
    """
    value = (value or "").strip()
    if not value:
        return None
    try:
        m = _DATETIME_RE.fullmatch(value)
        if m:
            year, month, day, hour, minute, second = (int(g) for g in m.groups())
            return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)
        m = _DATE_RE.fullmatch(value)
        if m:
            year, month, day = (int(g) for g in m.groups())
            local = datetime(year, month, day, tzinfo=ZoneInfo(tz_name))
            return local.astimezone(timezone.utc)
    except ValueError:
        return None
    return None


def require_calendar(text: str) -> str:
    if "BEGIN:VCALENDAR" not in text:
        raise CalendarFormatError("Received data is not a valid ICS calendar file")
    return text
