from __future__ import annotations

import re

CLUB = "Titans"
CLUB_FULL = "London Titans"

_ESCAPE_RE = re.compile(r"\\([\\;,nN])")
_CLUB_PREFIX_RE = re.compile(r"^(London )?Titans\s+", re.IGNORECASE)
_CLUB_FULL_RE = re.compile(r"London Titans", re.IGNORECASE)


def _unescape(m: re.Match) -> str:
    ch = m.group(1)
    return " " if ch in "nN" else ch


def unescape_text(value: str) -> str:
    """Undo iCalendar TEXT escaping in one pass; line breaks and NBSPs become plain spaces."""
    text = _ESCAPE_RE.sub(_unescape, value or "")
    return text.replace("\u00a0", " ")


def strip_club_prefix(name: str) -> str:
    """'London Titans Reserves' -> 'Reserves'; falls back to the input if nothing is left."""
    stripped = _CLUB_PREFIX_RE.sub("", name).strip()
    return stripped or name


def collapse_club_name(name: str) -> str:
    return _CLUB_FULL_RE.sub(CLUB, name).strip()


def is_bare_club(name: str) -> bool:
    return name.strip().lower() in (CLUB.lower(), CLUB_FULL.lower())


def mentions_club(text: str) -> bool:
    return "titan" in text.lower()


def same_name(a: str, b: str) -> bool:
    return a.strip().lower() == b.strip().lower()
