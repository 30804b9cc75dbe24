from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Sequence

import httpx

from .classify import classify_event
from .config import load_config
from .errors import FixtureSourceError, ScheduleUnavailable
from .ics import iter_raw_events, parse_ics_date, require_calendar
from .models import Fixture
from .relays import RELAYS, Relay, fetch, ics_url, normalise
from .relays.fetcher import USER_AGENT
from .utils import LONDON_TZ, now_utc

logger = logging.getLogger(__name__)


def parse_calendar(text: str, now: Optional[datetime] = None, tz_name: str = LONDON_TZ) -> List[Fixture]:
    """Map every usable VEVENT in ``text`` to a Fixture, in feed order."""
    require_calendar(text)
    now = now or now_utc()
    fixtures: List[Fixture] = []
    for event in iter_raw_events(text):
        when = parse_ics_date(event["DTSTART"], tz_name)
        if when is None:
            logger.debug("Dropping event %s with undecodable DTSTART %r", event.get("UID"), event["DTSTART"])
            continue
        fixtures.append(
            classify_event(
                event["SUMMARY"],
                when,
                now,
                location=event.get("LOCATION", ""),
                description=event.get("DESCRIPTION", ""),
                uid=event.get("UID", ""),
                tz_name=tz_name,
            )
        )
    return fixtures


def _attempt(
    relay: Relay,
    target_url: str,
    client: httpx.Client,
    timeout: float,
    now: datetime,
    tz_name: str,
) -> List[Fixture]:
    resp = fetch(relay.wrap(target_url), client=client, timeout=timeout)
    text = normalise(resp, relay.envelope)
    return parse_calendar(text, now=now, tz_name=tz_name)


def get_fixtures(
    calendar_id: Optional[str] = None,
    *,
    client: Optional[httpx.Client] = None,
    now: Optional[datetime] = None,
    relays: Sequence[Relay] = RELAYS,
    timeout: Optional[float] = None,
    tz_name: Optional[str] = None,
) -> List[Fixture]:
    """Fetch the club calendar through the first relay that works.

    Relays are tried one after another in order. Raises ScheduleUnavailable,
    chained to the last failure, when none of them produced a calendar.
    """
    if calendar_id is None or timeout is None or tz_name is None:
        settings = load_config()
        calendar_id = calendar_id or settings.calendar_id
        timeout = timeout if timeout is not None else settings.timeout_seconds
        tz_name = tz_name or settings.timezone
    now = now or now_utc()
    target_url = ics_url(calendar_id)

    own_client = client is None
    if own_client:
        client = httpx.Client(headers={"User-Agent": USER_AGENT}, follow_redirects=True)

    last_error: Optional[FixtureSourceError] = None
    try:
        for i, relay in enumerate(relays, start=1):
            logger.info("Attempting fetch via relay %d (%s, %s)", i, relay.name, relay.envelope.value)
            try:
                fixtures = _attempt(relay, target_url, client, timeout, now, tz_name)
            except FixtureSourceError as e:
                logger.warning("Relay %d (%s) failed: %s", i, relay.name, e)
                last_error = e
                continue
            logger.info("Fetched %d fixtures via relay %d (%s)", len(fixtures), i, relay.name)
            return sorted(fixtures, key=lambda f: f.date)
    finally:
        if own_client:
            client.close()

    logger.error("All relays failed. Last error: %s", last_error)
    raise ScheduleUnavailable(
        "Cannot reach the schedule service. Please try again later.", last_error=last_error
    ) from last_error
