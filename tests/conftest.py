from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List

import httpx
import pytest

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)

# Saturday 10 Oct 2026, Wednesday 14 Oct, Tuesday 20 Oct, Sunday 25 Oct (all afternoon UTC)
SATURDAY = datetime(2026, 10, 10, 14, 0, tzinfo=timezone.utc)
WEDNESDAY = datetime(2026, 10, 14, 19, 0, tzinfo=timezone.utc)
TUESDAY = datetime(2026, 10, 20, 19, 0, tzinfo=timezone.utc)
SUNDAY = datetime(2026, 10, 25, 14, 0, tzinfo=timezone.utc)


def vevent(dtstart: str, summary: str, uid: str = "", **props: str) -> str:
    lines = ["BEGIN:VEVENT", f"DTSTART:{dtstart}", f"SUMMARY:{summary}"]
    if uid:
        lines.append(f"UID:{uid}")
    for key, value in props.items():
        lines.append(f"{key.upper()}:{value}")
    lines.append("END:VEVENT")
    return "\r\n".join(lines)


def vcalendar(*events: str) -> str:
    head = [
        "BEGIN:VCALENDAR",
        "PRODID:-//Google Inc//Google Calendar 70.9054//EN",
        "VERSION:2.0",
        "CALSCALE:GREGORIAN",
        "X-WR-CALNAME:London Titans Fixtures",
    ]
    return "\r\n".join(head + list(events) + ["END:VCALENDAR", ""])


SAMPLE_FEED = vcalendar(
    vevent("20261025T140000Z", "London Titans vs Clapton FC", uid="evt-3@google.com",
           description="LUL Matchweek 4", location="Hackney Marshes\\, Pitch 7"),
    vevent("20261010T140000Z", "Stonewall FC 2 - 3 London Titans", uid="evt-1@google.com",
           description="GFSN Shield Quarter-Final"),
    vevent("20261014T190000Z", "Titans Reserves Training", uid="evt-2@google.com"),
)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_feed() -> str:
    return SAMPLE_FEED


Handler = Callable[[httpx.Request], httpx.Response]


class RelayRouter:
    """Routes mocked requests by relay host/path and records what was asked for."""

    def __init__(self, routes: Dict[str, Handler]) -> None:
        self.routes = routes
        self.calls: List[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        for prefix, handler in self.routes.items():
            if url.startswith(prefix):
                self.calls.append(prefix)
                return handler(request)
        raise AssertionError(f"unexpected request {url}")


@pytest.fixture
def make_client():
    clients: List[httpx.Client] = []

    def _make(routes: Dict[str, Handler]):
        router = RelayRouter(routes)
        client = httpx.Client(transport=httpx.MockTransport(router))
        clients.append(client)
        return client, router

    yield _make
    for c in clients:
        c.close()
