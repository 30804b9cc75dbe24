import time

import httpx
import pytest

from titans_fixtures.errors import RelayError, RelayTimeout
from titans_fixtures.relays.fetcher import fetch

from conftest import SAMPLE_FEED

URL = "https://relay.test/ics"


class SlowDrip(httpx.SyncByteStream):
    """Sends a byte at a time, each well inside the read timeout."""

    def __init__(self, chunks=10, delay=0.05):
        self.chunks = chunks
        self.delay = delay

    def __iter__(self):
        for _ in range(self.chunks):
            time.sleep(self.delay)
            yield b"x"


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_total_deadline_beats_slow_drip():
    with _client(lambda request: httpx.Response(200, stream=SlowDrip())) as client:
        started = time.monotonic()
        with pytest.raises(RelayTimeout):
            fetch(URL, client=client, timeout=0.12)
        assert time.monotonic() - started < 0.4


def test_body_and_charset_kept():
    with _client(lambda request: httpx.Response(
        200, content=SAMPLE_FEED.encode("utf-8"), headers={"Content-Type": "text/calendar; charset=utf-8"},
    )) as client:
        resp = fetch(URL, client=client, timeout=5)
    assert resp.text == SAMPLE_FEED


def test_json_body_survives():
    with _client(lambda request: httpx.Response(200, json={"contents": "BEGIN:VCALENDAR"})) as client:
        assert fetch(URL, client=client, timeout=5).json() == {"contents": "BEGIN:VCALENDAR"}


def test_non_2xx_is_relay_error():
    with _client(lambda request: httpx.Response(404, text="not here")) as client:
        with pytest.raises(RelayError) as excinfo:
            fetch(URL, client=client, timeout=5)
    assert excinfo.value.status_code == 404
    assert not isinstance(excinfo.value, RelayTimeout)


def test_read_timeout_is_relay_timeout():
    def stalled(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with _client(stalled) as client:
        with pytest.raises(RelayTimeout):
            fetch(URL, client=client, timeout=5)
