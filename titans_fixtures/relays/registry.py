from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple
from urllib.parse import quote

ICS_URL = "https://calendar.google.com/calendar/ical/{calendar_id}/public/basic.ics"


class Envelope(str, Enum):
    RAW_TEXT = "raw-text"
    JSON_CONTENTS = "json-contents"


@dataclass(frozen=True)
class Relay:
    name: str
    template: str  # "{url}" is replaced by the percent-encoded target URL
    envelope: Envelope

    def wrap(self, target_url: str) -> str:
        return self.template.format(url=quote(target_url, safe=""))


# Tried in this order, one at a time.
RELAYS: Tuple[Relay, ...] = (
    Relay("corsproxy", "https://corsproxy.io/?{url}", Envelope.RAW_TEXT),
    Relay("allorigins-get", "https://api.allorigins.win/get?url={url}", Envelope.JSON_CONTENTS),
    Relay("codetabs", "https://api.codetabs.com/v1/proxy?quest={url}", Envelope.RAW_TEXT),
    Relay("allorigins-raw", "https://api.allorigins.win/raw?url={url}", Envelope.RAW_TEXT),
)


def ics_url(calendar_id: str) -> str:
    return ICS_URL.format(calendar_id=quote(calendar_id, safe=""))
