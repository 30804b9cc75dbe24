from .registry import RELAYS, Envelope, Relay, ics_url
from .fetcher import fetch
from .envelope import normalise

__all__ = [
    "RELAYS",
    "Envelope",
    "Relay",
    "ics_url",
    "fetch",
    "normalise",
]
