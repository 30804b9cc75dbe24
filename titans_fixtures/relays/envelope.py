from __future__ import annotations

import base64
import binascii
import json
import logging

import httpx

from ..errors import CalendarFormatError, EnvelopeError
from .registry import Envelope

logger = logging.getLogger(__name__)

BASE64_MARKER = ";base64,"
MIN_LENGTH = 50


def decode_data_uri(text: str) -> str:
    """Decode ``data:...;base64,<payload>``; anything else comes back untouched."""
    if not text.startswith("data:"):
        return text
    idx = text.find(BASE64_MARKER)
    if idx == -1:
        return text
    payload = text[idx + len(BASE64_MARKER):]
    try:
        return base64.b64decode("".join(payload.split()), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        logger.warning("Failed to decode data URI from relay: %s", e)
        return text


def unwrap(resp: httpx.Response, envelope: Envelope) -> str:
    if envelope is Envelope.JSON_CONTENTS:
        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise EnvelopeError(f"Relay returned invalid JSON: {e}") from e
        if not isinstance(data, dict) or not data.get("contents"):
            raise EnvelopeError("JSON response missing 'contents' field")
        return str(data["contents"])
    if envelope is Envelope.RAW_TEXT:
        return resp.text
    raise ValueError(f"unknown envelope: {envelope!r}")


def check_payload(text: str) -> str:
    if not text or len(text) < MIN_LENGTH:
        raise EnvelopeError("Empty or invalid response from relay")
    head = text.strip()
    if head.startswith("<!DOCTYPE") or head.startswith("<html"):
        raise EnvelopeError("Relay returned HTML error page instead of ICS data")
    if "BEGIN:VCALENDAR" not in text:
        logger.warning("Invalid ICS data received, starts with: %r", text[:100])
        raise CalendarFormatError("Received data is not a valid ICS calendar file")
    return text


def normalise(resp: httpx.Response, envelope: Envelope) -> str:
    """Strip the relay envelope and return canonical calendar text."""
    text = unwrap(resp, envelope)
    text = decode_data_uri(text)
    return check_payload(text)
