from __future__ import annotations

import logging
import time
from typing import List, Optional

import httpx

from ..errors import RelayError, RelayTimeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 25.0
USER_AGENT = "titans-fixtures/0.1"

# headers that describe the body as it came off the wire, not the decoded bytes we keep
_WIRE_HEADERS = ("content-encoding", "content-length", "transfer-encoding")


def fetch(url: str, client: Optional[httpx.Client] = None, timeout: float = DEFAULT_TIMEOUT) -> httpx.Response:
    """One GET, no retries, finished within ``timeout`` seconds in total.

    httpx timeouts apply per phase (each read resets the clock), so the body is
    streamed and checked against an overall deadline as well.
    """
    own_client = client is None
    if own_client:
        client = httpx.Client(headers={"User-Agent": USER_AGENT}, follow_redirects=True)
    deadline = time.monotonic() + timeout
    try:
        with client.stream("GET", url, timeout=timeout) as resp:
            if not resp.is_success:
                raise RelayError(f"GET {url} returned HTTP {resp.status_code}", status_code=resp.status_code)
            chunks: List[bytes] = []
            for chunk in resp.iter_bytes():
                chunks.append(chunk)
                if time.monotonic() > deadline:
                    raise RelayTimeout(f"Request timed out after {timeout:g}s: {url}")
            headers = [(k, v) for k, v in resp.headers.items() if k.lower() not in _WIRE_HEADERS]
            body = httpx.Response(
                resp.status_code,
                headers=headers,
                content=b"".join(chunks),
                request=resp.request,
            )
    except httpx.TimeoutException as e:
        raise RelayTimeout(f"Request timed out after {timeout:g}s: {url}") from e
    except httpx.HTTPError as e:
        raise RelayError(f"GET {url} failed: {e}") from e
    finally:
        if own_client:
            client.close()

    logger.debug("GET %s -> %s (%d bytes)", url, body.status_code, len(body.content))
    return body
