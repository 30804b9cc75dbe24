from __future__ import annotations

from typing import Optional


class FixtureSourceError(Exception):
    """Base class for everything the fixture pipeline raises."""


class RelayError(FixtureSourceError):
    """A relay could not deliver the feed; the next relay should be tried."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RelayTimeout(RelayError):
    pass


class EnvelopeError(RelayError):
    """The relay answered, but not with calendar text."""


class CalendarFormatError(FixtureSourceError):
    pass


class ScheduleUnavailable(FixtureSourceError):
    """Raised once every relay has failed. The last failure is kept."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.last_error = last_error
