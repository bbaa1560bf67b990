from __future__ import annotations


class HealthPiError(Exception):
    """Base for everything this package raises on purpose."""


class FetchError(HealthPiError):
    """The API call failed, returned a non-2xx status or an unusable body."""


class MalformedRecordError(HealthPiError, ValueError):
    """A record from the wire does not have the expected shape."""


class MalformedTimestampError(MalformedRecordError):
    def __init__(self, timestamp: object) -> None:
        super().__init__(f"timestamp {timestamp!r} is not in YYYY-MM-DDTHH:mm:ss form")
        self.timestamp = timestamp
