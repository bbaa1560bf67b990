from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from .errors import MalformedTimestampError

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
# chrono serialises sub-second precision when it is non-zero; it is dropped
_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d{1,9})?$")


def parse_timestamp(value: object) -> dt.datetime:
    """Parse a record timestamp into a naive datetime (whole seconds)."""
    if not isinstance(value, str) or not _TIMESTAMP_RE.match(value):
        raise MalformedTimestampError(value)
    try:
        return dt.datetime.strptime(value[:19], TIMESTAMP_FORMAT)
    except ValueError as exc:
        # e.g. 2024-02-30T00:00:00
        raise MalformedTimestampError(value) from exc


def to_epoch_ms(value: str) -> int:
    """Wall-clock timestamp string -> epoch milliseconds, read as UTC."""
    t = parse_timestamp(value).replace(tzinfo=dt.timezone.utc)
    return int(t.timestamp()) * 1000


def from_epoch_ms(ms: int) -> dt.datetime:
    return dt.datetime.fromtimestamp(ms / 1000, tz=dt.timezone.utc)


def fat_mass(weight: Optional[float], fat_percent: Optional[float]) -> Optional[float]:
    if not weight or fat_percent is None:
        return None
    return weight * fat_percent / 100.0
