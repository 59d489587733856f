"""
Kick-off time parsing and the betting deadline rule

A game or global bet accepts predictions only while its start time lies in
the future. Result entry and creation are never gated.
"""
import re
from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tippy.errors import InvalidTimestampError


START_TIME_FORMAT = "%Y %m %d %H:%M"
_START_TIME_PATTERN = re.compile(r"^\d{4} \d{1,2} \d{1,2} \d{1,2}:\d{2}$")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_zone(name: str) -> ZoneInfo:
    """Look up an IANA zone name, ValueError if unknown"""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone: {name}") from exc


def parse_start_time(text: str, tz: str = "UTC") -> datetime:
    """
    Parse a "YYYY MM DD HH:MM" kick-off time

    Args:
        text: e.g. "2024 06 14 21:00"
        tz: Reference zone the wall-clock time is given in

    Returns:
        Timezone-aware datetime; a time repeated when clocks go back
        resolves to its first occurrence (fold=0)

    Raises:
        InvalidTimestampError: If text does not match the format or the
            time falls into a DST gap of the zone
    """
    cleaned = text.strip() if isinstance(text, str) else ""
    if not _START_TIME_PATTERN.match(cleaned):
        raise InvalidTimestampError(
            f"Invalid start time '{text}', expected YYYY MM DD HH:MM"
        )
    try:
        naive = datetime.strptime(cleaned, START_TIME_FORMAT)
    except ValueError as exc:
        raise InvalidTimestampError(f"Invalid start time '{text}': {exc}") from exc

    zone = resolve_zone(tz)
    aware = naive.replace(tzinfo=zone)

    # Wall-clock times skipped by a DST jump do not survive a UTC round trip
    if aware.astimezone(timezone.utc).astimezone(zone).replace(tzinfo=None) != naive:
        raise InvalidTimestampError(f"Start time '{text}' does not exist in {tz}")

    return aware


def is_open(start_time: datetime, clock: Optional[Clock] = None) -> bool:
    """True while predictions against start_time may still change"""
    now = (clock or utc_now)()
    return start_time > now
