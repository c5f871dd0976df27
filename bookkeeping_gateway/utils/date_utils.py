"""Date manipulation utilities"""

from datetime import date, datetime
from typing import Optional


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp as sent by the API (``Z`` suffix allowed)"""
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a date or a full timestamp down to its calendar date"""
    if not value:
        return None
    if len(value) == 10:
        return date.fromisoformat(value)
    return parse_datetime(value).date()


def is_same_day(moment: Optional[datetime], day: date) -> bool:
    """Whether ``moment`` falls on ``day`` in the server's local time"""
    return moment is not None and moment.astimezone().date() == day
