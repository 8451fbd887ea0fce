"""
Time helpers
Every timestamp is handled as naive local time so that stored ISO strings sort
chronologically.
"""

from datetime import date, datetime
from typing import Optional, Union


def now_local() -> datetime:
    return datetime.now()


def local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to local time and drop the tzinfo"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def day_of(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return local_naive(value).date()
    return value


def to_storage(value: datetime) -> str:
    # fixed width, so string comparison in SQL matches chronological order
    return local_naive(value).isoformat(timespec="microseconds")


def from_storage(text: str) -> datetime:
    return local_naive(datetime.fromisoformat(text))


def epoch_millis(value: Optional[datetime] = None) -> int:
    value = value or now_local()
    return int(value.timestamp()) * 1000 + value.microsecond // 1000
