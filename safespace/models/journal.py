"""
Journal model
Free-text journal entries, optionally tagged with the day's mood.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator
from safespace.models.mood import MoodKind
from safespace.utils.timeutil import epoch_millis, local_naive, now_local


class JournalEntry(BaseModel):
    """Journal entry"""

    id: str
    date: datetime
    content: str
    mood: Optional[MoodKind] = None

    class Config:
        from_attributes = True

    @field_validator("content")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("journal content must not be empty")
        return value

    @field_validator("date")
    @classmethod
    def _local_date(cls, value: datetime) -> datetime:
        return local_naive(value)

    @classmethod
    def compose(cls, content: str, mood: Optional[MoodKind] = None,
                now: Optional[datetime] = None) -> "JournalEntry":
        """
        Build a new entry whose id is derived from the creation time.

        Args:
            content: entry text
            mood: mood recorded earlier the same day, if any
            now: creation time, defaults to the current time

        Returns:
            the new, unsaved entry
        """
        now = now or now_local()
        return cls(id=str(epoch_millis(now)), date=now, content=content, mood=mood)
