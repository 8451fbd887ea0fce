"""
Mood models
Mood categories and the daily mood check-in record.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from safespace.utils.timeutil import day_of, local_naive

DEFAULT_INTENSITY = 0.5


class MoodKind(str, Enum):
    """Mood categories; declaration order is the tie-break order for statistics"""

    HAPPY = "happy"
    CALM = "calm"
    NEUTRAL = "neutral"
    SAD = "sad"
    STRESSED = "stressed"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def emoji(self) -> str:
        return _EMOJIS[self]


_LABELS = {
    MoodKind.HAPPY: "Heureux",
    MoodKind.CALM: "Calme",
    MoodKind.NEUTRAL: "Neutre",
    MoodKind.SAD: "Triste",
    MoodKind.STRESSED: "Stressé",
}

_EMOJIS = {
    MoodKind.HAPPY: "😄",
    MoodKind.CALM: "😌",
    MoodKind.NEUTRAL: "😐",
    MoodKind.SAD: "😢",
    MoodKind.STRESSED: "😫",
}


class MoodEntry(BaseModel):
    """A mood check-in"""

    id: Optional[int] = None
    mood: MoodKind
    date: datetime = Field(default_factory=datetime.now)
    note: Optional[str] = None
    intensity: float = Field(default=DEFAULT_INTENSITY, ge=0.0, le=1.0)

    class Config:
        from_attributes = True

    @field_validator("intensity", mode="before")
    @classmethod
    def _default_intensity(cls, value):
        return DEFAULT_INTENSITY if value is None else value

    @field_validator("date")
    @classmethod
    def _local_date(cls, value: datetime) -> datetime:
        return local_naive(value)

    def is_on(self, day) -> bool:
        """True when the entry was recorded on the calendar day of `day` (a date or datetime)"""
        return self.date.date() == day_of(day)
