"""Journal entry and goal records - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class Mood(Enum):
    """Mood tag attached to a journal entry."""

    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    EXCITED = "excited"
    ANXIOUS = "anxious"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def emoji(self) -> str:
        return _MOOD_EMOJI[self]

    @classmethod
    def from_value(cls, value: str | None) -> "Mood":
        """Parse a stored mood, falling back to neutral for unknown values."""
        try:
            return cls(value)
        except ValueError:
            return cls.NEUTRAL


_MOOD_EMOJI = {
    Mood.HAPPY: "😊",
    Mood.NEUTRAL: "😐",
    Mood.SAD: "😢",
    Mood.EXCITED: "🤩",
    Mood.ANXIOUS: "😰",
}


@dataclass
class Identity:
    """The authenticated user as returned by the auth provider."""

    id: str
    email: str = ""
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict) -> "Identity":
        return cls(
            id=data["id"],
            email=data.get("email") or "",
            metadata=data.get("user_metadata") or {},
        )


@dataclass
class JournalEntry:
    """A stored journal entry."""

    id: str
    user_id: str | None
    title: str
    content: str
    mood: str
    created_at: datetime

    @property
    def mood_tag(self) -> Mood:
        return Mood.from_value(self.mood)

    @classmethod
    def from_api(cls, data: dict) -> "JournalEntry":
        """Create JournalEntry from a journal_entries row."""
        return cls(
            id=str(data["id"]),
            user_id=data.get("user_id"),
            title=data["title"],
            content=data.get("content") or "",
            mood=data.get("mood") or Mood.NEUTRAL.value,
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass
class Goal:
    """A stored personal goal."""

    id: str
    user_id: str | None
    title: str
    description: str
    target_date: date | None
    progress: int
    created_at: datetime

    @classmethod
    def from_api(cls, data: dict) -> "Goal":
        """Create Goal from a goals row."""
        target = None
        if data.get("target_date"):
            target = date.fromisoformat(data["target_date"].split("T")[0])
        return cls(
            id=str(data["id"]),
            user_id=data.get("user_id"),
            title=data["title"],
            description=data.get("description") or "",
            target_date=target,
            progress=int(data.get("progress") or 0),
            created_at=datetime.fromisoformat(data["created_at"]),
        )
