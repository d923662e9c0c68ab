"""Creation form state for journal entries and goals.

A form is either Idle (closed) or Editing(fields). Field values only exist
while the form is open, so closing a form and resetting its values are the
same transition.
"""

from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from .records import Mood


@dataclass(frozen=True)
class EntryFields:
    """Values typed into the new-entry form."""

    title: str = ""
    content: str = ""
    mood: Mood = Mood.NEUTRAL

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.title.strip():
            missing.append("title")
        if not self.content.strip():
            missing.append("content")
        return missing

    def to_record(self, user_id: str | None) -> dict:
        return {
            "user_id": user_id,
            "title": self.title,
            "content": self.content,
            "mood": self.mood.value,
        }


@dataclass(frozen=True)
class GoalFields:
    """Values typed into the new-goal form."""

    title: str = ""
    description: str = ""
    target_date: str = ""

    def missing_fields(self) -> list[str]:
        return [] if self.title.strip() else ["title"]

    def to_record(self, user_id: str | None) -> dict:
        # progress is left to the store's default
        return {
            "user_id": user_id,
            "title": self.title,
            "description": self.description,
            "target_date": self.target_date.strip() or None,
        }


F = TypeVar("F", EntryFields, GoalFields)


@dataclass(frozen=True)
class Idle:
    """Form closed."""


@dataclass(frozen=True)
class Editing(Generic[F]):
    """Form open with its current field values."""

    fields: F


class Form(Generic[F]):
    """Open/closed state plus field values of one creation form."""

    def __init__(self, defaults: F):
        self.defaults = defaults
        self.state: Idle | Editing[F] = Idle()

    @property
    def is_open(self) -> bool:
        return isinstance(self.state, Editing)

    @property
    def fields(self) -> F | None:
        if isinstance(self.state, Editing):
            return self.state.fields
        return None

    def open(self) -> F:
        """Open the form, keeping any values already typed."""
        if not isinstance(self.state, Editing):
            self.state = Editing(self.defaults)
        return self.state.fields

    def toggle(self) -> bool:
        """Flip visibility. Returns True if the form is now open."""
        if self.is_open:
            self.cancel()
            return False
        self.open()
        return True

    def update(self, **changes) -> F:
        """Change field values, opening the form if needed."""
        fields = replace(self.open(), **changes)
        self.state = Editing(fields)
        return fields

    def cancel(self) -> None:
        self.state = Idle()

    def missing_fields(self) -> list[str]:
        fields = self.fields
        if fields is None:
            return []
        return fields.missing_fields()

    def ready(self) -> bool:
        """Open with every required field filled."""
        return self.is_open and not self.missing_fields()


def entry_form() -> Form[EntryFields]:
    return Form(EntryFields())


def goal_form() -> Form[GoalFields]:
    return Form(GoalFields())
