"""Functional core - pure logic with no I/O."""

from .records import Goal, Identity, JournalEntry, Mood
from .forms import Editing, EntryFields, Form, GoalFields, Idle, entry_form, goal_form
from .session import (
    SessionAbsent,
    SessionLoading,
    SessionResolved,
    SessionState,
    current_user_id,
)
from .render import progress_bar, render_goals, render_journal

__all__ = [
    # Records
    "Goal",
    "Identity",
    "JournalEntry",
    "Mood",
    # Forms
    "Editing",
    "EntryFields",
    "Form",
    "GoalFields",
    "Idle",
    "entry_form",
    "goal_form",
    # Session
    "SessionAbsent",
    "SessionLoading",
    "SessionResolved",
    "SessionState",
    "current_user_id",
    # Rendering
    "progress_bar",
    "render_goals",
    "render_journal",
]
