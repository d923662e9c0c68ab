"""Conversation states for Telegram bot."""

from enum import IntEnum, auto


class EntryStates(IntEnum):
    """States for the new-entry conversation."""

    TITLE = auto()
    MOOD = auto()
    CONTENT = auto()


class GoalStates(IntEnum):
    """States for the new-goal conversation."""

    TITLE = auto()
    DESCRIPTION = auto()
    TARGET_DATE = auto()
