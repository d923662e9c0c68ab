"""Markdown rendering of the dashboard tabs - pure functions."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from .records import Goal, JournalEntry

LOADING_MESSAGE = "Loading..."
EMPTY_JOURNAL_MESSAGE = "No journal entries yet. Start writing!"
EMPTY_GOALS_MESSAGE = "No goals yet. Set your first goal!"
NO_TARGET_DATE = "No target date set"


def format_timestamp(moment: datetime, timezone: str | None = None) -> str:
    """Format as 'March 5, 2025 • 9:07 PM' in the given timezone."""
    if timezone and moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(timezone))
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{moment.strftime('%B')} {moment.day}, {moment.year} • {hour}:{moment.minute:02d} {suffix}"


def format_day(day: date) -> str:
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def progress_bar(percent: int, width: int = 20) -> str:
    """Text progress bar, e.g. '[#####---------------] 25%'."""
    percent = max(0, min(100, percent))
    filled = round(width * percent / 100)
    return f"[{'#' * filled}{'-' * (width - filled)}] {percent}%"


def render_entry(entry: JournalEntry, timezone: str | None = None) -> str:
    lines = [
        f"### {entry.title} {entry.mood_tag.emoji}",
        f"_{format_timestamp(entry.created_at, timezone)}_",
    ]
    if entry.content:
        lines.append("")
        lines.append(entry.content)
    return "\n".join(lines)


def render_goal(goal: Goal) -> str:
    target = f"Target: {format_day(goal.target_date)}" if goal.target_date else NO_TARGET_DATE
    lines = [f"### {goal.title}", f"_{target}_"]
    if goal.description:
        lines.append("")
        lines.append(goal.description)
    lines.append("")
    lines.append(f"`{progress_bar(goal.progress)}`")
    return "\n".join(lines)


def render_journal(entries: list[JournalEntry], timezone: str | None = None) -> str:
    """Journal tab body. Entries are shown in the order given."""
    if not entries:
        return f"## My Journal\n\n{EMPTY_JOURNAL_MESSAGE}"
    cards = "\n\n".join(render_entry(e, timezone) for e in entries)
    return f"## My Journal\n\n{cards}"


def render_goals(goals: list[Goal]) -> str:
    """Goals tab body. Goals are shown in the order given."""
    if not goals:
        return f"## My Goals\n\n{EMPTY_GOALS_MESSAGE}"
    cards = "\n\n".join(render_goal(g) for g in goals)
    return f"## My Goals\n\n{cards}"
