"""Telegram command handlers."""

import logging
from datetime import date

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import ContextTypes, ConversationHandler

from .core.records import Mood
from .core.render import LOADING_MESSAGE, render_goals, render_journal
from .dashboard import DashboardView
from .telegram_format import reply_markdown
from .telegram_states import EntryStates, GoalStates

logger = logging.getLogger(__name__)


def get_dashboard(context: ContextTypes.DEFAULT_TYPE) -> DashboardView:
    return context.application.bot_data["dashboard"]


def get_timezone(context: ContextTypes.DEFAULT_TYPE) -> str | None:
    config = context.application.bot_data.get("config")
    return config.timezone if config else None


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Welcome to PipoJournal.\n\n"
        "Commands:\n"
        "/journal - Your journal entries\n"
        "/goals - Your goals\n"
        "/entry - Write a new journal entry\n"
        "/goal - Set a new goal\n"
        "/signout - Sign out\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*PipoJournal Commands*\n\n"
        "/journal - List journal entries, newest first\n"
        "/goals - List goals with progress\n"
        "/entry - Write a new journal entry\n"
        "/goal - Set a new goal\n"
        "/cancel - Cancel the current form\n"
        "/signout - End your session\n",
        parse_mode="Markdown",
    )


async def journal_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /journal command - reload and show entries."""
    view = get_dashboard(context)
    if view.loading:
        await update.message.reply_text(LOADING_MESSAGE)
        await view.wait_until_loaded()
    else:
        await view.reload_entries()
    await reply_markdown(update.message, render_journal(view.entries.records, get_timezone(context)))


async def goals_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /goals command - reload and show goals."""
    view = get_dashboard(context)
    await view.reload_goals()
    await reply_markdown(update.message, render_goals(view.goals.records))


async def signout_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /signout command."""
    view = get_dashboard(context)
    logger.info(f"Sign-out requested by user {update.effective_user.id}")
    view.sign_out()
    await update.message.reply_text("Signing out.")


# ============== New Entry Conversation ==============


def _mood_keyboard() -> InlineKeyboardMarkup:
    buttons = [
        InlineKeyboardButton(f"{mood.emoji} {mood.label}", callback_data=f"mood:{mood.value}")
        for mood in Mood
    ]
    return InlineKeyboardMarkup([buttons[:3], buttons[3:]])


async def entry_start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Start the new-entry conversation."""
    get_dashboard(context).entries.form.open()
    await update.message.reply_text("*New Journal Entry*\n\nWhat's on your mind?", parse_mode="Markdown")
    return EntryStates.TITLE


async def entry_title_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the entry title."""
    text = update.message.text.strip()
    if not text:
        await update.message.reply_text("A title is required.")
        return EntryStates.TITLE

    get_dashboard(context).entries.form.update(title=text)
    await update.message.reply_text("How are you feeling?", reply_markup=_mood_keyboard())
    return EntryStates.MOOD


async def entry_mood_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle mood selection."""
    query = update.callback_query
    await query.answer()

    if not query.data.startswith("mood:"):
        return EntryStates.MOOD

    mood = Mood.from_value(query.data[5:])
    get_dashboard(context).entries.form.update(mood=mood)
    await query.edit_message_text(
        f"Mood: {mood.emoji} {mood.label}\n\nWrite your thoughts...",
    )
    return EntryStates.CONTENT


async def entry_content_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle entry content and save the entry."""
    view = get_dashboard(context)
    text = update.message.text.strip()
    if not text:
        await update.message.reply_text("Content is required.")
        return EntryStates.CONTENT

    view.entries.form.update(content=text)
    if not await view.create_entry():
        await update.message.reply_text(
            "Could not save your entry. Send the content again to retry, or /cancel."
        )
        return EntryStates.CONTENT

    await update.message.reply_text("Entry saved.")
    await reply_markdown(update.message, render_journal(view.entries.records, get_timezone(context)))
    return ConversationHandler.END


# ============== New Goal Conversation ==============


def _is_skip(text: str) -> bool:
    return text.strip().split("@")[0] == "/skip"


async def goal_start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Start the new-goal conversation."""
    get_dashboard(context).goals.form.open()
    await update.message.reply_text("*New Goal*\n\nWhat do you want to achieve?", parse_mode="Markdown")
    return GoalStates.TITLE


async def goal_title_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the goal title."""
    text = update.message.text.strip()
    if not text:
        await update.message.reply_text("A title is required.")
        return GoalStates.TITLE

    get_dashboard(context).goals.form.update(title=text)
    await update.message.reply_text("Describe your goal, or /skip.")
    return GoalStates.DESCRIPTION


async def goal_description_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the goal description (or /skip)."""
    if not _is_skip(update.message.text):
        get_dashboard(context).goals.form.update(description=update.message.text.strip())
    await update.message.reply_text("Target date (YYYY-MM-DD), or /skip.")
    return GoalStates.TARGET_DATE


async def goal_target_date_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the target date (or /skip) and save the goal."""
    view = get_dashboard(context)
    text = update.message.text.strip()
    target = "" if _is_skip(text) else text

    if target:
        try:
            date.fromisoformat(target)
        except ValueError:
            await update.message.reply_text("Use YYYY-MM-DD, or /skip.")
            return GoalStates.TARGET_DATE

    view.goals.form.update(target_date=target)
    if not await view.create_goal():
        await update.message.reply_text(
            "Could not save your goal. Send the target date again to retry, or /cancel."
        )
        return GoalStates.TARGET_DATE

    await update.message.reply_text("Goal created.")
    await reply_markdown(update.message, render_goals(view.goals.records))
    return ConversationHandler.END


async def cancel_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Cancel whichever form is open."""
    view = get_dashboard(context)
    view.entries.form.cancel()
    view.goals.form.cancel()
    await update.message.reply_text("Cancelled.")
    return ConversationHandler.END
