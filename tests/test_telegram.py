"""Tests for the Telegram bot handlers and formatting."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import telegramify_markdown
from telegram.ext import ConversationHandler

from pipojournal.config import Config
from pipojournal.core.records import Identity, Mood
from pipojournal.dashboard import DashboardView
from pipojournal.ports.record_store import GOALS, JOURNAL_ENTRIES
from pipojournal.telegram_bot import AuthFilter, create_application
from pipojournal.telegram_format import MAX_MESSAGE_LENGTH, reply_markdown, split_chunks
from pipojournal.telegram_handlers import (
    cancel_handler,
    entry_content_handler,
    entry_mood_handler,
    entry_start_handler,
    entry_title_handler,
    goal_description_handler,
    goal_start_handler,
    goal_target_date_handler,
    goal_title_handler,
    goals_handler,
    journal_handler,
    signout_handler,
)
from pipojournal.telegram_states import EntryStates, GoalStates

from fakes import FakeAuth, FakeStore, entry_row, goal_row


def make_update(text: str = "", user_id: int = 42) -> MagicMock:
    update = MagicMock()
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.effective_user.id = user_id
    update.callback_query = None
    return update


def make_callback(data: str) -> MagicMock:
    update = MagicMock()
    update.callback_query.data = data
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    return update


def replies(update: MagicMock) -> str:
    return "\n".join(call.args[0] for call in update.message.reply_text.call_args_list)


@pytest.fixture
def auth():
    return FakeAuth(Identity(id="u1"))


@pytest.fixture
def store():
    return FakeStore(entries=[entry_row(1)], goals=[goal_row(1, progress=30)])


@pytest_asyncio.fixture
async def view(auth, store):
    view = DashboardView(auth, store)
    view.mount()
    await view.settle()
    yield view
    await view.close()


@pytest.fixture
def context(view):
    context = MagicMock()
    context.application.bot_data = {"dashboard": view, "config": Config(timezone="UTC")}
    return context


class TestListCommands:
    @pytest.mark.asyncio
    async def test_journal_reloads_and_renders(self, view, context, store):
        store.rows[JOURNAL_ENTRIES].insert(0, entry_row(5, title="Fresh"))
        update = make_update("/journal")

        await journal_handler(update, context)

        assert "Fresh" in replies(update)
        assert update.message.reply_text.call_args.kwargs["parse_mode"] == "MarkdownV2"

    @pytest.mark.asyncio
    async def test_journal_empty_state(self, view, context, store):
        store.rows[JOURNAL_ENTRIES] = []
        update = make_update("/journal")

        await journal_handler(update, context)

        assert "No journal entries yet" in replies(update)

    @pytest.mark.asyncio
    async def test_goals(self, view, context):
        update = make_update("/goals")

        await goals_handler(update, context)

        assert "Goal 1" in replies(update)
        assert "30%" in replies(update)

    @pytest.mark.asyncio
    async def test_signout(self, view, context, auth):
        update = make_update("/signout")

        await signout_handler(update, context)
        await view.settle()

        assert auth.end_session_calls == 1


class TestEntryConversation:
    @pytest.mark.asyncio
    async def test_full_flow(self, view, context, store):
        assert await entry_start_handler(make_update("/entry"), context) == EntryStates.TITLE
        assert view.entries.form.is_open

        assert await entry_title_handler(make_update("Good day"), context) == EntryStates.MOOD
        assert await entry_mood_handler(make_callback("mood:excited"), context) == EntryStates.CONTENT
        assert view.entries.form.fields.mood == Mood.EXCITED

        update = make_update("Shipped the release.")
        assert await entry_content_handler(update, context) == ConversationHandler.END

        assert store.inserts == [
            (
                JOURNAL_ENTRIES,
                {"user_id": "u1", "title": "Good day", "content": "Shipped the release.", "mood": "excited"},
            )
        ]
        assert not view.entries.form.is_open
        assert "Entry saved." in replies(update)

    @pytest.mark.asyncio
    async def test_blank_title_stays(self, view, context):
        await entry_start_handler(make_update("/entry"), context)
        update = make_update("   ")

        assert await entry_title_handler(update, context) == EntryStates.TITLE
        assert "required" in replies(update)

    @pytest.mark.asyncio
    async def test_failed_save_keeps_form(self, view, context, store):
        store.fail_insert.add(JOURNAL_ENTRIES)
        await entry_start_handler(make_update("/entry"), context)
        await entry_title_handler(make_update("Draft"), context)
        update = make_update("Some thoughts")

        assert await entry_content_handler(update, context) == EntryStates.CONTENT
        assert view.entries.form.fields.title == "Draft"
        assert "Could not save" in replies(update)

    @pytest.mark.asyncio
    async def test_cancel(self, view, context):
        await entry_start_handler(make_update("/entry"), context)

        assert await cancel_handler(make_update("/cancel"), context) == ConversationHandler.END
        assert not view.entries.form.is_open


class TestGoalConversation:
    @pytest.mark.asyncio
    async def test_skip_description_and_date(self, view, context, store):
        assert await goal_start_handler(make_update("/goal"), context) == GoalStates.TITLE
        assert await goal_title_handler(make_update("Run 10k"), context) == GoalStates.DESCRIPTION
        assert await goal_description_handler(make_update("/skip"), context) == GoalStates.TARGET_DATE

        update = make_update("/skip")
        assert await goal_target_date_handler(update, context) == ConversationHandler.END

        assert store.inserts == [
            (GOALS, {"user_id": "u1", "title": "Run 10k", "description": "", "target_date": None})
        ]
        assert "Goal created." in replies(update)

    @pytest.mark.asyncio
    async def test_with_description_and_date(self, view, context, store):
        await goal_start_handler(make_update("/goal"), context)
        await goal_title_handler(make_update("Run 10k"), context)
        await goal_description_handler(make_update("Sub 50 minutes"), context)
        await goal_target_date_handler(make_update("2025-09-01"), context)

        record = store.inserts[0][1]
        assert record["description"] == "Sub 50 minutes"
        assert record["target_date"] == "2025-09-01"

    @pytest.mark.asyncio
    async def test_bad_date_asks_again(self, view, context, store):
        await goal_start_handler(make_update("/goal"), context)
        await goal_title_handler(make_update("Run 10k"), context)
        update = make_update("next spring")

        assert await goal_target_date_handler(update, context) == GoalStates.TARGET_DATE
        assert store.inserts == []
        assert "YYYY-MM-DD" in replies(update)


class TestAuthFilter:
    def test_open_when_no_users_configured(self):
        assert AuthFilter([]).check_update(make_update())

    def test_allows_listed_user(self):
        assert AuthFilter([42]).check_update(make_update(user_id=42))

    def test_blocks_other_users(self):
        assert not AuthFilter([1]).check_update(make_update(user_id=42))


class TestCreateApplication:
    def test_requires_token(self):
        with pytest.raises(ValueError, match="TELEGRAM_BOT_TOKEN"):
            create_application(Config())

    def test_shares_dashboard(self, auth, store):
        view = DashboardView(auth, store)
        app = create_application(Config(telegram_bot_token="123:abc"), view=view)

        assert app.bot_data["dashboard"] is view


class TestSplitChunks:
    def test_short_text_single_chunk(self):
        assert split_chunks("a\n\nb") == ["a\n\nb"]

    def test_splits_on_blank_lines(self):
        text = "\n\n".join(["x" * 30] * 3)
        chunks = split_chunks(text, limit=70)
        assert chunks == ["x" * 30 + "\n\n" + "x" * 30, "x" * 30]

    def test_hard_splits_long_block(self):
        chunks = split_chunks("y" * 25, limit=10)
        assert chunks == ["y" * 10, "y" * 10, "y" * 5]

    def test_does_not_split_escape_sequence(self):
        chunks = split_chunks("ab\\.cd", limit=3)
        assert chunks == ["ab", "\\.c", "d"]


class TestReplyMarkdown:
    @pytest.mark.asyncio
    async def test_chunks_measured_after_conversion(self):
        text = "a." * 2000
        message = MagicMock()
        message.reply_text = AsyncMock()

        await reply_markdown(message, text)

        sent = [call.args[0] for call in message.reply_text.call_args_list]
        assert len(sent) > 1
        assert all(len(chunk) <= MAX_MESSAGE_LENGTH for chunk in sent)
        assert "".join(sent) == telegramify_markdown.markdownify(text)
