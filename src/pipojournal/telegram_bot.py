"""PipoJournal Telegram Bot."""

import logging

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ConversationHandler,
    MessageHandler,
    filters,
)

from .config import Config, load_config
from .dashboard import DashboardView
from .telegram_handlers import (
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
    help_handler,
    journal_handler,
    signout_handler,
    start_handler,
)
from .telegram_states import EntryStates, GoalStates
from .workflows import build_dashboard

logger = logging.getLogger(__name__)


class AuthFilter(filters.BaseFilter):
    """Filter to only allow authorized users."""

    def __init__(self, allowed_users: list[int]):
        super().__init__()
        self.allowed_users = allowed_users

    def check_update(self, update: Update) -> bool:
        if not self.allowed_users:
            return True  # No restriction if no users configured
        user = update.effective_user
        if user is None:
            return False
        return user.id in self.allowed_users


def create_application(config: Config | None = None, view: DashboardView | None = None) -> Application:
    """Create and configure the Telegram bot application."""
    if config is None:
        config = load_config()

    if not config.telegram_bot_token:
        raise ValueError(
            "TELEGRAM_BOT_TOKEN not configured. "
            "Get a token from @BotFather on Telegram and add it to pipojournal.conf"
        )

    if view is None:
        view = build_dashboard(config)

    async def post_init(application: Application) -> None:
        """Load the dashboard once the event loop is running."""
        view.mount()
        logger.info("Dashboard mounted")

    async def post_shutdown(application: Application) -> None:
        await view.close()
        logger.info("Dashboard closed")

    app = (
        Application.builder()
        .token(config.telegram_bot_token)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )
    app.bot_data["dashboard"] = view
    app.bot_data["config"] = config

    auth_filter = AuthFilter(config.telegram_allowed_users)
    text_input = filters.TEXT & ~filters.COMMAND

    app.add_handler(CommandHandler("start", start_handler, filters=auth_filter))
    app.add_handler(CommandHandler("help", help_handler, filters=auth_filter))
    app.add_handler(CommandHandler("journal", journal_handler, filters=auth_filter))
    app.add_handler(CommandHandler("goals", goals_handler, filters=auth_filter))
    app.add_handler(CommandHandler("signout", signout_handler, filters=auth_filter))

    entry_conv = ConversationHandler(
        entry_points=[CommandHandler("entry", entry_start_handler, filters=auth_filter)],
        states={
            EntryStates.TITLE: [MessageHandler(text_input, entry_title_handler)],
            EntryStates.MOOD: [CallbackQueryHandler(entry_mood_handler, pattern=r"^mood:")],
            EntryStates.CONTENT: [MessageHandler(text_input, entry_content_handler)],
        },
        fallbacks=[CommandHandler("cancel", cancel_handler)],
        per_user=True,
    )
    app.add_handler(entry_conv)

    goal_conv = ConversationHandler(
        entry_points=[CommandHandler("goal", goal_start_handler, filters=auth_filter)],
        states={
            GoalStates.TITLE: [MessageHandler(text_input, goal_title_handler)],
            GoalStates.DESCRIPTION: [
                MessageHandler(text_input, goal_description_handler),
                CommandHandler("skip", goal_description_handler),
            ],
            GoalStates.TARGET_DATE: [
                MessageHandler(text_input, goal_target_date_handler),
                CommandHandler("skip", goal_target_date_handler),
            ],
        },
        fallbacks=[CommandHandler("cancel", cancel_handler)],
        per_user=True,
    )
    app.add_handler(goal_conv)

    # Handle unauthorized access attempts
    async def unauthorized_handler(update: Update, context):
        user = update.effective_user
        logger.warning(f"Unauthorized access attempt from user {user.id} ({user.username})")
        await update.message.reply_text(
            "Unauthorized. This bot is private.\n"
            "If you're the owner, add your Telegram user ID to TELEGRAM_ALLOWED_USERS in pipojournal.conf"
        )

    if config.telegram_allowed_users:
        app.add_handler(MessageHandler(~auth_filter & filters.ALL, unauthorized_handler))

    return app


def run_bot():
    """Run the Telegram bot."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = load_config()
    app = create_application(config)

    if config.telegram_allowed_users:
        logger.info(f"Bot authorized for users: {config.telegram_allowed_users}")
    else:
        logger.warning("No TELEGRAM_ALLOWED_USERS configured - bot is open to anyone!")

    logger.info("Starting PipoJournal Telegram bot...")
    app.run_polling(allowed_updates=Update.ALL_TYPES)
