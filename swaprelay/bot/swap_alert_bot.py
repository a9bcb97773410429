# swaprelay/bot/swap_alert_bot.py
from __future__ import annotations

import logging

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CommandHandler,
    MessageHandler,
    ContextTypes,
    filters,
)

from swaprelay.commands import handle_text
from swaprelay.core.config import settings
from swaprelay.notifications.templates import COLOR_ERROR, Embed, create_embed
from swaprelay.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)

COMMANDS = ("add", "remove", "list", "help", "start")


class SwapAlertBot:
    def __init__(self):
        self.application: Application | None = None
        self.manager: SubscriptionManager | None = None

    async def initialize(self, manager: SubscriptionManager):
        self.manager = manager

        if not settings.BOT_TOKEN:
            logger.warning("BOT_TOKEN missing, bot disabled")
            return

        self.application = Application.builder().token(settings.BOT_TOKEN).build()

        # /add, /remove, ... (Telegram native)
        self.application.add_handler(CommandHandler(list(COMMANDS), self.handle_message))

        # !add, !remove, ... (plain text)
        self.application.add_handler(MessageHandler(filters.TEXT & filters.Regex(r"^\s*!"), self.handle_message))

        self.application.add_error_handler(self.on_error)

        await self.application.initialize()

        if settings.PUBLIC_BASE_URL:
            url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/webhook/telegram"
            await self.application.bot.set_webhook(url)
            logger.info("Webhook set: %s", url)

        logger.info("SwapAlertBot initialized")

    async def shutdown(self):
        if self.application:
            await self.application.shutdown()

    async def _reply(self, message, embed: Embed):
        await message.reply_text(embed.to_telegram_html(), parse_mode=ParseMode.HTML)

    async def on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        logger.error("Unhandled bot error", exc_info=context.error)
        try:
            if isinstance(update, Update) and update.effective_message:
                await self._reply(
                    update.effective_message,
                    create_embed("Error", "Temporary failure, please try again.", COLOR_ERROR),
                )
        except Exception:
            logger.exception("Failed to report bot error to chat")

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        message = update.effective_message
        user = update.effective_user
        if message is None or update.effective_chat is None:
            return
        if user is not None and user.is_bot:
            return
        if self.manager is None:
            logger.warning("Command received before the bot was initialized")
            return

        destination = str(update.effective_chat.id)
        embed = await handle_text(self.manager, destination, message.text)
        if embed is not None:
            await self._reply(message, embed)


# --------- bootstrap ---------

_bot = SwapAlertBot()


def get_bot() -> SwapAlertBot:
    return _bot


async def initialize_bot(manager: SubscriptionManager):
    await _bot.initialize(manager)


async def process_webhook(update_dict: dict):
    if not _bot.application:
        return
    update = Update.de_json(update_dict, _bot.application.bot)
    await _bot.application.process_update(update)
