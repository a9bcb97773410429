from __future__ import annotations

from typing import Protocol

from telegram import Bot, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import TelegramError

from swaprelay.core.errors import DeliveryError
from swaprelay.notifications.templates import Embed


class ChatSender(Protocol):
    async def send(self, destination: str, embed: Embed) -> None: ...


class TelegramChatSender:
    """Sends embeds to Telegram chats; the destination is the chat id."""

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def send(self, destination: str, embed: Embed) -> None:
        try:
            await self.bot.send_message(
                chat_id=destination,
                text=embed.to_telegram_html(),
                parse_mode=ParseMode.HTML,
                link_preview_options=LinkPreviewOptions(is_disabled=True),
            )
        except TelegramError as e:
            raise DeliveryError(destination, str(e)) from e
