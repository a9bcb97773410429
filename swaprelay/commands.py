# swaprelay/commands.py
"""Chat command handling, independent of the chat platform.

Commands arrive as `!add <address>` (or Telegram's `/add <address>`) and
always produce a reply embed; bad input becomes an error-colored embed.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from swaprelay.core.errors import NotFound, RelayError
from swaprelay.notifications.templates import COLOR_ERROR, Embed, create_embed
from swaprelay.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)

COMMAND_PREFIXES = ("!", "/")

HELP_TEXT = "Commands:\n\n!add <address>\n!remove <address>\n!list\n!help"


def parse_command(text: str | None) -> Optional[Tuple[str, List[str]]]:
    text = (text or "").strip()
    if not text or text[0] not in COMMAND_PREFIXES:
        return None
    args = text[1:].split()
    if not args:
        return "", []
    # Telegram group commands look like /add@SwapRelayBot
    command = args.pop(0).split("@", 1)[0].lower()
    return command, args


def _error(description: str) -> Embed:
    return create_embed("Error", description, COLOR_ERROR)


async def execute_command(manager: SubscriptionManager, destination: str, command: str, args: List[str]) -> Embed:
    logger.info("Received command %s %s from %s", command, args, destination)
    try:
        if command == "add":
            if not args:
                return _error("Please provide an address!")
            address = args[0]
            await manager.add_subscription(address, destination)
            return create_embed("Success", f"Address `{address}` added successfully!")

        if command == "remove":
            if not args:
                return _error("Please provide an address!")
            address = args[0]
            try:
                await manager.remove_subscription(address, destination)
            except NotFound:
                return _error(f"Address `{address}` not found!")
            return create_embed("Success", f"Address `{address}` removed successfully!")

        if command == "list":
            listing = "\n".join(manager.list_addresses_for_destination(destination)) or " "
            return create_embed("Addresses List", f"```{listing}```")

        if command in ("help", "start"):
            return create_embed("Help", HELP_TEXT)

        return _error("Invalid command! Use !help for a list of commands.")
    except RelayError as e:
        logger.warning("Command %s failed for %s: %s", command, destination, e.message)
        return _error(f"An error occurred: {e.message}")


async def handle_text(manager: SubscriptionManager, destination: str, text: str | None) -> Optional[Embed]:
    parsed = parse_command(text)
    if parsed is None:
        return None
    command, args = parsed
    return await execute_command(manager, destination, command, args)
