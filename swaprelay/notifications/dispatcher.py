"""Fan-out of classified swaps to the alert webhook and every subscribed destination."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from swaprelay.classifier import ClassifiedSwap
from swaprelay.core.errors import DeliveryError, StoreError
from swaprelay.notifications.alert_webhook import AlertWebhook
from swaprelay.notifications.chat import ChatSender
from swaprelay.notifications.templates import Embed, swap_alert_embed
from swaprelay.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    signature: str
    delivered: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


class NotificationDispatcher:
    def __init__(
        self,
        manager: SubscriptionManager,
        sender: Optional[ChatSender] = None,
        alert_webhook: Optional[AlertWebhook] = None,
    ) -> None:
        self.manager = manager
        self.sender = sender
        self.alert_webhook = alert_webhook

    async def _post_alert(self, embed: Embed) -> None:
        if self.alert_webhook is None or not self.alert_webhook.enabled:
            return
        try:
            await self.alert_webhook.post(embed)
        except DeliveryError:
            logger.exception("Failed to send swap alert to the alert webhook")

    async def _deliver(self, destination: str, embed: Embed, result: DispatchResult) -> None:
        if self.sender is None:
            logger.warning("Chat delivery disabled; dropping alert for %s", destination)
            result.failed.append(destination)
            return
        try:
            await self.sender.send(destination, embed)
        except DeliveryError:
            logger.exception("Failed to send swap alert to %s", destination)
            result.failed.append(destination)
        else:
            result.delivered.append(destination)

    async def dispatch(self, swap: ClassifiedSwap) -> DispatchResult:
        result = DispatchResult(signature=swap.signature)
        embed = swap_alert_embed(swap.description, swap.signature)
        logger.info("Sending swap alert: %s", swap.description)

        await self._post_alert(embed)

        try:
            destinations = self.manager.list_destinations_for_address(swap.wallet)
        except StoreError:
            logger.exception("Could not resolve destinations for %s", swap.wallet)
            return result

        if not destinations:
            logger.warning("No destination subscribed to %s", swap.wallet)
            return result

        await asyncio.gather(*(self._deliver(d, embed, result) for d in destinations))
        return result

    async def dispatch_batch(self, swaps: Iterable[ClassifiedSwap]) -> List[DispatchResult]:
        return list(await asyncio.gather(*(self.dispatch(s) for s in swaps)))
