# swaprelay/relay.py
"""Process-wide wiring of store, filter sync, manager and dispatcher."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from swaprelay.classifier import classify_batch
from swaprelay.filter_sync import HeliusFilterSync
from swaprelay.notifications.alert_webhook import AlertWebhook
from swaprelay.notifications.dispatcher import NotificationDispatcher
from swaprelay.store import SubscriptionStore
from swaprelay.subscriptions import SubscriptionManager

logger = logging.getLogger(__name__)


@dataclass
class Relay:
    store: SubscriptionStore
    sync: Any
    manager: SubscriptionManager
    dispatcher: NotificationDispatcher
    alert_webhook: AlertWebhook | None = None

    async def process_webhook_batch(self, payload: Any) -> None:
        """Classify a Helius batch and deliver every resulting alert."""
        swaps = classify_batch(payload)
        if not swaps:
            return
        results = await self.dispatcher.dispatch_batch(swaps)
        failed = sum(len(r.failed) for r in results)
        logger.info("Processed %d swap(s), %d failed deliveries", len(swaps), failed)

    async def close(self) -> None:
        close_sync = getattr(self.sync, "close", None)
        if close_sync is not None:
            await close_sync()
        if self.alert_webhook is not None:
            await self.alert_webhook.close()


def build_relay(*, store=None, sync=None, sender=None, alert_webhook=None) -> Relay:
    store = store or SubscriptionStore()
    sync = sync or HeliusFilterSync()
    alert_webhook = alert_webhook or AlertWebhook()
    manager = SubscriptionManager(store, sync)
    dispatcher = NotificationDispatcher(manager, sender=sender, alert_webhook=alert_webhook)
    return Relay(
        store=store,
        sync=sync,
        manager=manager,
        dispatcher=dispatcher,
        alert_webhook=alert_webhook,
    )


_relay: Relay | None = None


def get_relay() -> Relay:
    global _relay
    if _relay is None:
        _relay = build_relay()
    return _relay
