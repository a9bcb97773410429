"""Subscription manager: store mutation + full filter resync as one operation."""

from __future__ import annotations

import asyncio
import logging
from typing import List

from swaprelay.core.errors import NotFound, StoreError, SyncError
from swaprelay.filter_sync import FilterSync
from swaprelay.store import SubscriptionStore

logger = logging.getLogger(__name__)


class SubscriptionManager:
    """Keeps the store and the upstream filter consistent.

    The local write always happens first so the recomputed address set is the
    intended post-state. If recomputing the set or the resync fails, the local
    write is inverted and the error is re-raised. Mutations are serialized by
    one lock because the upstream filter is a single global list.
    """

    def __init__(self, store: SubscriptionStore, sync: FilterSync) -> None:
        self.store = store
        self.sync = sync
        self._lock = asyncio.Lock()

    async def add_subscription(self, address: str, destination: str) -> None:
        async with self._lock:
            created = self.store.add(address, destination)
            try:
                await self.sync.replace_filter(self.store.list_distinct_addresses())
            except (SyncError, StoreError) as e:
                logger.warning("Resync failed after add (%s); rolling back %s for %s", e.message, address, destination)
                # a pair that already existed before this call stays
                if created:
                    self._compensate(self.store.remove, address, destination)
                raise

    async def remove_subscription(self, address: str, destination: str) -> None:
        async with self._lock:
            if address not in self.store.list_by_destination(destination):
                raise NotFound(address, destination)

            self.store.remove(address, destination)
            try:
                await self.sync.replace_filter(self.store.list_distinct_addresses())
            except (SyncError, StoreError) as e:
                logger.warning("Resync failed after remove (%s); restoring %s for %s", e.message, address, destination)
                self._compensate(self.store.add, address, destination)
                raise

    def _compensate(self, undo, address: str, destination: str) -> None:
        try:
            undo(address, destination)
        except StoreError:
            # the original failure is still what the caller sees
            logger.exception("Rollback failed for %s / %s; store and filter may diverge", address, destination)

    def list_addresses_for_destination(self, destination: str) -> List[str]:
        return self.store.list_by_destination(destination)

    def list_destinations_for_address(self, address: str) -> List[str]:
        return self.store.list_destinations(address)
