"""Tests for the subscription manager: ordering, full resync and rollback."""

from __future__ import annotations

import asyncio

import pytest

from swaprelay.core.errors import NotFound, StoreError, SyncError
from swaprelay.subscriptions import SubscriptionManager


class TestAddSubscription:
    @pytest.mark.asyncio
    async def test_add_syncs_full_set(self, manager, store, filter_sync) -> None:
        store.add("Existing", "D9")

        await manager.add_subscription("WalletA", "D1")

        assert store.contains("WalletA", "D1")
        assert filter_sync.calls == [{"Existing", "WalletA"}]

    @pytest.mark.asyncio
    async def test_add_twice_same_state(self, manager, store, filter_sync) -> None:
        await manager.add_subscription("WalletA", "D1")
        await manager.add_subscription("WalletA", "D1")

        assert store.list_by_destination("D1") == ["WalletA"]
        assert filter_sync.current == {"WalletA"}

    @pytest.mark.asyncio
    async def test_sync_failure_rolls_back(self, manager, store, filter_sync) -> None:
        filter_sync.fail_with = SyncError(500, "Internal Server Error")

        with pytest.raises(SyncError):
            await manager.add_subscription("WalletA", "D1")

        assert not store.contains("WalletA", "D1")
        assert store.list_distinct_addresses() == set()

    @pytest.mark.asyncio
    async def test_sync_failure_keeps_preexisting_pair(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        filter_sync.fail_with = SyncError(503, "Service Unavailable")

        with pytest.raises(SyncError):
            await manager.add_subscription("WalletA", "D1")

        assert store.contains("WalletA", "D1")


class TestRemoveSubscription:
    @pytest.mark.asyncio
    async def test_remove_syncs_full_set(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        store.add("WalletB", "D1")

        await manager.remove_subscription("WalletA", "D1")

        assert store.list_by_destination("D1") == ["WalletB"]
        assert filter_sync.calls == [{"WalletB"}]

    @pytest.mark.asyncio
    async def test_remove_last_address_sends_empty_set(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        await manager.remove_subscription("WalletA", "D1")
        # the placeholder substitution happens inside the Helius backend
        assert filter_sync.calls == [set()]

    @pytest.mark.asyncio
    async def test_address_kept_while_other_destination_subscribed(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        store.add("WalletA", "D2")

        await manager.remove_subscription("WalletA", "D1")

        assert filter_sync.current == {"WalletA"}

    @pytest.mark.asyncio
    async def test_remove_not_found_touches_nothing(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D2")

        with pytest.raises(NotFound) as exc_info:
            await manager.remove_subscription("WalletA", "D1")

        assert exc_info.value.address == "WalletA"
        assert exc_info.value.destination == "D1"
        assert filter_sync.calls == []
        assert store.list_destinations("WalletA") == ["D2"]

    @pytest.mark.asyncio
    async def test_sync_failure_restores_pair(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        filter_sync.fail_with = SyncError(500, "Internal Server Error")

        with pytest.raises(SyncError):
            await manager.remove_subscription("WalletA", "D1")

        assert store.contains("WalletA", "D1")


class TestRollbackFailure:
    @pytest.mark.asyncio
    async def test_sync_error_still_propagates(self, store, filter_sync) -> None:
        class FlakyRemoveStore:
            def __init__(self, inner) -> None:
                self.inner = inner

            def __getattr__(self, name):
                return getattr(self.inner, name)

            def remove(self, address, destination):
                raise StoreError("remove failed: OperationalError")

        filter_sync.fail_with = SyncError(500, "Internal Server Error")
        mgr = SubscriptionManager(FlakyRemoveStore(store), filter_sync)

        with pytest.raises(SyncError):
            await mgr.add_subscription("WalletA", "D1")


class _UnreadableSetStore:
    """Store whose distinct-address projection fails after the write commits."""

    def __init__(self, inner) -> None:
        self.inner = inner

    def __getattr__(self, name):
        return getattr(self.inner, name)

    def list_distinct_addresses(self):
        raise StoreError("list_distinct_addresses failed: OperationalError")


class TestStoreFailureDuringResync:
    @pytest.mark.asyncio
    async def test_add_is_undone(self, store, filter_sync) -> None:
        mgr = SubscriptionManager(_UnreadableSetStore(store), filter_sync)

        with pytest.raises(StoreError):
            await mgr.add_subscription("WalletA", "D1")

        assert not store.contains("WalletA", "D1")
        assert filter_sync.calls == []

    @pytest.mark.asyncio
    async def test_remove_is_undone(self, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        mgr = SubscriptionManager(_UnreadableSetStore(store), filter_sync)

        with pytest.raises(StoreError):
            await mgr.remove_subscription("WalletA", "D1")

        assert store.contains("WalletA", "D1")
        assert filter_sync.calls == []


class TestSerialization:
    @pytest.mark.asyncio
    async def test_concurrent_adds_never_sync_stale_sets(self, store) -> None:
        class SlowSync:
            def __init__(self) -> None:
                self.in_flight = 0
                self.max_in_flight = 0
                self.calls: list[set[str]] = []

            async def replace_filter(self, addresses) -> None:
                self.in_flight += 1
                self.max_in_flight = max(self.max_in_flight, self.in_flight)
                self.calls.append(set(addresses))
                await asyncio.sleep(0.01)
                self.in_flight -= 1

        sync = SlowSync()
        mgr = SubscriptionManager(store, sync)

        await asyncio.gather(*(mgr.add_subscription(f"W{i}", "D1") for i in range(5)))

        assert sync.max_in_flight == 1
        assert sync.calls[-1] == {f"W{i}" for i in range(5)}


class TestReads:
    @pytest.mark.asyncio
    async def test_reads_do_not_sync(self, manager, store, filter_sync) -> None:
        store.add("WalletA", "D1")
        store.add("WalletA", "D2")

        assert manager.list_addresses_for_destination("D1") == ["WalletA"]
        assert manager.list_destinations_for_address("WalletA") == ["D1", "D2"]
        assert filter_sync.calls == []
