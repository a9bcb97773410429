"""Shared test fixtures for the swap-relay test suite."""

from __future__ import annotations

from typing import Iterable

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from swaprelay.core.errors import DeliveryError
from swaprelay.models import Base
from swaprelay.store import SubscriptionStore
from swaprelay.subscriptions import SubscriptionManager


class FakeFilterSync:
    """In-memory stand-in for the Helius filter: records every full replace."""

    def __init__(self) -> None:
        self.calls: list[set[str]] = []
        self.current: set[str] | None = None
        self.fail_with: Exception | None = None

    async def replace_filter(self, addresses: Iterable[str]) -> None:
        addresses = set(addresses)
        self.calls.append(addresses)
        if self.fail_with is not None:
            raise self.fail_with
        self.current = addresses


class FakeChatSender:
    """Records deliveries; destinations listed in ``failing`` raise DeliveryError."""

    def __init__(self, failing: Iterable[str] = ()) -> None:
        self.failing = set(failing)
        self.attempts: list[str] = []
        self.sent: list[tuple[str, object]] = []

    async def send(self, destination: str, embed) -> None:
        self.attempts.append(destination)
        if destination in self.failing:
            raise DeliveryError(destination, "chat not found")
        self.sent.append((destination, embed))


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs the app in another thread)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)


@pytest.fixture
def store(session_factory) -> SubscriptionStore:
    return SubscriptionStore(session_factory)


@pytest.fixture
def filter_sync() -> FakeFilterSync:
    return FakeFilterSync()


@pytest.fixture
def chat_sender() -> FakeChatSender:
    return FakeChatSender()


@pytest.fixture
def manager(store, filter_sync) -> SubscriptionManager:
    return SubscriptionManager(store, filter_sync)
