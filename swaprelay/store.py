"""Subscription store: the only source of truth for (address, destination) pairs."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from swaprelay import crud
from swaprelay.core.errors import StoreError
from swaprelay.database import db_session

logger = logging.getLogger(__name__)


class SubscriptionStore:
    """Session-per-call wrapper around the subscription queries.

    Every SQLAlchemy failure is rolled back and re-raised as StoreError.
    """

    def __init__(self, session_factory=None) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self, op: str) -> Generator[Session, None, None]:
        try:
            with db_session(self._session_factory) as db:
                yield db
        except SQLAlchemyError as e:
            logger.exception("Subscription store %s failed", op)
            raise StoreError(f"{op} failed: {e.__class__.__name__}") from e

    def add(self, address: str, destination: str) -> bool:
        with self._session("add") as db:
            created = crud.add_subscription(db, address, destination)
        if created:
            logger.info("Added address %s for destination %s", address, destination)
        return created

    def remove(self, address: str, destination: str) -> bool:
        with self._session("remove") as db:
            deleted = crud.remove_subscription(db, address, destination)
        if deleted:
            logger.info("Removed address %s for destination %s", address, destination)
        return deleted

    def contains(self, address: str, destination: str) -> bool:
        with self._session("contains") as db:
            return crud.get_subscription(db, address, destination) is not None

    def list_by_destination(self, destination: str) -> List[str]:
        with self._session("list_by_destination") as db:
            return crud.list_addresses(db, destination)

    def list_destinations(self, address: str) -> List[str]:
        with self._session("list_destinations") as db:
            return crud.list_destinations(db, address)

    def list_distinct_addresses(self) -> set[str]:
        with self._session("list_distinct_addresses") as db:
            return crud.list_distinct_addresses(db)
