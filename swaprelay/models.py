# swaprelay/models.py
from __future__ import annotations

from sqlalchemy import (
    Column,
    String,
    DateTime,
    Integer,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Subscription(Base):
    """One (wallet address, destination) pair.

    A destination is opaque to the store; in practice it is a Telegram chat id.
    """

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Solana base58 addresses are at most 44 chars
    wallet_address = Column(String(64), nullable=False)
    destination_id = Column(String(64), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    __table_args__ = (
        UniqueConstraint("wallet_address", "destination_id", name="uq_subscriptions_wallet_destination"),
        Index("ix_subscriptions_wallet_address", "wallet_address"),
        Index("ix_subscriptions_destination_id", "destination_id"),
    )
