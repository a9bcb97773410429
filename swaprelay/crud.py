# swaprelay/crud.py
from __future__ import annotations

from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from swaprelay import models


# -------- Subscriptions --------

def get_subscription(db: Session, wallet_address: str, destination_id: str) -> models.Subscription | None:
    return (
        db.query(models.Subscription)
        .filter(
            models.Subscription.wallet_address == wallet_address,
            models.Subscription.destination_id == destination_id,
        )
        .first()
    )


def add_subscription(db: Session, wallet_address: str, destination_id: str) -> bool:
    """Insert the pair once. Returns True if a row was created."""
    if get_subscription(db, wallet_address, destination_id):
        return False

    db.add(models.Subscription(wallet_address=wallet_address, destination_id=destination_id))
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent insert of the same pair
        db.rollback()
        return False
    return True


def remove_subscription(db: Session, wallet_address: str, destination_id: str) -> bool:
    deleted = (
        db.query(models.Subscription)
        .filter(
            models.Subscription.wallet_address == wallet_address,
            models.Subscription.destination_id == destination_id,
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(deleted)


def list_addresses(db: Session, destination_id: str) -> List[str]:
    rows = (
        db.query(models.Subscription.wallet_address)
        .filter(models.Subscription.destination_id == destination_id)
        .order_by(models.Subscription.id.asc())
        .all()
    )
    return [r[0] for r in rows]


def list_destinations(db: Session, wallet_address: str) -> List[str]:
    rows = (
        db.query(models.Subscription.destination_id)
        .filter(models.Subscription.wallet_address == wallet_address)
        .order_by(models.Subscription.id.asc())
        .all()
    )
    return [r[0] for r in rows]


def list_distinct_addresses(db: Session) -> set[str]:
    rows = db.query(models.Subscription.wallet_address).distinct().all()
    return {r[0] for r in rows}
