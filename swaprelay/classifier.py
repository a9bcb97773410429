"""Turns a Helius enhanced-webhook batch into swap descriptions.

Each record is validated and classified on its own. Only the top-level fields
must be readable; a nested shape that fails to parse is simply not used. A
record that is not a successful swap, or that has no usable payload, is
skipped without affecting the rest of the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from swaprelay.schemas import SwapEvent, TokenLeg, TokenTransfer, TransactionEvent, TransactionEvents

logger = logging.getLogger(__name__)

LAMPORTS_PER_SOL = Decimal(1_000_000_000)
SWAP_TYPE = "SWAP"


@dataclass(frozen=True)
class ClassifiedSwap:
    wallet: str
    description: str
    signature: str


def format_amount(value: Decimal) -> str:
    # 2E+9 / 1E+9 -> "2", 1.50 -> "1.5"
    text = format(value.normalize(), "f")
    return "0" if text in ("-0", "") else text


def lamports_to_sol(lamports: Decimal) -> Decimal:
    return Decimal(lamports) / LAMPORTS_PER_SOL


def token_ui_amount(leg: TokenLeg) -> Decimal:
    raw = leg.raw_token_amount
    return Decimal(raw.token_amount) / (Decimal(10) ** raw.decimals)


def describe_swap_event(swap: SwapEvent) -> Optional[str]:
    first_in = swap.token_inputs[0] if swap.token_inputs else None
    first_out = swap.token_outputs[0] if swap.token_outputs else None

    if not (swap.native_input or first_in) or not (swap.native_output or first_out):
        return None

    if swap.native_input:
        account = swap.native_input.account
        given = f"{format_amount(lamports_to_sol(swap.native_input.amount))} SOL"
    else:
        account = first_in.user_account
        given = f"{format_amount(token_ui_amount(first_in))} of `{first_in.mint}`"

    if swap.native_output:
        received = f"{format_amount(lamports_to_sol(swap.native_output.amount))} SOL"
    else:
        received = f"{format_amount(token_ui_amount(first_out))} of `{first_out.mint}`"

    return f"{account} swapped {given} for {received}"


def describe_token_transfers(transfers: List[TokenTransfer]) -> Optional[str]:
    # a plain swap moves exactly two legs: what the wallet sent and what it got back
    if len(transfers) != 2:
        return None
    source, destination = transfers
    return (
        f"{source.from_user_account} swapped {format_amount(source.token_amount)} of `{source.mint}` "
        f"for {format_amount(destination.token_amount)} of `{destination.mint}`"
    )


def _parse_swap(event: TransactionEvent) -> Optional[SwapEvent]:
    if not event.events:
        return None
    try:
        return TransactionEvents.model_validate(event.events).swap
    except ValidationError as e:
        logger.info("Ignoring unreadable swap event in %s: %s", event.signature, e.errors(include_url=False))
        return None


def _parse_transfers(event: TransactionEvent) -> List[TokenTransfer]:
    if not isinstance(event.token_transfers, list):
        return []
    try:
        return [TokenTransfer.model_validate(t) for t in event.token_transfers]
    except ValidationError as e:
        logger.info("Ignoring unreadable token transfers in %s: %s", event.signature, e.errors(include_url=False))
        return []


def describe(event: TransactionEvent) -> Optional[str]:
    """Precomputed description, then the swap event, then a two-leg transfer."""
    if event.description:
        return event.description

    swap = _parse_swap(event)
    if swap is not None:
        text = describe_swap_event(swap)
        if text:
            return text

    transfers = _parse_transfers(event)
    if transfers:
        return describe_token_transfers(transfers)

    return None


def classify(record: Any) -> Optional[ClassifiedSwap]:
    try:
        event = TransactionEvent.model_validate(record)
    except ValidationError as e:
        logger.warning("Skipping malformed transaction record: %s", e.errors(include_url=False))
        return None

    if not event.fee_payer:
        logger.warning("No wallet found in transaction %s", event.signature)
        return None

    if event.type != SWAP_TYPE or event.transaction_error is not None:
        logger.info("Skipping %s: not a swap transaction or transaction error", event.signature)
        return None

    description = describe(event)
    if not description:
        logger.debug("No swap description derivable for %s", event.signature)
        return None

    return ClassifiedSwap(wallet=event.fee_payer, description=description, signature=event.signature or "")


def classify_batch(payload: Any) -> List[ClassifiedSwap]:
    if isinstance(payload, dict):
        records: Iterable[Any] = [payload]
    elif isinstance(payload, list):
        records = payload
    else:
        records = []

    if not records:
        logger.warning("No transactions in webhook payload")
        return []

    swaps: List[ClassifiedSwap] = []
    for record in records:
        swap = classify(record)
        if swap is not None:
            swaps.append(swap)
    return swaps
