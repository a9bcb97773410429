# swaprelay/schemas.py
"""Pydantic views of the Helius enhanced-transaction payload.

Only the fields the classifier reads are declared; everything else is ignored.
Amounts are kept as Decimal because Helius sends them as strings or numbers.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _HeliusModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NativeLeg(_HeliusModel):
    account: Optional[str] = None
    amount: Decimal


class RawTokenAmount(_HeliusModel):
    token_amount: Decimal = Field(alias="tokenAmount")
    decimals: int


class TokenLeg(_HeliusModel):
    user_account: Optional[str] = Field(default=None, alias="userAccount")
    mint: Optional[str] = None
    raw_token_amount: RawTokenAmount = Field(alias="rawTokenAmount")


class SwapEvent(_HeliusModel):
    native_input: Optional[NativeLeg] = Field(default=None, alias="nativeInput")
    native_output: Optional[NativeLeg] = Field(default=None, alias="nativeOutput")
    token_inputs: List[TokenLeg] = Field(default_factory=list, alias="tokenInputs")
    token_outputs: List[TokenLeg] = Field(default_factory=list, alias="tokenOutputs")


class TransactionEvents(_HeliusModel):
    swap: Optional[SwapEvent] = None


class TokenTransfer(_HeliusModel):
    from_user_account: Optional[str] = Field(default=None, alias="fromUserAccount")
    to_user_account: Optional[str] = Field(default=None, alias="toUserAccount")
    mint: Optional[str] = None
    token_amount: Decimal = Field(alias="tokenAmount")


class TransactionEvent(_HeliusModel):
    """Top-level record fields.

    `events` and `tokenTransfers` stay raw here; the classifier parses them
    only when no precomputed description is present.
    """

    signature: Optional[str] = None
    fee_payer: Optional[str] = Field(default=None, alias="feePayer")
    type: Optional[str] = None
    transaction_error: Optional[Any] = Field(default=None, alias="transactionError")
    description: Optional[str] = None
    events: Optional[Any] = None
    token_transfers: Optional[Any] = Field(default=None, alias="tokenTransfers")
