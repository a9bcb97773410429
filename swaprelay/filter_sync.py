"""Upstream filter sync: keeps the Helius webhook's address list in step with the store.

Helius only supports replacing the whole webhook definition (PUT), so every
call sends the complete address set.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol

import httpx

from swaprelay.core.config import settings
from swaprelay.core.errors import SyncError

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ["SWAP"]
WEBHOOK_TYPE = "enhanced"


class FilterSync(Protocol):
    async def replace_filter(self, addresses: Iterable[str]) -> None: ...


def build_filter_payload(
    addresses: Iterable[str],
    *,
    webhook_url: str | None,
    placeholder: str,
) -> dict:
    account_addresses = sorted(set(addresses))
    if not account_addresses:
        # Helius rejects an empty list; the placeholder keeps the webhook alive without matching anything
        account_addresses = [placeholder]
    return {
        "accountAddresses": account_addresses,
        "webhookURL": webhook_url,
        "transactionTypes": list(TRANSACTION_TYPES),
        "webhookType": WEBHOOK_TYPE,
    }


class HeliusFilterSync:
    """Replaces the address list of one Helius webhook."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        webhook_id: str | None = None,
        api_base: str | None = None,
        webhook_url: str | None = None,
        placeholder: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.HELIUS_API_KEY
        self._webhook_id = webhook_id if webhook_id is not None else settings.HELIUS_WEBHOOK_ID
        self._api_base = (api_base or settings.HELIUS_API_BASE).rstrip("/")
        self._webhook_url = webhook_url if webhook_url is not None else settings.helius_callback_url
        self._placeholder = placeholder or settings.EMPTY_FILTER_PLACEHOLDER
        self._client = client
        self._owns_client = client is None

    @property
    def endpoint(self) -> str:
        return f"{self._api_base}/v0/webhooks/{self._webhook_id}"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SEC)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def replace_filter(self, addresses: Iterable[str]) -> None:
        if not self._api_key or not self._webhook_id:
            raise SyncError(None, "HELIUS_API_KEY / HELIUS_WEBHOOK_ID are not set")

        payload = build_filter_payload(
            addresses,
            webhook_url=self._webhook_url,
            placeholder=self._placeholder,
        )
        logger.info("Replacing Helius filter with %d address(es)", len(payload["accountAddresses"]))

        try:
            resp = await self._get_client().put(
                self.endpoint,
                params={"api-key": self._api_key},
                json=payload,
            )
        except httpx.HTTPError as exc:
            logger.warning("Helius filter replace error: %s", exc)
            raise SyncError(None, str(exc) or exc.__class__.__name__) from exc

        if not resp.is_success:
            logger.warning("Helius filter replace returned %d %s", resp.status_code, resp.reason_phrase)
            raise SyncError(resp.status_code, resp.reason_phrase)

    async def probe(self) -> tuple[bool, str]:
        """GET the webhook definition; used by the self-test."""
        if not self._api_key or not self._webhook_id:
            return False, "skipped (HELIUS_API_KEY / HELIUS_WEBHOOK_ID missing)"
        try:
            resp = await self._get_client().get(self.endpoint, params={"api-key": self._api_key})
        except httpx.HTTPError as exc:
            return False, repr(exc)
        return resp.is_success, f"status={resp.status_code}"
