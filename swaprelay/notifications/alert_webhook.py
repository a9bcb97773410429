from __future__ import annotations

import httpx

from swaprelay.core.config import settings
from swaprelay.core.errors import DeliveryError
from swaprelay.notifications.templates import Embed


class AlertWebhook:
    """Fixed alert channel: a Discord-compatible incoming webhook receiving every swap."""

    def __init__(self, url: str | None = None, client: httpx.AsyncClient | None = None) -> None:
        self.url = url if url is not None else settings.ALERT_WEBHOOK_URL
        self._client = client
        self._owns_client = client is None

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SEC)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def post(self, embed: Embed) -> None:
        if not self.url:
            return  # not configured

        try:
            resp = await self._get_client().post(self.url, json={"embeds": [embed.to_payload()]})
        except httpx.HTTPError as e:
            raise DeliveryError("alert-webhook", str(e) or e.__class__.__name__) from e
        if resp.status_code >= 400:
            raise DeliveryError("alert-webhook", f"{resp.status_code} {resp.text}")
