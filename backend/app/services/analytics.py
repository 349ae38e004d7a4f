"""
Umami analytics client.

Page views and generation events are reported when both UMAMI_WEBSITE_ID
and UMAMI_URL are configured. Reporting runs as a background task after
the response is sent and never affects it.
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

SEND_PATH = "/api/send"
SEND_TIMEOUT = 5.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; Inkify)"


class UmamiAnalytics:
    """Posts page views and events to an Umami instance."""

    def __init__(
        self,
        website_id: Optional[str],
        url: Optional[str],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.website_id = website_id
        self.url = url.rstrip("/") if url else None
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.website_id and self.url)

    async def pageview(self, path: str, headers: Mapping[str, str]) -> None:
        """Record a page view for a route."""
        await self._send(self._payload(path, headers), headers)

    async def event(
        self,
        path: str,
        name: str,
        data: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> None:
        """Record a named event with custom data."""
        payload = self._payload(path, headers)
        payload["name"] = name
        payload["data"] = dict(data)
        await self._send(payload, headers)

    def _payload(self, path: str, headers: Mapping[str, str]) -> dict[str, Any]:
        return {
            "website": self.website_id,
            "url": path,
            "hostname": headers.get("host", ""),
            "language": headers.get("accept-language", ""),
            "referrer": headers.get("referer", ""),
            "screen": headers.get("screen", ""),
        }

    async def _send(self, payload: dict[str, Any], headers: Mapping[str, str]) -> None:
        if not self.enabled:
            return

        try:
            async with httpx.AsyncClient(
                timeout=SEND_TIMEOUT,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    f"{self.url}{SEND_PATH}",
                    json={"type": "event", "payload": payload},
                    headers={"User-Agent": headers.get("user-agent", DEFAULT_USER_AGENT)},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Analytics report failed for {payload['url']}: {e}")


# Global analytics instance
umami_analytics = UmamiAnalytics(settings.UMAMI_WEBSITE_ID, settings.UMAMI_URL)
