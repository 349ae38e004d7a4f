"""Unit tests for the Umami analytics client."""

import json

import httpx
import pytest

from app.services.analytics import UmamiAnalytics

HEADERS = {
    "host": "inkify.example.com",
    "accept-language": "en-GB",
    "referer": "https://example.com/",
    "user-agent": "pytest-agent",
}


def recording_transport(requests, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code)

    return httpx.MockTransport(handler)


class TestUmamiAnalytics:
    """Tests for UmamiAnalytics."""

    @pytest.mark.parametrize(
        "website_id, url",
        [(None, None), ("site-1", None), (None, "https://umami.example.com")],
    )
    def test_disabled_without_full_config(self, website_id, url):
        assert UmamiAnalytics(website_id, url).enabled is False

    @pytest.mark.asyncio
    async def test_disabled_sends_nothing(self):
        requests = []
        analytics = UmamiAnalytics(None, None, transport=recording_transport(requests))

        await analytics.pageview("/generate", HEADERS)

        assert requests == []

    @pytest.mark.asyncio
    async def test_pageview_payload(self):
        requests = []
        analytics = UmamiAnalytics(
            "site-1",
            "https://umami.example.com/",
            transport=recording_transport(requests),
        )

        await analytics.pageview("/themes", HEADERS)

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://umami.example.com/api/send"
        assert request.headers["user-agent"] == "pytest-agent"
        assert json.loads(request.content) == {
            "type": "event",
            "payload": {
                "website": "site-1",
                "url": "/themes",
                "hostname": "inkify.example.com",
                "language": "en-GB",
                "referrer": "https://example.com/",
                "screen": "",
            },
        }

    @pytest.mark.asyncio
    async def test_event_carries_name_and_data(self):
        requests = []
        analytics = UmamiAnalytics(
            "site-1",
            "https://umami.example.com",
            transport=recording_transport(requests),
        )

        await analytics.event(
            "/generate",
            "generation",
            {"language": "rust", "language_source": "classifier", "theme": "Dracula"},
            {},
        )

        payload = json.loads(requests[0].content)["payload"]
        assert payload["name"] == "generation"
        assert payload["data"] == {
            "language": "rust",
            "language_source": "classifier",
            "theme": "Dracula",
        }
        assert requests[0].headers["user-agent"].startswith("Mozilla/5.0")

    @pytest.mark.asyncio
    async def test_server_error_is_logged_not_raised(self, caplog):
        requests = []
        analytics = UmamiAnalytics(
            "site-1",
            "https://umami.example.com",
            transport=recording_transport(requests, status_code=503),
        )

        await analytics.pageview("/", {})

        assert len(requests) == 1
        assert "Analytics report failed" in caplog.text
