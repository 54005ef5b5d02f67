from __future__ import annotations

import dataclasses

import httpx
import pytest

from websearch_core.errors import MissingCredentialError
from websearch_tools.web import search_client as search_client_module
from websearch_tools.web.search_client import SearchAPIClient

SEARCH_URL = "https://search.example/api/v1/search"


class TestSearchParams:
    async def test_site_folded_into_query(self, router, search_client):
        router.routes[SEARCH_URL] = {"organic_results": []}
        await search_client.search("fastapi tutorial", site="github.com", page=2)

        params = router.requests[0].url.params
        assert params["engine"] == "google"
        assert params["q"] == "site:github.com fastapi tutorial"
        assert params["page"] == "2"
        assert params["hl"] == "en"
        assert params["api_key"] == "test-key"
        assert "time_period" not in params

    async def test_time_period_sent_when_set(self, router, search_client):
        router.routes[SEARCH_URL] = {}
        await search_client.search("news", time_period="last_day")
        assert router.requests[0].url.params["time_period"] == "last_day"

    async def test_ai_mode_params(self, router, search_client):
        router.routes[SEARCH_URL] = {"markdown": "answer"}
        data = await search_client.ai_search(
            "what is this", image_url="https://img.example/cat.png", location="Paris"
        )
        params = router.requests[0].url.params
        assert data == {"markdown": "answer"}
        assert params["engine"] == "google_ai_mode"
        assert params["url"] == "https://img.example/cat.png"
        assert params["location"] == "Paris"
        assert "hl" not in params


class TestRetries:
    async def test_three_attempts_with_linear_delay(self, router, config, transport, monkeypatch):
        delays: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        monkeypatch.setattr(search_client_module.asyncio, "sleep", fake_sleep)
        router.routes[SEARCH_URL] = httpx.ConnectError("connection refused")
        client = SearchAPIClient(config.search, transport=transport)

        with pytest.raises(httpx.ConnectError):
            await client.search("q")
        assert router.count(SEARCH_URL) == 3
        assert delays == [1.0, 2.0]

    async def test_recovers_after_transient_failure(self, router, search_client):
        calls = {"n": 0}

        def flaky(request: httpx.Request) -> httpx.Response:
            calls["n"] += 1
            if calls["n"] == 1:
                return httpx.Response(503, json={"error": "busy"})
            return httpx.Response(200, json={"organic_results": []})

        router.routes[SEARCH_URL] = flaky
        assert await search_client.search("q") == {"organic_results": []}
        assert calls["n"] == 2

    async def test_error_status_exhausts_retries(self, router, search_client):
        router.routes[SEARCH_URL] = lambda request: httpx.Response(429, json={})
        with pytest.raises(httpx.HTTPStatusError):
            await search_client.search("q")
        assert router.count(SEARCH_URL) == 3


class TestCredential:
    async def test_missing_key_short_circuits(self, router, config, transport):
        search = dataclasses.replace(config.search, api_key="")
        client = SearchAPIClient(search, transport=transport)

        with pytest.raises(MissingCredentialError, match="SEARCHAPI_KEY not configured."):
            await client.search("q")
        assert router.requests == []

    async def test_custom_env_name_in_message(self, config, transport):
        search = dataclasses.replace(config.search, api_key="", api_key_env="MY_KEY")
        client = SearchAPIClient(search, transport=transport)
        with pytest.raises(MissingCredentialError, match="MY_KEY"):
            await client.ai_search("q")


class TestNonJSONBody:
    async def test_reads_as_empty_payload(self, router, search_client):
        router.routes[SEARCH_URL] = (200, "<html><body>maintenance</body></html>")
        assert await search_client.search("q") == {}
        assert router.count(SEARCH_URL) == 1
