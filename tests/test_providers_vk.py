"""Tests for VkVideoProvider.

Verifies:
1. Provider instantiation and configuration
2. Request shape (method URL, videos/access_token/v form fields)
3. Error payloads become failure outcomes
4. Empty and populated item lists become success outcomes
5. Transport failures raise ProviderTransportError
"""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

import httpx
import pytest

from vkembed.config.loader import ServiceConfig
from vkembed.exceptions import ConfigurationMissingError, ProviderTransportError
from vkembed.models import VideoReference
from vkembed.providers.vk.client import VkVideoProvider, parse_video_get_response

REF = VideoReference(owner_id="-123456789", video_id="456239017", access_key="deadbeef")


def _provider(handler, **kwargs) -> VkVideoProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VkVideoProvider("service-token", client=client, **kwargs)


class TestInstantiation:
    def test_defaults(self):
        provider = VkVideoProvider("token")
        assert provider.name == "vk"
        assert provider.is_available()
        assert provider.method_url == "https://api.vk.com/method/video.get"
        assert provider._client is None

    def test_empty_token_unavailable(self):
        assert not VkVideoProvider("").is_available()

    def test_from_config(self):
        config = ServiceConfig(
            access_token="token",
            api_base_url="https://api.example.test/method/",
            api_version="5.131",
            request_timeout=3.0,
        )
        provider = VkVideoProvider.from_config(config)
        assert provider.method_url == "https://api.example.test/method/video.get"
        assert provider._api_version == "5.131"
        assert provider._timeout == 3.0

    def test_from_config_without_token(self):
        with pytest.raises(ConfigurationMissingError):
            VkVideoProvider.from_config(ServiceConfig())


class TestFetchMetadata:
    @pytest.mark.asyncio
    async def test_request_parameters(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"response": {"count": 0, "items": []}})

        provider = _provider(handler)
        await provider.fetch_metadata(REF)

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/method/video.get"
        form = parse_qs(request.content.decode())
        assert form["videos"] == ["-123456789_456239017_deadbeef"]
        assert form["access_token"] == ["service-token"]
        assert form["v"] == ["5.199"]
        assert "service-token" not in str(request.url)

    @pytest.mark.asyncio
    async def test_access_token_not_logged(self, caplog):
        caplog.set_level(logging.DEBUG)

        def handler(request):
            return httpx.Response(200, json={"response": {"count": 0, "items": []}})

        await _provider(handler).fetch_metadata(REF)
        assert caplog.records
        assert all("service-token" not in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_items(self):
        def handler(request):
            return httpx.Response(200, json={
                "response": {
                    "count": 1,
                    "items": [{
                        "title": "Concert",
                        "duration": 245,
                        "player": "https://vk.com/video_ext.php?oid=-1&id=2&hash=ab",
                        "access_key": "ab",
                    }],
                },
            })

        outcome = await _provider(handler).fetch_metadata(REF)
        assert not outcome.is_error
        assert outcome.first.title == "Concert"
        assert outcome.first.access_key == "ab"

    @pytest.mark.asyncio
    async def test_api_error(self):
        def handler(request):
            return httpx.Response(200, json={
                "error": {"error_code": 15, "error_msg": "Access denied: video is private"},
            })

        outcome = await _provider(handler).fetch_metadata(REF)
        assert outcome.is_error
        assert outcome.error.code == 15
        assert outcome.error.message == "Access denied: video is private"

    @pytest.mark.asyncio
    async def test_http_status_error(self):
        def handler(request):
            return httpx.Response(502, text="bad gateway")

        with pytest.raises(ProviderTransportError) as exc_info:
            await _provider(handler).fetch_metadata(REF)
        assert exc_info.value.http_code == 502

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ProviderTransportError) as exc_info:
            await _provider(handler).fetch_metadata(REF)
        assert "timed out" in exc_info.value.details["details"]

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderTransportError) as exc_info:
            await _provider(handler).fetch_metadata(REF)
        assert "request failed" in exc_info.value.details["details"]

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(ProviderTransportError) as exc_info:
            await _provider(handler).fetch_metadata(REF)
        assert "invalid JSON" in exc_info.value.details["details"]

    @pytest.mark.asyncio
    async def test_single_call_no_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        with pytest.raises(ProviderTransportError):
            await _provider(handler).fetch_metadata(REF)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_aclose_keeps_injected_client(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        provider = VkVideoProvider("token", client=client)
        await provider.aclose()
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_owned_client(self):
        provider = VkVideoProvider("token")
        client = provider._get_client()
        await provider.aclose()
        assert client.is_closed
        assert provider._client is None


class TestParseResponse:
    def test_missing_response_is_empty(self):
        outcome = parse_video_get_response({})
        assert outcome.is_empty

    def test_error_without_fields(self):
        outcome = parse_video_get_response({"error": {"error_code": 100}})
        assert outcome.is_error
        assert outcome.error.message is None

    def test_non_dict_items_skipped(self):
        outcome = parse_video_get_response({"response": {"items": ["x", {"title": "ok"}]}})
        assert len(outcome.records) == 1
