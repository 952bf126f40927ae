"""Integration tests against the real VK API.

Run with: pytest tests/integration --run-integration

Requires VK_SERVICE_ACCESS_KEY; skipped when it is missing.
"""

from __future__ import annotations

import os

import pytest

from vkembed.exceptions import ProviderRejectedError, VideoNotFoundError
from vkembed.operations.resolve import resolve_embed
from vkembed.providers.vk import VkVideoProvider

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.environ.get("VK_SERVICE_ACCESS_KEY"),
        reason="VK_SERVICE_ACCESS_KEY not set",
    ),
]


@pytest.mark.asyncio
async def test_unknown_video_without_key():
    provider = VkVideoProvider(os.environ["VK_SERVICE_ACCESS_KEY"])
    try:
        with pytest.raises((VideoNotFoundError, ProviderRejectedError)):
            await resolve_embed("https://vk.com/video-1_1", provider)
    finally:
        await provider.aclose()


@pytest.mark.asyncio
async def test_unknown_video_with_key_falls_back():
    provider = VkVideoProvider(os.environ["VK_SERVICE_ACCESS_KEY"])
    try:
        result = await resolve_embed("https://vk.com/video-1_1_deadbeef", provider)
    finally:
        await provider.aclose()
    assert result.source in ("fallback", "vk_api")
    assert result.embed_url.startswith("https://")
