"""
Request pipeline: URL -> VideoReference -> metadata lookup -> EmbedResult.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from vkembed.exceptions import ConfigurationMissingError, MissingInputError
from vkembed.operations.synthesize import synthesize_embed
from vkembed.urls import resolve_video_url

if TYPE_CHECKING:
    from vkembed.models.embed_result import EmbedResult
    from vkembed.providers.base import MetadataProvider

logger = logging.getLogger(__name__)


async def resolve_embed(video_url: str, provider: MetadataProvider | None) -> EmbedResult:
    """Resolve a VK video URL into a playable embed.

    The URL is parsed before the provider is consulted, so malformed input
    is reported even when no provider is configured.

    Args:
        video_url: Raw VK video URL.
        provider: Configured metadata provider, or None if unconfigured.

    Returns:
        EmbedResult for the video.

    Raises:
        MissingInputError: If video_url is empty.
        InvalidUrlFormatError: If the URL is in no known VK dialect.
        ConfigurationMissingError: If no provider is configured.
        ProviderRejectedError: Provider error and no access key in the URL.
        VideoNotFoundError: No records and no access key in the URL.
        ProviderTransportError: If the provider could not be reached.
    """
    if not video_url:
        raise MissingInputError()

    logger.info(f"Processing VK video URL: {video_url}")
    reference = resolve_video_url(video_url)

    if provider is None or not provider.is_available():
        raise ConfigurationMissingError()

    outcome = await provider.fetch_metadata(reference)
    return synthesize_embed(reference, outcome)
