"""
vkembed - Turn VK video links into playable embed URLs.

Resolves any of VK's URL dialects to a stable (owner id, video id,
access key) identity, asks the VK API for the player URL, and falls back
to a constructed embed URL when the API cannot answer but an access key
is already known.
"""

# Exceptions
from vkembed.exceptions import (
    ConfigurationMissingError,
    InternalServiceError,
    InvalidUrlFormatError,
    MissingInputError,
    ProviderRejectedError,
    ProviderTransportError,
    VideoNotFoundError,
    VkEmbedError,
)

# Models
from vkembed.models import EmbedResult, VideoMetadata, VideoReference

# Operations
from vkembed.operations import (
    build_embed_url,
    normalize_player_url,
    resolve_embed,
    synthesize_embed,
)

# URL parsing
from vkembed.urls import (
    is_vk_video_url,
    list_supported_hosts,
    resolve_video_url,
    try_resolve_video_url,
)

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "ConfigurationMissingError",
    "InternalServiceError",
    "InvalidUrlFormatError",
    "MissingInputError",
    "ProviderRejectedError",
    "ProviderTransportError",
    "VideoNotFoundError",
    "VkEmbedError",
    # Models
    "EmbedResult",
    "VideoMetadata",
    "VideoReference",
    # Operations
    "build_embed_url",
    "normalize_player_url",
    "resolve_embed",
    "synthesize_embed",
    # URL parsing
    "is_vk_video_url",
    "list_supported_hosts",
    "resolve_video_url",
    "try_resolve_video_url",
]
