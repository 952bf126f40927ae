"""
Data models for vkembed.

Provides the Pydantic models for resolved video identity and provider
metadata, and the dataclass describing a synthesized embed.
"""

from vkembed.models.embed_result import EmbedResult, EmbedSource
from vkembed.models.video_metadata import VideoMetadata
from vkembed.models.video_reference import VideoReference

__all__ = [
    "EmbedResult",
    "EmbedSource",
    "VideoMetadata",
    "VideoReference",
]
