"""
EmbedResult dataclass: the outcome of embed synthesis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from vkembed.models.video_reference import VideoReference

EmbedSource = Literal["vk_api", "fallback"]


@dataclass(frozen=True)
class EmbedResult:
    """Playable embed URL plus the identity and metadata it was built from."""

    embed_url: str
    reference: VideoReference
    source: EmbedSource
    access_key: str | None = None
    title: str | None = None
    duration_seconds: int | None = None
    player_url: str | None = None

    def to_response(self) -> dict[str, Any]:
        """Render the success envelope sent to HTTP callers.

        Fallback results carry no metadata fields at all; provider-backed
        results always carry them, null when unknown.
        """
        body: dict[str, Any] = {
            "success": True,
            "embedUrl": self.embed_url,
            "ownerId": self.reference.owner_id,
            "videoId": self.reference.video_id,
            "accessKey": self.access_key,
        }
        if self.source == "vk_api":
            body["title"] = self.title
            body["duration"] = self.duration_seconds
            body["playerUrl"] = self.player_url
        body["source"] = self.source
        return body
