"""
VideoMetadata Pydantic model for records returned by the metadata provider.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class VideoMetadata(BaseModel):
    """A single video record from the metadata provider.

    Absent fields mean "unknown", never an empty string or zero.
    """

    player_url: str | None = Field(None, description="Player URL reported by the provider")
    title: str | None = Field(None, description="Video title")
    duration_seconds: int | None = Field(None, description="Duration in seconds")
    access_key: str | None = Field(None, description="Viewer access key, if issued")

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> VideoMetadata:
        """Build a record from one ``items`` entry of a VK ``video.get`` response."""
        return cls(
            player_url=_text(item.get("player")),
            title=_text(item.get("title")),
            duration_seconds=_seconds(item.get("duration")),
            access_key=_text(item.get("access_key")),
        )


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _seconds(value: Any) -> int | None:
    """Coerce a duration to whole seconds; unusable values become None."""
    if isinstance(value, bool) or not value:
        return None
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None
