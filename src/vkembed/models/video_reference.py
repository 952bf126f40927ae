"""
VideoReference Pydantic model: the stable identity of a VK video.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, field_validator

_OWNER_ID_RE = re.compile(r"^-?\d+$")
_VIDEO_ID_RE = re.compile(r"^\d+$")
_ACCESS_KEY_RE = re.compile(r"^[a-f0-9]+$")


class VideoReference(BaseModel):
    """Owner id, video id and optional access key of a VK video.

    Owner ids are signed; negative values denote community-owned videos.
    All ids are kept as strings exactly as they appeared in the URL.

    Examples:
        >>> ref = VideoReference(owner_id="-123", video_id="456", access_key="ab12")
        >>> ref.lookup_key
        '-123_456_ab12'
    """

    model_config = ConfigDict(frozen=True)

    owner_id: str
    video_id: str
    access_key: str | None = None

    @field_validator("owner_id")
    @classmethod
    def validate_owner_id(cls, v: str) -> str:
        if not _OWNER_ID_RE.match(v):
            raise ValueError(f"owner_id must be a signed integer, got {v!r}")
        return v

    @field_validator("video_id")
    @classmethod
    def validate_video_id(cls, v: str) -> str:
        if not _VIDEO_ID_RE.match(v):
            raise ValueError(f"video_id must be a non-negative integer, got {v!r}")
        return v

    @field_validator("access_key", mode="before")
    @classmethod
    def validate_access_key(cls, v: str | None) -> str | None:
        if v is None or v == "":
            return None
        v = v.lower()
        if not _ACCESS_KEY_RE.match(v):
            raise ValueError(f"access_key must be a hex token, got {v!r}")
        return v

    @property
    def has_access_key(self) -> bool:
        return self.access_key is not None

    @property
    def lookup_key(self) -> str:
        """Identifier used by the VK API: ``owner_video[_key]``."""
        key = f"{self.owner_id}_{self.video_id}"
        if self.access_key:
            key += f"_{self.access_key}"
        return key

    def __str__(self) -> str:
        return self.lookup_key
