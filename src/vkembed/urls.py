"""
URL parsing and video identity extraction for vkembed.

VK accumulated several URL dialects for the same video (legacy embed links,
canonical share links, redirect links) and two conventions for carrying a
viewer access key (inline in the path, or as a ``hash`` query parameter).
Each dialect is one named matcher below; the matchers are folded in order
to produce a VideoReference.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from vkembed.exceptions import InvalidUrlFormatError
from vkembed.models.video_reference import VideoReference

logger = logging.getLogger(__name__)

# Hostnames serving canonical ``/video<owner>_<id>`` links
VK_HOSTS = ["vk.com", "vk.ru", "vkvideo.ru"]

_HOST_ALTERNATION = "|".join(re.escape(h) for h in VK_HOSTS)

_EXT_EMBED_RE = re.compile(r"video_ext\.php\?", re.IGNORECASE)
_EXT_OID_RE = re.compile(r"[?&]oid=(-?\d+)", re.IGNORECASE)
_EXT_ID_RE = re.compile(r"[?&]id=(\d+)", re.IGNORECASE)
_CANONICAL_RE = re.compile(rf"(?:{_HOST_ALTERNATION})/video(-?\d+)_(\d+)", re.IGNORECASE)
_REDIRECT_RE = re.compile(r"video\?z=video(-?\d+)_(\d+)", re.IGNORECASE)
_INLINE_KEY_RE = re.compile(r"video-?\d+_\d+_([a-f0-9]+)", re.IGNORECASE)
_HASH_PARAM_RE = re.compile(r"[?&]hash=([a-f0-9]+)", re.IGNORECASE)


class KeyPolicy(Enum):
    """How a matcher's access key combines with one found earlier."""

    FILL = "fill"  # only used when no key is known yet
    OVERRIDE = "override"  # replaces any key found earlier


@dataclass(frozen=True)
class PartialMatch:
    """What a single matcher extracted. Ids always come in pairs."""

    owner_id: str | None = None
    video_id: str | None = None
    access_key: str | None = None

    @property
    def has_ids(self) -> bool:
        return bool(self.owner_id and self.video_id)


def _match_extension_embed(url: str) -> PartialMatch | None:
    """``video_ext.php?oid=..&id=..[&hash=..]``, parameters in any order."""
    if not _EXT_EMBED_RE.search(url):
        return None
    oid = _EXT_OID_RE.search(url)
    vid = _EXT_ID_RE.search(url)
    if not (oid and vid):
        return None
    key = _HASH_PARAM_RE.search(url)
    return PartialMatch(oid.group(1), vid.group(1), key.group(1) if key else None)


def _match_canonical_path(url: str) -> PartialMatch | None:
    """``vk.com/video-123_456`` on any known VK host."""
    m = _CANONICAL_RE.search(url)
    return PartialMatch(m.group(1), m.group(2)) if m else None


def _match_query_redirect(url: str) -> PartialMatch | None:
    """``vk.com/video?z=video-123_456``."""
    m = _REDIRECT_RE.search(url)
    return PartialMatch(m.group(1), m.group(2)) if m else None


def _match_inline_access_key(url: str) -> PartialMatch | None:
    """Access key carried in the path: ``video-123_456_<hex>``."""
    m = _INLINE_KEY_RE.search(url)
    return PartialMatch(access_key=m.group(1)) if m else None


def _match_hash_parameter(url: str) -> PartialMatch | None:
    """Access key carried as a ``hash=<hex>`` query parameter anywhere."""
    m = _HASH_PARAM_RE.search(url)
    return PartialMatch(access_key=m.group(1)) if m else None


@dataclass(frozen=True)
class UrlMatcher:
    name: str
    match: Callable[[str], PartialMatch | None]
    key_policy: KeyPolicy


# Evaluated top to bottom. Ids: first matcher yielding both wins.
# Access key: OVERRIDE replaces, FILL only fills a gap.
URL_MATCHERS: list[UrlMatcher] = [
    UrlMatcher("extension_embed", _match_extension_embed, KeyPolicy.FILL),
    UrlMatcher("canonical_path", _match_canonical_path, KeyPolicy.FILL),
    UrlMatcher("query_redirect", _match_query_redirect, KeyPolicy.FILL),
    UrlMatcher("inline_access_key", _match_inline_access_key, KeyPolicy.OVERRIDE),
    UrlMatcher("hash_parameter", _match_hash_parameter, KeyPolicy.FILL),
]


def fold_matches(matches: list[tuple[KeyPolicy, PartialMatch | None]]) -> PartialMatch:
    """Combine matcher results in priority order.

    Args:
        matches: (policy, result) pairs in matcher order; None means no match.

    Returns:
        The combined PartialMatch. Ids may still be missing.
    """
    owner_id: str | None = None
    video_id: str | None = None
    access_key: str | None = None

    for policy, found in matches:
        if found is None:
            continue
        if found.has_ids and not (owner_id and video_id):
            owner_id, video_id = found.owner_id, found.video_id
        if found.access_key:
            if policy is KeyPolicy.OVERRIDE or access_key is None:
                access_key = found.access_key

    return PartialMatch(owner_id, video_id, access_key)


def resolve_video_url(url: str) -> VideoReference:
    """Extract the video identity from a VK video URL.

    Args:
        url: Raw URL string in any supported VK dialect.

    Returns:
        VideoReference with owner id, video id and optional access key.

    Raises:
        InvalidUrlFormatError: If no matcher yields both identifiers.
    """
    text = url.strip()
    folded = fold_matches([(m.key_policy, m.match(text)) for m in URL_MATCHERS])

    if not folded.has_ids:
        logger.error("Could not parse VK video URL: %s", url)
        raise InvalidUrlFormatError(url)

    reference = VideoReference(
        owner_id=folded.owner_id,
        video_id=folded.video_id,
        access_key=folded.access_key,
    )
    logger.info(
        "Parsed video: owner_id=%s video_id=%s has_access_key=%s",
        reference.owner_id,
        reference.video_id,
        reference.has_access_key,
    )
    return reference


def try_resolve_video_url(url: str) -> VideoReference | None:
    """Resolve a URL, returning None instead of raising on unknown shapes."""
    try:
        return resolve_video_url(url)
    except InvalidUrlFormatError:
        return None


def is_vk_video_url(url: str) -> bool:
    """Check whether a URL is in one of the recognized VK video dialects."""
    return try_resolve_video_url(url) is not None


def list_supported_hosts() -> list[str]:
    """List hostnames recognized for canonical video links."""
    return list(VK_HOSTS)
