"""
Embed synthesis: choose the embed URL from a lookup outcome.

The choice depends on two inputs only: the kind of lookup outcome (error,
empty, records) and whether an access key was already known from the URL.
Each combination is one row of DECISION_TABLE, evaluated top to bottom.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlencode

from vkembed.config import defaults
from vkembed.exceptions import ProviderRejectedError, VideoNotFoundError
from vkembed.models.embed_result import EmbedResult
from vkembed.models.video_reference import VideoReference
from vkembed.providers.types import LookupOutcome

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    ERROR = "error"
    EMPTY = "empty"
    RECORDS = "records"


def classify_outcome(outcome: LookupOutcome) -> OutcomeKind:
    if outcome.is_error:
        return OutcomeKind.ERROR
    if outcome.is_empty:
        return OutcomeKind.EMPTY
    return OutcomeKind.RECORDS


def build_embed_url(owner_id: str, video_id: str, access_key: str | None = None) -> str:
    """Build the embed player URL from identifiers.

    Shared by every branch that does not use a provider-supplied player URL.

    Examples:
        >>> build_embed_url("-1", "2", "ab")
        'https://vk.com/video_ext.php?oid=-1&id=2&hash=ab&hd=2&autoplay=0'
        >>> build_embed_url("-1", "2")
        'https://vk.com/video_ext.php?oid=-1&id=2&hd=2&autoplay=0'
    """
    params = [("oid", owner_id), ("id", video_id)]
    if access_key:
        params.append(("hash", access_key))
    params += [("hd", defaults.EMBED_QUALITY), ("autoplay", defaults.EMBED_AUTOPLAY)]
    return f"{defaults.EMBED_BASE_URL}?{urlencode(params)}"


def _append_param(url: str, name: str, value: str) -> str:
    if f"{name}=" in url:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{name}={value}"


def normalize_player_url(url: str) -> str:
    """Force https and add quality/autoplay defaults if missing.

    Examples:
        >>> normalize_player_url("http://vk.com/player.html")
        'https://vk.com/player.html?hd=2&autoplay=0'
    """
    if url.startswith("//"):
        url = "https:" + url
    url = re.sub(r"^http:", "https:", url, flags=re.IGNORECASE)
    url = _append_param(url, "hd", defaults.EMBED_QUALITY)
    return _append_param(url, "autoplay", defaults.EMBED_AUTOPLAY)


def _fallback(reference: VideoReference, outcome: LookupOutcome) -> EmbedResult:
    embed_url = build_embed_url(reference.owner_id, reference.video_id, reference.access_key)
    logger.info(f"Using fallback embed URL with existing hash: {embed_url}")
    return EmbedResult(
        embed_url=embed_url,
        reference=reference,
        source="fallback",
        access_key=reference.access_key,
    )


def _reject(reference: VideoReference, outcome: LookupOutcome) -> EmbedResult:
    error = outcome.error
    raise ProviderRejectedError(
        error.message if error else None,
        error_code=error.code if error else None,
    )


def _not_found(reference: VideoReference, outcome: LookupOutcome) -> EmbedResult:
    raise VideoNotFoundError()


def _from_metadata(reference: VideoReference, outcome: LookupOutcome) -> EmbedResult:
    record = outcome.first
    # Provider-issued key wins over the one from the URL
    access_key = record.access_key or reference.access_key

    if record.player_url:
        embed_url = normalize_player_url(record.player_url)
    else:
        embed_url = build_embed_url(reference.owner_id, reference.video_id, access_key)

    logger.info(f"Generated embed URL: {embed_url}")
    return EmbedResult(
        embed_url=embed_url,
        reference=reference,
        source="vk_api",
        access_key=access_key,
        title=record.title,
        duration_seconds=record.duration_seconds,
        player_url=record.player_url,
    )


@dataclass(frozen=True)
class Decision:
    """One row of the decision table.

    ``has_access_key`` None means the row applies either way.
    """

    name: str
    outcome: OutcomeKind
    has_access_key: bool | None
    action: Callable[[VideoReference, LookupOutcome], EmbedResult]

    def matches(self, kind: OutcomeKind, has_access_key: bool) -> bool:
        if self.outcome is not kind:
            return False
        return self.has_access_key is None or self.has_access_key == has_access_key


DECISION_TABLE: list[Decision] = [
    Decision("error_with_known_key", OutcomeKind.ERROR, True, _fallback),
    Decision("error_without_key", OutcomeKind.ERROR, False, _reject),
    Decision("empty_with_known_key", OutcomeKind.EMPTY, True, _fallback),
    Decision("empty_without_key", OutcomeKind.EMPTY, False, _not_found),
    Decision("records", OutcomeKind.RECORDS, None, _from_metadata),
]


def select_decision(outcome: LookupOutcome, has_access_key: bool) -> Decision:
    """Return the first decision-table row matching the inputs."""
    kind = classify_outcome(outcome)
    for decision in DECISION_TABLE:
        if decision.matches(kind, has_access_key):
            return decision
    raise LookupError(f"No decision for outcome={kind.value} has_access_key={has_access_key}")


def synthesize_embed(reference: VideoReference, outcome: LookupOutcome) -> EmbedResult:
    """Produce the EmbedResult for a resolved reference and its lookup outcome.

    Args:
        reference: Identity resolved from the URL; its access key is the
            pre-known key.
        outcome: Result of the metadata lookup.

    Returns:
        EmbedResult with source "vk_api" or "fallback".

    Raises:
        ProviderRejectedError: Provider error and no pre-known access key.
        VideoNotFoundError: No records and no pre-known access key.
    """
    decision = select_decision(outcome, reference.has_access_key)
    logger.debug(f"Embed decision for {reference}: {decision.name}")
    return decision.action(reference, outcome)
