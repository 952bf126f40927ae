"""
Operations for vkembed.

- resolve_embed: full pipeline from a raw URL to an EmbedResult
- synthesize_embed: decision table turning a lookup outcome into an EmbedResult
"""

from vkembed.operations.resolve import resolve_embed
from vkembed.operations.synthesize import (
    DECISION_TABLE,
    build_embed_url,
    normalize_player_url,
    select_decision,
    synthesize_embed,
)

__all__ = [
    "DECISION_TABLE",
    "build_embed_url",
    "normalize_player_url",
    "resolve_embed",
    "select_decision",
    "synthesize_embed",
]
