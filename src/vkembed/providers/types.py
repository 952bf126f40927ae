"""
vkembed.providers.types - Lookup outcome types returned by metadata providers.

A lookup either fails at the API level (error code and message) or
succeeds with zero or more VideoMetadata records.

Example:
    >>> outcome = LookupOutcome.failure(15, "Access denied")
    >>> outcome.is_error
    True
    >>> LookupOutcome.success([]).is_empty
    True
"""

from __future__ import annotations

from dataclasses import dataclass, field

from vkembed.models.video_metadata import VideoMetadata


@dataclass(frozen=True)
class ProviderError:
    """API-level error reported by the provider."""

    code: int | str | None
    message: str | None


@dataclass(frozen=True)
class LookupOutcome:
    """Result of a single metadata lookup."""

    error: ProviderError | None = None
    records: list[VideoMetadata] = field(default_factory=list)

    @classmethod
    def failure(cls, code: int | str | None, message: str | None) -> LookupOutcome:
        return cls(error=ProviderError(code=code, message=message))

    @classmethod
    def success(cls, records: list[VideoMetadata]) -> LookupOutcome:
        return cls(records=list(records))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_empty(self) -> bool:
        """True for a successful lookup that returned no records."""
        return not self.is_error and not self.records

    @property
    def first(self) -> VideoMetadata | None:
        return self.records[0] if self.records else None
