"""Data model handed from the gather pipeline to metrics emission."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from pipelines.errors import ExporterError

Record = dict[str, Any]


class RateLimitSnapshot(BaseModel):
    """Remaining API quota as reported by the ``/rate_limit`` endpoint.

    The all-zero instance means no usable rate-limit data was obtained.
    """

    model_config = ConfigDict(frozen=True)

    limit: float = Field(0.0, description="Requests allowed per window (X-RateLimit-Limit).")
    remaining: float = Field(
        0.0, description="Requests left in the current window (X-RateLimit-Remaining)."
    )
    reset: float = Field(
        0.0, description="Epoch seconds at which the window resets (X-RateLimit-Reset)."
    )


class GatherResult(BaseModel):
    """Outcome of one gather cycle.

    ``error`` is set only when rate-limit accounting failed; the records are
    still valid in that case and ``rate_limits`` holds the zero snapshot.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    records: list[Record] = Field(default_factory=list)
    rate_limits: RateLimitSnapshot = Field(default_factory=RateLimitSnapshot)
    error: Optional[ExporterError] = None


__all__ = ["Record", "RateLimitSnapshot", "GatherResult"]
