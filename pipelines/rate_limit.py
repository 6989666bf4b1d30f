"""Rate-limit accounting read from the upstream ``/rate_limit`` endpoint."""

from __future__ import annotations

import logging
import re
from typing import Mapping

from pipelines.common import HttpFetcher
from pipelines.errors import ParseError
from pipelines.model import RateLimitSnapshot

logger = logging.getLogger(__name__)

RATE_LIMIT_PATH = "/rate_limit"

# Snapshot field -> response header
RATE_LIMIT_HEADERS: Mapping[str, str] = {
    "limit": "X-RateLimit-Limit",
    "remaining": "X-RateLimit-Remaining",
    "reset": "X-RateLimit-Reset",
}


# Plain decimal numbers only: no padding, digit separators or inf/nan.
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _parse_header(headers: Mapping[str, str], name: str) -> float:
    raw = headers.get(name)
    if not raw:
        raise ParseError(name, None)
    if not _NUMBER.fullmatch(raw):
        raise ParseError(name, raw)
    return float(raw)


def get_rates(fetcher: HttpFetcher, base_url: str) -> RateLimitSnapshot:
    """Fetch ``<base_url>/rate_limit`` and parse its three quota headers.

    Every header must parse; a partial snapshot is never returned.
    """

    url = f"{base_url}{RATE_LIMIT_PATH}"
    response = fetcher.fetch(url)
    logger.debug("Rate-limit headers received from %s", url)

    values = {
        field: _parse_header(response.headers, header)
        for field, header in RATE_LIMIT_HEADERS.items()
    }
    return RateLimitSnapshot(**values)


__all__ = ["get_rates", "RATE_LIMIT_PATH", "RATE_LIMIT_HEADERS"]
