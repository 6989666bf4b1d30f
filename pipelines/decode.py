"""Shape probing and decoding of JSON API payloads.

Upstream endpoints answer either with a single JSON object or with an array of
objects. ``is_array`` peeks at the first significant byte so the body is parsed
exactly once by ``decode_records``, which flattens both shapes into a list.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pipelines.model import Record

logger = logging.getLogger(__name__)

_JSON_WHITESPACE = b" \t\r\n"


def is_array(body: bytes) -> bool:
    """Return True iff the first non-whitespace byte of ``body`` is ``[``."""

    stripped = body.lstrip(_JSON_WHITESPACE)
    return stripped[:1] == b"["


def _as_records(payload: Any, expect_array: bool) -> list[Record] | None:
    if expect_array:
        if not isinstance(payload, list):
            return None
        if not all(isinstance(item, dict) for item in payload):
            return None
        return list(payload)
    if not isinstance(payload, dict):
        return None
    return [payload]


def decode_records(body: bytes, array: bool, *, url: str = "") -> list[Record]:
    """Decode ``body`` into records according to the probed shape.

    A malformed payload is not fatal to the gather cycle: a warning is logged
    and no records are contributed for this target.
    """

    try:
        payload = json.loads(body)
    except (ValueError, RecursionError) as exc:
        logger.warning("Discarding malformed JSON from %s: %s", url or "<unknown>", exc)
        return []

    records = _as_records(payload, array)
    if records is None:
        shape = "an array of objects" if array else "an object"
        logger.warning(
            "Discarding payload from %s: expected %s, got %s",
            url or "<unknown>",
            shape,
            type(payload).__name__,
        )
        return []
    return records


__all__ = ["is_array", "decode_records"]
