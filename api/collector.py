"""Prometheus collector translating gather results into gauge families."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Mapping

from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from jobs.config import ExporterConfig
from pipelines.errors import ExporterError
from pipelines.gather import Gatherer
from pipelines.model import GatherResult, RateLimitSnapshot, Record

logger = logging.getLogger(__name__)

# Metric suffix -> (record field, help text)
RECORD_METRICS: Mapping[str, tuple[str, str]] = {
    "stars": ("stargazers_count", "Total number of Stars for given repository"),
    "forks": ("forks_count", "Total number of forks for given repository"),
    "open_issues": ("open_issues_count", "Total number of open issues for given repository"),
    "watchers": ("watchers_count", "Total number of watchers/subscribers for given repository"),
    "size": ("size", "Size in KB for given repository"),
}

# Label name -> dotted path into the record
RECORD_LABELS: Mapping[str, str] = {
    "repo": "name",
    "user": "owner.login",
    "private": "private",
    "fork": "fork",
    "archived": "archived",
    "license": "license.key",
    "language": "language",
}

# Metric suffix -> (snapshot field, help text)
RATE_METRICS: Mapping[str, tuple[str, str]] = {
    "rate_limit": ("limit", "Number of API queries allowed in a 60 minute window"),
    "rate_remaining": ("remaining", "Number of API queries remaining in the current window"),
    "rate_reset": ("reset", "The time at which the current rate limit window resets in UTC epoch seconds"),
}


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def _label_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _numeric(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def record_families(namespace: str, records: list[Record]) -> list[GaugeMetricFamily]:
    label_names = list(RECORD_LABELS)
    families = []
    for suffix, (field, documentation) in RECORD_METRICS.items():
        family = GaugeMetricFamily(
            f"{namespace}_repo_{suffix}", documentation, labels=label_names
        )
        seen: set[tuple[str, ...]] = set()
        for record in records:
            value = _numeric(record.get(field))
            if value is None:
                continue
            labels = [_label_value(_lookup(record, path)) for path in RECORD_LABELS.values()]
            # A repo reached through several targets is exposed once.
            if tuple(labels) in seen:
                continue
            seen.add(tuple(labels))
            family.add_metric(labels, value)
        families.append(family)
    return families


def rate_families(namespace: str, snapshot: RateLimitSnapshot) -> list[GaugeMetricFamily]:
    return [
        GaugeMetricFamily(f"{namespace}_{suffix}", documentation, value=getattr(snapshot, field))
        for suffix, (field, documentation) in RATE_METRICS.items()
    ]


class ApiCollector(Collector):
    """Run one gather per scrape and expose its records and rate limits."""

    def __init__(self, config: ExporterConfig, gatherer: Gatherer | None = None) -> None:
        self.config = config
        self.gatherer = gatherer or Gatherer(config)

    def _up(self, value: float) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            f"{self.config.namespace}_exporter_up",
            "Whether the last gather of the upstream API succeeded",
            value=value,
        )

    def collect(self) -> Iterator[Metric]:
        try:
            result: GatherResult = self.gatherer.gather()
        except ExporterError as exc:
            logger.error("Gather failed, exposing no API samples: %s", exc)
            yield self._up(0)
            return

        yield self._up(1)
        yield from record_families(self.config.namespace, result.records)

        if result.error is not None:
            logger.error("Rate limits unavailable for this scrape: %s", result.error)
            return
        yield from rate_families(self.config.namespace, result.rate_limits)


__all__ = ["ApiCollector", "RECORD_METRICS", "RECORD_LABELS", "RATE_METRICS"]
