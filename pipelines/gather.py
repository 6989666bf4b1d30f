"""Gather cycle: poll every configured target, then read rate limits once."""

from __future__ import annotations

import logging

import httpx

from jobs.config import ExporterConfig
from pipelines.auth import TokenResolver
from pipelines.common import HttpFetcher, build_client
from pipelines.decode import decode_records, is_array
from pipelines.errors import ExporterError
from pipelines.model import GatherResult, RateLimitSnapshot, Record
from pipelines.rate_limit import get_rates

logger = logging.getLogger(__name__)


class Gatherer:
    """Run stateless gather cycles against the configured API.

    Each call to ``gather`` opens its own HTTP client and shares nothing with
    previous or concurrent calls.
    """

    def __init__(
        self,
        config: ExporterConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._resolver = TokenResolver(
            token=config.api_token, token_file=config.api_token_file
        )

    def _collect_records(self, fetcher: HttpFetcher) -> list[Record]:
        records: list[Record] = []
        for url in self.config.targets:
            try:
                response = fetcher.fetch(url)
            except ExporterError as exc:
                logger.error(
                    "Error requesting http data from API for %s. Got error: %s", url, exc
                )
                raise

            body = response.content
            records.extend(decode_records(body, is_array(body), url=url))
            logger.info("API data fetched for %s", url)
        return records

    def gather(self) -> GatherResult:
        """Fetch all targets in order, then the rate-limit snapshot.

        Any target failure raises and discards the records gathered so far. A
        rate-limit failure is returned on ``GatherResult.error`` next to the
        complete record list and a zero snapshot.
        """

        client = build_client(
            timeout=self.config.request_timeout, transport=self._transport
        )
        with client:
            fetcher = HttpFetcher(client, self._resolver)
            records = self._collect_records(fetcher)
            try:
                rates = get_rates(fetcher, self.config.api_url)
            except ExporterError as exc:
                logger.error("Failed to read rate limits from %s: %s", self.config.api_url, exc)
                return GatherResult(records=records, rate_limits=RateLimitSnapshot(), error=exc)

        return GatherResult(records=records, rate_limits=rates)


__all__ = ["Gatherer"]
