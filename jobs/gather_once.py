"""One-shot gather job that prints what a scrape would see."""

from __future__ import annotations

import json
import logging
import os
import sys

from jobs.config import ExporterConfig, load_config
from pipelines.errors import ExporterError
from pipelines.gather import Gatherer

logger = logging.getLogger(__name__)

EXIT_TARGET_FAILED = 1
EXIT_RATE_LIMIT_FAILED = 2


def main(config: ExporterConfig | None = None) -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    config = config or load_config()
    if not config.targets:
        logger.warning("No targets configured; only rate limits will be fetched.")

    try:
        result = Gatherer(config).gather()
    except ExporterError as exc:
        logger.error("Gather aborted: %s", exc)
        return EXIT_TARGET_FAILED

    summary = {
        "targets": len(config.targets),
        "records": len(result.records),
        "rate_limits": result.rate_limits.model_dump(),
        "error": str(result.error) if result.error else None,
    }
    json.dump(summary, sys.stdout, indent=2)
    sys.stdout.write("\n")
    logger.info("Gather finished (records=%s).", len(result.records))
    return EXIT_RATE_LIMIT_FAILED if result.error else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
