"""FastAPI service exposing upstream API data as Prometheus metrics."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from api.collector import ApiCollector
from jobs.config import load_config


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = getattr(app.state, "config", None) or load_config()
    registry = CollectorRegistry()
    registry.register(ApiCollector(config, getattr(app.state, "gatherer", None)))
    app.state.config = config
    app.state.registry = registry
    yield


app = FastAPI(title="JSON API Exporter", version="0.1.0", lifespan=lifespan)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics")
def metrics(request: Request) -> Response:
    # Sync handler: FastAPI runs the blocking gather in its threadpool.
    payload = generate_latest(request.app.state.registry)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
