from typing import Callable, Mapping, Union

import httpx
import pytest

from jobs.config import ExporterConfig

API_URL = "https://api.example.test"

RATE_HEADERS = {
    "X-RateLimit-Limit": "60",
    "X-RateLimit-Remaining": "59",
    "X-RateLimit-Reset": "1700000000",
}

Route = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class FakeApi:
    """Routes requests by URL and remembers every request it served."""

    def __init__(self, routes: Mapping[str, Route]) -> None:
        self.routes = dict(routes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(request)
        return route

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture()
def fake_api() -> Callable[[Mapping[str, Route]], FakeApi]:
    return FakeApi


@pytest.fixture()
def rate_limit_route() -> httpx.Response:
    return httpx.Response(200, json={"resources": {}}, headers=RATE_HEADERS)


@pytest.fixture()
def make_config() -> Callable[..., ExporterConfig]:
    def _make(*targets: str, **overrides) -> ExporterConfig:
        return ExporterConfig(api_url=API_URL, targets=tuple(targets), **overrides)

    return _make
