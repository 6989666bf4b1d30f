import httpx
import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from api.collector import ApiCollector
from api.main import app
from pipelines.gather import Gatherer

from conftest import API_URL, RATE_HEADERS

REPO_URL = f"{API_URL}/repos/octo/hello"
ORG_URL = f"{API_URL}/orgs/acme/repos"
RATE_URL = f"{API_URL}/rate_limit"

HELLO = {
    "name": "hello",
    "owner": {"login": "octo"},
    "private": False,
    "fork": False,
    "archived": False,
    "license": {"key": "mit"},
    "language": "Python",
    "stargazers_count": 42,
    "forks_count": 7,
    "open_issues_count": 3,
    "watchers_count": 42,
    "size": 1024,
}

TOOLS = {
    "name": "tools",
    "owner": {"login": "acme"},
    "private": True,
    "fork": True,
    "archived": False,
    "license": None,
    "language": None,
    "stargazers_count": 1,
    "forks_count": 0,
    "open_issues_count": 0,
    "watchers_count": 1,
    "size": 12,
}

HELLO_LABELS = {
    "repo": "hello",
    "user": "octo",
    "private": "false",
    "fork": "false",
    "archived": "false",
    "license": "mit",
    "language": "Python",
}


def _routes(rate_headers=RATE_HEADERS, repo_route=None):
    return {
        REPO_URL: repo_route or (lambda request: httpx.Response(200, json=HELLO)),
        ORG_URL: lambda request: httpx.Response(200, json=[TOOLS]),
        RATE_URL: lambda request: httpx.Response(200, headers=rate_headers),
    }


def _registry(config, api) -> CollectorRegistry:
    registry = CollectorRegistry()
    registry.register(ApiCollector(config, Gatherer(config, transport=api.transport)))
    return registry


def test_collector_exposes_records_and_rate_limits(fake_api, make_config):
    registry = _registry(make_config(REPO_URL, ORG_URL), fake_api(_routes()))

    assert registry.get_sample_value("github_exporter_up") == 1.0
    assert registry.get_sample_value("github_repo_stars", HELLO_LABELS) == 42.0
    assert registry.get_sample_value("github_repo_size", HELLO_LABELS) == 1024.0
    assert (
        registry.get_sample_value(
            "github_repo_forks",
            {
                "repo": "tools",
                "user": "acme",
                "private": "true",
                "fork": "true",
                "archived": "false",
                "license": "",
                "language": "",
            },
        )
        == 0.0
    )
    assert registry.get_sample_value("github_rate_limit") == 60.0
    assert registry.get_sample_value("github_rate_remaining") == 59.0
    assert registry.get_sample_value("github_rate_reset") == 1700000000.0


def test_collector_uses_configured_namespace(fake_api, make_config):
    config = make_config(REPO_URL, namespace="upstream")
    registry = _registry(config, fake_api(_routes()))

    assert registry.get_sample_value("upstream_repo_stars", HELLO_LABELS) == 42.0
    assert registry.get_sample_value("github_repo_stars", HELLO_LABELS) is None


def test_records_without_a_numeric_field_are_skipped(fake_api, make_config):
    partial = {**HELLO, "stargazers_count": None}
    routes = _routes(repo_route=lambda request: httpx.Response(200, json=partial))
    registry = _registry(make_config(REPO_URL), fake_api(routes))

    assert registry.get_sample_value("github_repo_stars", HELLO_LABELS) is None
    assert registry.get_sample_value("github_repo_forks", HELLO_LABELS) == 7.0


def test_target_failure_exposes_only_exporter_up(fake_api, make_config):
    routes = _routes(repo_route=httpx.ConnectError("refused"))
    registry = _registry(make_config(REPO_URL, ORG_URL), fake_api(routes))

    samples = [sample for family in registry.collect() for sample in family.samples]

    assert [(s.name, s.value) for s in samples] == [("github_exporter_up", 0.0)]


def test_rate_limit_failure_still_exposes_records(fake_api, make_config, caplog):
    headers = {k: v for k, v in RATE_HEADERS.items() if k != "X-RateLimit-Reset"}
    registry = _registry(make_config(REPO_URL), fake_api(_routes(rate_headers=headers)))

    assert registry.get_sample_value("github_exporter_up") == 1.0
    assert registry.get_sample_value("github_repo_stars", HELLO_LABELS) == 42.0
    assert registry.get_sample_value("github_rate_limit") is None
    assert "X-RateLimit-Reset" in caplog.text


@pytest.fixture()
def client(fake_api, make_config, monkeypatch):
    config = make_config(REPO_URL, ORG_URL)
    gatherer = Gatherer(config, transport=fake_api(_routes()).transport)
    monkeypatch.setattr(app.state, "config", config, raising=False)
    monkeypatch.setattr(app.state, "gatherer", gatherer, raising=False)
    with TestClient(app) as test_client:
        yield test_client


def test_metrics_endpoint_serves_prometheus_text(client):
    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    body = response.text
    assert "# TYPE github_repo_stars gauge" in body
    assert 'repo="hello"' in body
    assert "github_rate_limit 60.0" in body


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_repo_reached_through_two_targets_is_exposed_once(fake_api, make_config):
    routes = {
        **_routes(),
        ORG_URL: lambda request: httpx.Response(200, json=[HELLO, TOOLS]),
    }
    registry = _registry(make_config(REPO_URL, ORG_URL), fake_api(routes))

    stars = [
        sample
        for family in registry.collect()
        if family.name == "github_repo_stars"
        for sample in family.samples
    ]

    assert [sample.labels["repo"] for sample in stars] == ["hello", "tools"]
