"""Exporter configuration assembled from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import find_dotenv, load_dotenv

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_NAMESPACE = "github"
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 9171


@dataclass(frozen=True)
class ExporterConfig:
    """Immutable settings shared by every gather cycle."""

    api_url: str = DEFAULT_API_URL
    targets: tuple[str, ...] = ()
    api_token: str | None = None
    api_token_file: str | None = None
    namespace: str = DEFAULT_NAMESPACE
    listen_host: str = DEFAULT_LISTEN_HOST
    listen_port: int = DEFAULT_LISTEN_PORT
    request_timeout: float | None = None
    log_level: str = "INFO"


def _split_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_target_urls(
    api_url: str,
    *,
    repos: Iterable[str] = (),
    orgs: Iterable[str] = (),
    users: Iterable[str] = (),
    extra: Iterable[str] = (),
) -> tuple[str, ...]:
    """Expand repository, organisation and user names into API URLs.

    ``owner/repo`` -> ``<api>/repos/owner/repo``, ``org`` -> ``<api>/orgs/org/repos``,
    ``user`` -> ``<api>/users/user/repos``; explicit URLs in ``extra`` come last.
    """

    urls: list[str] = []
    urls.extend(f"{api_url}/repos/{repo.strip()}" for repo in repos if repo.strip())
    urls.extend(f"{api_url}/orgs/{org.strip()}/repos" for org in orgs if org.strip())
    urls.extend(f"{api_url}/users/{user.strip()}/repos" for user in users if user.strip())
    urls.extend(url.strip() for url in extra if url.strip())
    return tuple(urls)


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}.") from exc


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


def load_config() -> ExporterConfig:
    """Build an ``ExporterConfig`` from environment variables (and ``.env``)."""

    load_dotenv(find_dotenv(usecwd=True))

    api_url = os.getenv("API_URL", DEFAULT_API_URL).rstrip("/")
    targets = build_target_urls(
        api_url,
        repos=_split_list(os.getenv("REPOS")),
        orgs=_split_list(os.getenv("ORGS")),
        users=_split_list(os.getenv("USERS")),
        extra=_split_list(os.getenv("TARGET_URLS")),
    )

    return ExporterConfig(
        api_url=api_url,
        targets=targets,
        api_token=os.getenv("GITHUB_TOKEN") or None,
        api_token_file=os.getenv("GITHUB_TOKEN_FILE") or None,
        namespace=os.getenv("METRICS_NAMESPACE", DEFAULT_NAMESPACE),
        listen_host=os.getenv("LISTEN_HOST", DEFAULT_LISTEN_HOST),
        listen_port=_int_env("LISTEN_PORT", DEFAULT_LISTEN_PORT),
        request_timeout=_optional_float("REQUEST_TIMEOUT"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


__all__ = [
    "ExporterConfig",
    "DEFAULT_API_URL",
    "build_target_urls",
    "load_config",
]
