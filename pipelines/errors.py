"""Exception taxonomy raised by the gather pipeline."""

from __future__ import annotations


class ExporterError(Exception):
    """Base class for failures surfaced by a gather cycle."""


class AuthError(ExporterError):
    """The API credential could not be resolved (e.g. unreadable token file)."""


class TransportError(ExporterError):
    """The HTTP request could not be built or completed."""


class ParseError(ExporterError):
    """A rate-limit header was missing or not numeric."""

    def __init__(self, header: str, value: str | None) -> None:
        self.header = header
        self.value = value
        if value is None:
            message = f"Missing rate-limit header {header}"
        else:
            message = f"Non-numeric rate-limit header {header}={value!r}"
        super().__init__(message)


__all__ = ["ExporterError", "AuthError", "TransportError", "ParseError"]
