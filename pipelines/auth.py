"""Bearer credential resolution for upstream API requests."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SOURCE_INLINE = "inline"
SOURCE_FILE = "file"
SOURCE_NONE = "none"


@dataclass(frozen=True)
class TokenResolver:
    """Resolve the API token with precedence inline > file > none.

    Nothing is cached: the token file is re-read on every ``resolve`` call so a
    rotated credential is used by the next request.
    """

    token: str | None = None
    token_file: str | os.PathLike[str] | None = None

    @property
    def source(self) -> str:
        if self.token:
            return SOURCE_INLINE
        if self.token_file:
            return SOURCE_FILE
        return SOURCE_NONE

    def resolve(self) -> str:
        """Return the credential, or ``""`` when running unauthenticated.

        Raises ``OSError`` when the token file cannot be read and
        ``UnicodeDecodeError`` when it is not UTF-8.
        """

        source = self.source
        if source == SOURCE_INLINE:
            return self.token or ""
        if source == SOURCE_FILE:
            content = Path(self.token_file).read_text(encoding="utf-8")
            logger.debug("Read API token from %s", self.token_file)
            return content.strip()
        return ""


__all__ = ["TokenResolver", "SOURCE_INLINE", "SOURCE_FILE", "SOURCE_NONE"]
