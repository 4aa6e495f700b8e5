"""Error taxonomy shared by the export engine and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PREVIEW_LIMIT = 100


class FailureKind(str, Enum):
    """Ways a single page fetch can fail."""

    HTTP_STATUS = "http_status"
    DECODE = "decode"
    TRANSPORT = "transport"


def preview(body: str, limit: int = PREVIEW_LIMIT) -> str:
    """Return at most ``limit`` characters of a response body for diagnostics."""

    if len(body) > limit:
        return body[:limit] + "..."
    return body


@dataclass(frozen=True, slots=True)
class PageFailure:
    """Description of a failed page fetch, carried inside a ``PageResult``."""

    kind: FailureKind
    detail: str
    status_code: int | None = None
    body_preview: str = ""

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.detail}"
        if self.status_code is not None:
            text = f"{self.kind.value} {self.status_code}: {self.detail}"
        if self.body_preview:
            text += f" (body: {self.body_preview})"
        return text


class ConfigError(ValueError):
    """Configuration missing, unreadable, malformed or incomplete."""


class PageFetchError(RuntimeError):
    """Raised by the page client when a single fetch fails."""

    def __init__(self, failure: PageFailure) -> None:
        super().__init__(str(failure))
        self.failure = failure


class PrimingError(RuntimeError):
    """The count-discovery request failed, so no page plan can be built."""


__all__ = [
    "ConfigError",
    "FailureKind",
    "PageFailure",
    "PageFetchError",
    "PrimingError",
    "preview",
]
