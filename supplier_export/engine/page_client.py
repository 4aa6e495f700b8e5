"""Single page fetch against the vendor query endpoint."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from ..config import ExportConfig
from ..errors import FailureKind, PageFailure, PageFetchError, preview
from .payload import RequestTemplate, build_headers
from .task_queue import PageDescriptor

Record = list[Any]


@dataclass(slots=True)
class PageFetch:
    """Rows returned for one page plus the advertised total, when present."""

    rows: list[Record] = field(default_factory=list)
    total_count_hint: int | None = None


class PageClient:
    """Issue one POST per page on a shared connection pool; never retries."""

    def __init__(
        self,
        config: ExportConfig,
        template: RequestTemplate | None = None,
        client: httpx.Client | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.template = template or RequestTemplate()
        self.logger = logger or structlog.get_logger("supplier_export.page_client")
        self._headers = build_headers(config.access_token, config.base_url)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=config.request_timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "PageClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def fetch(self, descriptor: PageDescriptor) -> PageFetch:
        body = self.template.for_page(descriptor.limit, descriptor.offset)
        self.logger.debug(
            "page_request",
            page=descriptor.page_number,
            offset=descriptor.offset,
            limit=descriptor.limit,
        )
        try:
            response = self._client.post(
                self.config.base_url,
                json=body,
                headers=self._headers,
                timeout=self.config.request_timeout,
            )
        except httpx.HTTPError as exc:
            raise PageFetchError(
                PageFailure(kind=FailureKind.TRANSPORT, detail=f"{type(exc).__name__}: {exc}")
            ) from exc

        text = response.text
        if not response.is_success:
            raise PageFetchError(
                PageFailure(
                    kind=FailureKind.HTTP_STATUS,
                    detail=f"unexpected status {response.status_code}",
                    status_code=response.status_code,
                    body_preview=preview(text),
                )
            )
        return self._decode(text)

    def _decode(self, text: str) -> PageFetch:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PageFetchError(
                PageFailure(kind=FailureKind.DECODE, detail=str(exc), body_preview=preview(text))
            ) from exc
        if not isinstance(payload, dict):
            raise self._shape_error("response is not a JSON object", text)

        blocks = payload.get("__blocks__") or {}
        if not isinstance(blocks, dict):
            raise self._shape_error("__blocks__ is not an object", text)
        block = blocks.get(self.template.block)
        if block is None:
            return PageFetch()
        if not isinstance(block, dict):
            raise self._shape_error(f"block {self.template.block!r} is not an object", text)

        rows = block.get("rows") or []
        if not isinstance(rows, list):
            raise self._shape_error("rows is not a list", text)

        attr = block.get("attr") or {}
        count = attr.get("count") if isinstance(attr, dict) else None
        hint: int | None = None
        if count is not None:
            try:
                hint = int(count)
            except (TypeError, ValueError):
                raise self._shape_error(f"count is not an integer: {count!r}", text) from None
        if any(not isinstance(row, list) for row in rows):
            raise self._shape_error("row is not a list", text)
        return PageFetch(rows=rows, total_count_hint=hint)

    @staticmethod
    def _shape_error(detail: str, text: str) -> PageFetchError:
        return PageFetchError(
            PageFailure(kind=FailureKind.DECODE, detail=detail, body_preview=preview(text))
        )


__all__ = ["PageClient", "PageFetch", "Record"]
