"""Pydantic models describing a single export run."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_BASE_URL = "https://one.cnncecp.com/cnnc-ps-api/"
DEFAULT_PAGE_SIZE = 1000
DEFAULT_REQUEST_DELAY = 0.5
DEFAULT_OUTPUT_PREFIX = "supplier_data"
DEFAULT_MAX_WORKERS = 5

# Keys that fall back to their default when left at zero or empty.
_ZERO_MEANS_DEFAULT = {
    "page_size": DEFAULT_PAGE_SIZE,
    "request_delay": DEFAULT_REQUEST_DELAY,
    "output_file_prefix": DEFAULT_OUTPUT_PREFIX,
    "max_workers": DEFAULT_MAX_WORKERS,
    "base_url": DEFAULT_BASE_URL,
}


class ExportConfig(BaseModel):
    """Settings consumed by the run controller and the page client."""

    access_token: str = ""
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    request_delay: float = Field(default=DEFAULT_REQUEST_DELAY, ge=0)
    output_file_prefix: str = DEFAULT_OUTPUT_PREFIX
    max_workers: int = Field(default=DEFAULT_MAX_WORKERS, ge=1)
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = Field(default=30.0, gt=0)
    output_dir: Path = Field(default=Path("."))

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        merged = dict(data)
        for key, default in _ZERO_MEANS_DEFAULT.items():
            if merged.get(key) in (None, 0, ""):
                merged[key] = default
        return merged

    @field_validator("access_token", mode="before")
    @classmethod
    def _strip_token(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("base_url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return value

    @field_validator("output_dir", mode="before")
    @classmethod
    def _coerce_dir(cls, value: Any) -> Path:
        return Path(value)

    @property
    def has_token(self) -> bool:
        return bool(self.access_token)

    def masked_token(self, visible: int = 20) -> str:
        if len(self.access_token) > visible:
            return self.access_token[:visible] + "..."
        return self.access_token


__all__ = ["DEFAULT_BASE_URL", "ExportConfig"]
