"""Configuration loading helpers for supplier-export."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import ExportConfig

DEFAULT_CONFIG_FILENAME = "config.json"
HOME_ENV = "SUPPLIER_EXPORT_HOME"


def _read_file(path: Path) -> dict:
    text = path.read_text(encoding="utf-8-sig")
    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file must contain a mapping: {path}")
    return data


@dataclass(slots=True)
class ConfigLocator:
    """Resolve config and log paths from the working root."""

    root: Path | None = None

    def __post_init__(self) -> None:
        env_root = os.environ.get(HOME_ENV)
        if env_root:
            self.root = Path(env_root).expanduser().resolve()
        else:
            self.root = (self.root or Path.cwd()).resolve()

    @property
    def logs_dir(self) -> Path:
        return self.root / "logs"

    def resolve(self, config_path: str | Path | None = None) -> Path:
        """Default file lives under the root; explicit relative paths follow the cwd."""

        if not config_path:
            return self.root / DEFAULT_CONFIG_FILENAME
        path = Path(config_path).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return path


class ConfigRepository:
    """Read and validate export configuration files."""

    def __init__(self, locator: ConfigLocator | None = None) -> None:
        self.locator = locator or ConfigLocator()

    def load(self, config_path: str | Path | None = None) -> ExportConfig:
        path = self.locator.resolve(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        try:
            payload = _read_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Configuration file unreadable: {path}: {exc}") from exc
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Configuration file malformed: {path}: {exc}") from exc
        try:
            return ExportConfig.model_validate(payload)
        except ValidationError as exc:
            raise ConfigError(f"Configuration invalid: {path}: {exc}") from exc


__all__ = ["ConfigLocator", "ConfigRepository"]
