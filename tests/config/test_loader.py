from __future__ import annotations

import json
from pathlib import Path

import pytest

from supplier_export.config import ConfigLocator, ConfigRepository
from supplier_export.errors import ConfigError


def test_locator_prefers_environment_root(isolated_home: Path) -> None:
    locator = ConfigLocator(root=Path("/somewhere/else"))
    assert locator.root == isolated_home.resolve()
    assert locator.resolve() == isolated_home.resolve() / "config.json"
    assert locator.resolve(None) == locator.resolve("")
    assert locator.resolve("/abs/cfg.json") == Path("/abs/cfg.json")
    assert locator.logs_dir == isolated_home.resolve() / "logs"


def test_load_json_relative_to_root(isolated_home: Path) -> None:
    (isolated_home / "config.json").write_text(
        json.dumps({"access_token": "tok", "page_size": 250, "max_workers": 2}),
        encoding="utf-8",
    )
    config = ConfigRepository().load()
    assert config.access_token == "tok"
    assert config.page_size == 250
    assert config.max_workers == 2


def test_load_json_with_bom(isolated_home: Path, monkeypatch) -> None:
    monkeypatch.chdir(isolated_home)
    path = isolated_home / "bom.json"
    path.write_bytes(b"\xef\xbb\xbf" + json.dumps({"access_token": "tok"}).encode("utf-8"))
    assert ConfigRepository().load("bom.json").access_token == "tok"


def test_load_yaml(isolated_home: Path) -> None:
    path = isolated_home / "export.yaml"
    path.write_text("access_token: tok\nrequest_delay: 1.5\noutput_dir: exports\n", encoding="utf-8")
    config = ConfigRepository().load(path)
    assert config.request_delay == 1.5
    assert config.output_dir == Path("exports")


@pytest.mark.parametrize(
    ("filename", "content", "message"),
    [
        ("broken.json", "{not json", "malformed"),
        ("list.json", "[1, 2]", "mapping"),
        ("invalid.json", '{"page_size": -1}', "invalid"),
    ],
)
def test_bad_files_raise_config_error(
    isolated_home: Path, monkeypatch, filename, content, message
) -> None:
    monkeypatch.chdir(isolated_home)
    (isolated_home / filename).write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        ConfigRepository().load(filename)


def test_missing_file_raises_config_error(isolated_home: Path, monkeypatch) -> None:
    monkeypatch.chdir(isolated_home)
    with pytest.raises(ConfigError, match="not found"):
        ConfigRepository().load("missing.json")


def test_relative_path_follows_working_directory(tmp_path: Path, monkeypatch) -> None:
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("SUPPLIER_EXPORT_HOME", str(home))
    monkeypatch.chdir(work)
    (work / "my.json").write_text(json.dumps({"access_token": "from-cwd"}), encoding="utf-8")
    (home / "config.json").write_text(json.dumps({"access_token": "from-home"}), encoding="utf-8")

    repository = ConfigRepository()

    assert repository.locator.resolve("my.json") == work.resolve() / "my.json"
    assert repository.load("my.json").access_token == "from-cwd"
    assert repository.load().access_token == "from-home"
    assert repository.locator.logs_dir == home.resolve() / "logs"
