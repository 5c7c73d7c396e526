import copy
import json

from heatsearch.config.loader import _migrate_config, load_config, save_config
from heatsearch.config.schema import DEFAULT_SEARCH_URL, Config


def test_load_config_defaults_when_file_missing(tmp_path) -> None:
    cfg = load_config(tmp_path / "missing.json")

    assert cfg.search.base_url == DEFAULT_SEARCH_URL
    assert cfg.search.timeout == 10.0
    assert "iPhone" in cfg.search.mobile_user_agent


def test_save_and_load_roundtrip(tmp_path) -> None:
    path = tmp_path / "nested" / "config.json"
    cfg = Config()
    cfg.search.desktop_user_agent = "custom-desktop"
    cfg.search.timeout = 3.5

    save_config(cfg, path)
    raw = json.loads(path.read_text(encoding="utf-8"))
    loaded = load_config(path)

    assert raw["search"]["desktopUserAgent"] == "custom-desktop"
    assert raw["search"]["baseUrl"] == DEFAULT_SEARCH_URL
    assert loaded.search.desktop_user_agent == "custom-desktop"
    assert loaded.search.timeout == 3.5


def test_load_config_accepts_snake_case_keys(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"search": {"base_url": "https://google.example/search"}}),
        encoding="utf-8",
    )

    assert load_config(path).search.base_url == "https://google.example/search"


def test_load_config_falls_back_on_invalid_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_config(path) == Config()


def test_load_config_falls_back_on_invalid_values(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"search": {"timeout": -1}}), encoding="utf-8")

    assert load_config(path).search.timeout == 10.0


def test_migrate_keeps_configured_values() -> None:
    raw = {"search": {"baseUrl": "https://google.example/search", "desktopUserAgent": "custom"}}

    migrated = _migrate_config(copy.deepcopy(raw))
    assert migrated == raw


def test_migrate_fills_empty_base_url() -> None:
    migrated = _migrate_config({"search": {"baseUrl": ""}})
    assert migrated["search"]["baseUrl"] == DEFAULT_SEARCH_URL

    migrated = _migrate_config({})
    assert migrated["search"]["baseUrl"] == DEFAULT_SEARCH_URL
