"""Tests for the config module."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from beo.config import (
    get_db_path,
    load_config,
    reset_db_path,
    save_config,
    set_db_path,
    set_default_hourly_limit,
)
from beo.models import AppConfig


def _patch_config_paths(tmp_path: Path):
    """Return context managers that redirect config and data dirs to tmp_path."""
    cfg_dir = tmp_path / "config"
    cfg_file = cfg_dir / "config.json"
    return (
        patch("beo.config._CONFIG_DIR", cfg_dir),
        patch("beo.config._CONFIG_FILE", cfg_file),
        patch("beo.config._DB_DIR", tmp_path / "data"),
    )


class TestLoadSaveConfig:
    def test_load_default_when_missing(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            config = load_config()
            assert config.db_path is None
            assert config.default_hourly_limit == 45

    def test_save_and_load_roundtrip(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            path = save_config(AppConfig(db_path="/tmp/test.db", default_hourly_limit=30))
            assert path.exists()

            loaded = load_config()
            assert loaded.db_path == "/tmp/test.db"
            assert loaded.default_hourly_limit == 30

    def test_load_handles_corrupt_file(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            cfg_dir = tmp_path / "config"
            cfg_dir.mkdir(parents=True, exist_ok=True)
            (cfg_dir / "config.json").write_text("not valid json{{{")
            assert load_config() == AppConfig()

    def test_load_handles_out_of_range_limit(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            cfg_dir = tmp_path / "config"
            cfg_dir.mkdir(parents=True, exist_ok=True)
            (cfg_dir / "config.json").write_text('{"default_hourly_limit": 500}')
            assert load_config().default_hourly_limit == 45


class TestDbPath:
    def test_default_path(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            path = get_db_path()
            assert path == tmp_path / "data" / "beo.db"
            assert path.parent.is_dir()

    def test_set_db_path(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            custom = tmp_path / "custom" / "my.db"
            cfg = set_db_path(str(custom))
            assert cfg.db_path == str(custom)
            assert get_db_path() == custom

    def test_set_db_path_directory(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            d = tmp_path / "somedir"
            d.mkdir()
            cfg = set_db_path(str(d))
            assert cfg.db_path is not None
            assert cfg.db_path.endswith("beo.db")

    def test_reset_db_path(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            set_db_path(str(tmp_path / "custom.db"))
            cfg = reset_db_path()
            assert cfg.db_path is None


class TestDefaultLimit:
    def test_set_default_limit_keeps_db_path(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            set_db_path(str(tmp_path / "custom.db"))
            cfg = set_default_hourly_limit(20)
            assert cfg.default_hourly_limit == 20
            assert load_config().db_path == cfg.db_path

    def test_invalid_default_limit_rejected(self, tmp_path: Path) -> None:
        p1, p2, p3 = _patch_config_paths(tmp_path)
        with p1, p2, p3:
            with pytest.raises(ValidationError):
                set_default_hourly_limit(90)
            assert load_config().default_hourly_limit == 45
