"""
tests/test_config.py — YAML Configuration Loader Tests
=======================================================
"""

from __future__ import annotations

import dataclasses

import pytest

from startupconnect.config import load_config

_YAML = """\
app_name: StartupConnect
tagline: Where founders meet their backers
api_port: 8000
feed_page_size: 25
"""


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(_YAML, encoding="utf-8")

        cfg = load_config(path)
        assert cfg.app_name == "StartupConnect"
        assert cfg.feed_page_size == 25
        assert cfg.default_language == "en"

    def test_config_is_frozen(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(_YAML, encoding="utf-8")
        cfg = load_config(path)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.app_name = "Other"

    def test_missing_file_has_hint(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.yaml.example"):
            load_config(tmp_path / "absent.yaml")

    def test_missing_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("app_name: StartupConnect\n", encoding="utf-8")
        with pytest.raises(KeyError):
            load_config(path)

    def test_example_file_loads(self):
        from pathlib import Path

        example = Path(__file__).resolve().parent.parent / "config.yaml.example"
        assert load_config(example).api_port == 8000
