"""Tests for postfeed.config — TOML config loading with defaults."""

import postfeed.config as config_mod
from postfeed.config import DEFAULTS, load


class TestLoad:
    def test_missing_config_returns_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_mod, "CONFIG_PATH", tmp_path / "nonexistent.toml")
        result = load()
        assert result == DEFAULTS

    def test_valid_partial_override(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.toml"
        config_file.write_text('site_url = "https://blog.example.com/news"\n')
        monkeypatch.setattr(config_mod, "CONFIG_PATH", config_file)
        result = load()
        assert result["site_url"] == "https://blog.example.com/news"
        assert result["max_posts"] == DEFAULTS["max_posts"]
        assert result["expiry_field"] == DEFAULTS["expiry_field"]

    def test_invalid_toml_returns_defaults(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.toml"
        config_file.write_text("this is not valid {{{{ toml !!!!")
        monkeypatch.setattr(config_mod, "CONFIG_PATH", config_file)
        result = load()
        assert result == DEFAULTS

    def test_full_override(self, tmp_path, monkeypatch):
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            'max_posts = 50\nexpiry_field = "expires"\nlock_timeout = 2\ncache_dir = "/srv/feeds"\n'
        )
        monkeypatch.setattr(config_mod, "CONFIG_PATH", config_file)
        result = load()
        assert result["max_posts"] == 50
        assert result["expiry_field"] == "expires"
        assert result["lock_timeout"] == 2
        assert result["cache_dir"] == "/srv/feeds"

    def test_default_max_posts(self):
        assert DEFAULTS["max_posts"] == 250

    def test_returns_fresh_dict_each_time(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_mod, "CONFIG_PATH", tmp_path / "nonexistent.toml")
        a = load()
        b = load()
        assert a == b
        assert a is not b  # distinct objects
