"""Tests for configuration loading and precedence."""

import os
from types import SimpleNamespace

from config import AppConfig, default_home, load_config, load_config_file


class TestDefaultHome:
    """Test home directory discovery."""

    def test_prefers_home(self):
        assert default_home({"HOME": "/home/u", "USERPROFILE": "C:/Users/u"}) == "/home/u"

    def test_falls_back_to_userprofile(self):
        assert default_home({"USERPROFILE": "/profiles/u"}) == "/profiles/u"

    def test_falls_back_to_cwd(self):
        assert default_home({}) == "."


class TestAppConfig:
    """Test derived properties."""

    def test_meta_root(self):
        assert AppConfig(home="/tmp/x").meta_root == os.path.join("/tmp/x", ".metapkg")

    def test_headers_without_token(self):
        headers = AppConfig().github_headers()
        assert headers == {"Accept": "application/vnd.github+json", "User-Agent": "MetaPkg-Python"}

    def test_headers_with_token(self):
        cfg = AppConfig(github_token="abc")
        assert cfg.has_token
        assert cfg.github_headers()["Authorization"] == "Bearer abc"


class TestLoadConfigFile:
    """Test YAML file parsing."""

    def test_flat_mapping(self, tmp_path):
        path = tmp_path / "metapkg.yml"
        path.write_text("home: /data\nrequest_timeout: 5\nunknown: 1\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"home": "/data", "request_timeout": 5}

    def test_nested_section(self, tmp_path):
        path = tmp_path / "metapkg.yml"
        path.write_text("metapkg:\n  user_agent: custom-agent\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"user_agent": "custom-agent"}

    def test_missing_file(self, tmp_path, caplog):
        assert load_config_file(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("home: [unclosed\n", encoding="utf-8")
        assert load_config_file(str(path)) == {}


class TestLoadConfig:
    """Test precedence: CLI over environment over file over defaults."""

    def test_defaults(self):
        cfg = load_config(env={"HOME": "/home/u"})
        assert cfg.home == "/home/u"
        assert cfg.github_token is None
        assert cfg.request_timeout == 30
        assert cfg.download_timeout == 60
        assert cfg.github_api_base == "https://api.github.com"

    def test_token_from_environment(self):
        cfg = load_config(env={"HOME": "/home/u", "GITHUB_TOKEN": "ghp_x"})
        assert cfg.github_token == "ghp_x"

    def test_file_values_apply(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("home: /from-file\ndownload_timeout: 120\ngithub_api_base: https://ghe.example/api/v3/\n",
                        encoding="utf-8")
        cfg = load_config(SimpleNamespace(CONFIG=str(path), HOME=None), env={"HOME": "/home/u"})
        assert cfg.home == "/from-file"
        assert cfg.download_timeout == 120.0
        assert cfg.github_api_base == "https://ghe.example/api/v3"

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("home: /from-file\ngithub_token: file-token\n", encoding="utf-8")
        env = {"METAPKG_CONFIG": str(path), "METAPKG_HOME": "/from-env", "GITHUB_TOKEN": "env-token"}
        cfg = load_config(env=env)
        assert cfg.home == "/from-env"
        assert cfg.github_token == "env-token"

    def test_cli_overrides_env(self):
        args = SimpleNamespace(CONFIG=None, HOME="/from-cli")
        cfg = load_config(args, env={"METAPKG_HOME": "/from-env"})
        assert cfg.home == "/from-cli"
