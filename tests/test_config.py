"""Tests for twenty_cli.config -- XDG paths, atomic writes, precedence."""

from __future__ import annotations

import json
import os
import stat
from pathlib import Path
from typing import Any

import pytest

from twenty_cli.config import (
    _atomic_write,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_global_config,
    resolve_config,
    resolve_credential,
    resolve_token,
    save_global_config,
)
from twenty_cli.credentials import CredentialEntry, CredentialStore
from twenty_cli.exceptions import AuthError, ConfigError
from twenty_cli.models import GlobalConfig


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


class TestPaths:
    def test_config_dir_under_xdg(self, isolated_config: Path):
        assert get_config_dir() == isolated_config / "config" / "twenty"
        assert get_config_dir().is_dir()

    def test_data_dir_under_xdg(self, isolated_config: Path):
        assert get_data_dir() == isolated_config / "data" / "twenty"

    def test_fallback_dir(self, monkeypatch, tmp_path: Path):
        monkeypatch.setattr("twenty_cli.config._is_xdg_platform", lambda: False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)
        assert get_config_dir() == tmp_path / ".twenty"
        assert get_data_dir() == tmp_path / ".twenty" / "data"


# ---------------------------------------------------------------------------
# Atomic writes
# ---------------------------------------------------------------------------


class TestAtomicWrite:
    def test_writes_and_replaces(self, tmp_path: Path):
        target = tmp_path / "sub" / "file.json"
        _atomic_write(target, "one")
        _atomic_write(target, "two")
        assert target.read_text() == "two"
        assert [p.name for p in target.parent.iterdir()] == ["file.json"]

    def test_mode_applied(self, tmp_path: Path):
        target = tmp_path / "secret.json"
        _atomic_write(target, "x", mode=0o600)
        assert stat.S_IMODE(os.stat(target).st_mode) == 0o600


# ---------------------------------------------------------------------------
# Global config
# ---------------------------------------------------------------------------


class TestGlobalConfig:
    def test_defaults_when_missing(self):
        config = load_global_config()
        assert config.base_url == "https://api.twenty.com"
        assert config.output == "text"

    def test_round_trip(self):
        save_global_config(GlobalConfig(base_url="https://crm.example.com", default_profile="work"))
        loaded = load_global_config()
        assert loaded.base_url == "https://crm.example.com"
        assert loaded.default_profile == "work"

    def test_invalid_json(self):
        path = global_config_path()
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid global config"):
            load_global_config()


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------


class TestResolveConfig:
    def test_defaults(self):
        resolved = resolve_config()
        assert resolved.profile == "default"
        assert resolved.base_url == "https://api.twenty.com"
        assert resolved.output == "text"

    def test_config_file(self):
        _write_json(
            global_config_path(),
            {"base_url": "https://file.test/", "output": "yaml", "default_profile": "work"},
        )
        resolved = resolve_config()
        assert resolved.profile == "work"
        assert resolved.base_url == "https://file.test"
        assert resolved.output == "yaml"

    def test_profile_base_url_beats_config(self):
        _write_json(global_config_path(), {"base_url": "https://file.test"})
        CredentialStore("default").save(CredentialEntry(token="t", base_url="https://stored.test"))
        assert resolve_config().base_url == "https://stored.test"

    def test_env_beats_config(self, monkeypatch):
        _write_json(global_config_path(), {"output": "yaml"})
        monkeypatch.setenv("TWENTY_OUTPUT", "csv")
        monkeypatch.setenv("TWENTY_PROFILE", "env-profile")
        monkeypatch.setenv("TWENTY_BASE_URL", "https://env.test")
        resolved = resolve_config()
        assert resolved.output == "csv"
        assert resolved.profile == "env-profile"
        assert resolved.base_url == "https://env.test"

    def test_flags_beat_env(self, monkeypatch):
        monkeypatch.setenv("TWENTY_OUTPUT", "csv")
        monkeypatch.setenv("TWENTY_PROFILE", "env-profile")
        monkeypatch.setenv("TWENTY_BASE_URL", "https://env.test")
        resolved = resolve_config(
            cli_profile="flag-profile", cli_base_url="https://flag.test", cli_output="json"
        )
        assert resolved.output == "json"
        assert resolved.profile == "flag-profile"
        assert resolved.base_url == "https://flag.test"


# ---------------------------------------------------------------------------
# Credentials and tokens
# ---------------------------------------------------------------------------


class TestResolveCredential:
    def test_env(self, monkeypatch):
        monkeypatch.setenv("MY_TWENTY_KEY", "abc")
        assert resolve_credential("env:MY_TWENTY_KEY") == "abc"

    def test_env_missing(self):
        with pytest.raises(ConfigError, match="MISSING_VAR"):
            resolve_credential("env:MISSING_VAR")

    def test_file(self, tmp_path: Path):
        path = tmp_path / "token.txt"
        path.write_text("  tok-from-file\n")
        assert resolve_credential(f"file:{path}") == "tok-from-file"

    def test_file_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_store(self):
        CredentialStore("work").save(CredentialEntry(token="stored"))
        assert resolve_credential("store:work") == "stored"

    def test_store_missing(self):
        with pytest.raises(ConfigError, match="No stored credential"):
            resolve_credential("store:ghost")

    def test_prompt_requires_tty(self, monkeypatch):
        monkeypatch.setattr("sys.stdin.isatty", lambda: False)
        with pytest.raises(ConfigError, match="not a TTY"):
            resolve_credential("prompt")

    def test_unknown(self):
        with pytest.raises(ConfigError, match="Unknown credential source"):
            resolve_credential("vault:x")


class TestResolveToken:
    def test_env_wins(self, monkeypatch):
        CredentialStore("default").save(CredentialEntry(token="stored"))
        monkeypatch.setenv("TWENTY_TOKEN", "from-env")
        assert resolve_token("default") == ("from-env", "TWENTY_TOKEN")

    def test_token_source(self, monkeypatch):
        monkeypatch.setenv("OTHER_VAR", "from-source")
        assert resolve_token("default", "env:OTHER_VAR") == ("from-source", "env:OTHER_VAR")

    def test_store(self):
        CredentialStore("work").save(CredentialEntry(token="stored"))
        assert resolve_token("work") == ("stored", "store:work")

    def test_missing(self):
        with pytest.raises(AuthError, match="not authenticated for profile 'default'") as excinfo:
            resolve_token("default")
        assert excinfo.value.exit_code == 3
