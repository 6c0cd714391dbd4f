"""Tests for configuration loading and validation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from agentwallet.config import (
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_FILENAME,
    load_config,
    resolve_config_path,
)
from agentwallet.errors import ConfigError


def _write(path: Path, payload: object) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestResolveConfigPath:
    def test_default_filename_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert resolve_config_path(None) == (tmp_path / DEFAULT_CONFIG_FILENAME).resolve()
        assert resolve_config_path("   ") == (tmp_path / DEFAULT_CONFIG_FILENAME).resolve()

    def test_explicit_relative_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        assert resolve_config_path("conf/custom.json") == (tmp_path / "conf" / "custom.json").resolve()

    def test_absolute_path_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "abs.json"
        assert resolve_config_path(str(target)) == target.resolve()


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "missing.json")
        assert config == DEFAULT_CONFIG
        assert config.network_names() == ["eip155:1", "eip155:11155111"]

    def test_valid_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "wallet.conf.json",
            {
                "networks": [
                    {"name": " eip155:10 ", "rpcUrl": " https://optimism.example "},
                    {"name": "eip155:8453", "rpcUrl": "https://base.example"},
                ]
            },
        )
        config = load_config(path)
        assert config.network_names() == ["eip155:10", "eip155:8453"]
        assert config.networks[0].rpc_url == "https://optimism.example"
        assert config.to_dict()["networks"][1] == {"name": "eip155:8453", "rpcUrl": "https://base.example"}

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "wallet.conf.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse config"):
            load_config(path)

    def test_networks_must_be_array(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "wallet.conf.json", {"networks": "eip155:1"})
        with pytest.raises(ConfigError, match='"networks" array'):
            load_config(path)

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "wallet.conf.json", [1, 2, 3])
        with pytest.raises(ConfigError, match='"networks" array'):
            load_config(path)

    def test_entries_must_be_objects(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "wallet.conf.json", {"networks": ["eip155:1"]})
        with pytest.raises(ConfigError, match="must be objects"):
            load_config(path)

    def test_bad_network_name(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "wallet.conf.json", {"networks": [{"name": "mainnet", "rpcUrl": "x"}]})
        with pytest.raises(ConfigError, match="Invalid network name"):
            load_config(path)

    def test_missing_rpc_url(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "wallet.conf.json", {"networks": [{"name": "eip155:1"}]})
        with pytest.raises(ConfigError, match="must include rpcUrl"):
            load_config(path)

    def test_config_error_is_runtime(self) -> None:
        assert ConfigError.exit_code == 1
