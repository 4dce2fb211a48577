"""Settings, durations and the contract address registry."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import HOLDER
from inachus.config import Settings, load_settings, save_setting
from inachus.errors import ConfigError, InvalidAddress
from inachus.registry import AddressRegistry
from inachus.utils import parse_duration

SETTING_KEYS = (
    "INACHUS_RPC_URL",
    "PRIVATE_KEY",
    "CHAIN_ID",
    "WAIT_TIME",
    "POLL_INTERVAL",
    "ABI_DIR",
    "INACHUS_CONTRACTS",
)


@pytest.fixture()
def clean_env():
    env = {k: v for k, v in os.environ.items() if k not in SETTING_KEYS}
    with patch.dict(os.environ, env, clear=True):
        yield


class TestParseDuration:
    @pytest.mark.parametrize(
        "text,seconds",
        [("30s", 30), ("1m30s", 90), ("500ms", 0.5), ("2h", 7200), ("1d", 86400), ("45", 45), ("1.5s", 1.5)],
    )
    def test_valid(self, text: str, seconds: float) -> None:
        assert parse_duration(text) == seconds

    @pytest.mark.parametrize("text", ["", "abc", "10x", "-5", "s30", "1m 30q"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_duration(text)


@pytest.mark.usefixtures("clean_env")
class TestLoadSettings:
    def test_defaults(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.env")
        assert settings.rpc_url == "http://localhost:8545"
        assert settings.private_key is None
        assert settings.chain_id == 1
        assert settings.wait_time == 30
        assert settings.poll_interval == 2
        assert settings.abi_dir == Path("./abis")

    def test_env_file_is_loaded(self, tmp_path: Path) -> None:
        env_path = tmp_path / ".env"
        env_path.write_text(
            "INACHUS_RPC_URL=https://rpc.example.org\nCHAIN_ID=11155111\nWAIT_TIME=1m\n",
            encoding="utf-8",
        )
        settings = load_settings(env_path)
        assert settings.rpc_url == "https://rpc.example.org"
        assert settings.chain_id == 11155111
        assert settings.wait_time == 60

    def test_process_env_wins_over_file(self, tmp_path: Path) -> None:
        env_path = tmp_path / ".env"
        env_path.write_text("CHAIN_ID=5\n", encoding="utf-8")
        with patch.dict(os.environ, {"CHAIN_ID": "137"}):
            assert load_settings(env_path).chain_id == 137

    def test_private_key_gets_prefix(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"PRIVATE_KEY": "ab" * 32}):
            settings = load_settings(tmp_path / "missing.env")
        assert settings.private_key == "0x" + "ab" * 32
        assert "ab" * 32 not in repr(settings)

    @pytest.mark.parametrize(
        "key,value",
        [
            ("INACHUS_RPC_URL", "ws://localhost:8546"),
            ("CHAIN_ID", "mainnet"),
            ("CHAIN_ID", "-1"),
            ("PRIVATE_KEY", "0x1234"),
            ("WAIT_TIME", "soon"),
            ("POLL_INTERVAL", "0s"),
        ],
    )
    def test_invalid_values(self, tmp_path: Path, key: str, value: str) -> None:
        with patch.dict(os.environ, {key: value}):
            with pytest.raises(ConfigError):
                load_settings(tmp_path / "missing.env")

    def test_save_setting_keeps_other_keys(self, tmp_path: Path) -> None:
        env_path = tmp_path / "home" / ".env"
        save_setting("CHAIN_ID", "10", env_path)
        save_setting("WAIT_TIME", "45s", env_path)
        save_setting("CHAIN_ID", "8453", env_path)

        assert env_path.read_text(encoding="utf-8") == "CHAIN_ID=8453\nWAIT_TIME=45s\n"
        if os.name != "nt":
            assert env_path.stat().st_mode & 0o777 == 0o600


class TestSettingsDefaults:
    def test_dataclass_defaults(self) -> None:
        settings = Settings()
        assert settings.wait_time == 30.0
        assert settings.poll_interval == 2.0


class TestAddressRegistry:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        registry = AddressRegistry.load(tmp_path / "contracts.json")
        assert len(registry) == 0
        assert registry.get("Token") is None

    def test_set_checksums_and_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "contracts.json"
        registry = AddressRegistry.load(path)
        assert registry.set("Token", HOLDER.lower()) == HOLDER
        registry.set("Alpha_2", HOLDER)
        registry.save()

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert [entry["name"] for entry in payload] == ["Alpha_2", "Token"]
        reloaded = AddressRegistry.load(path)
        assert "Token" in reloaded
        assert reloaded.get("Token") == HOLDER
        assert reloaded.names() == ["Alpha_2", "Token"]

    @pytest.mark.parametrize("name", ["", "my-token", "a b"])
    def test_invalid_name(self, tmp_path: Path, name: str) -> None:
        registry = AddressRegistry.load(tmp_path / "contracts.json")
        with pytest.raises(ConfigError):
            registry.set(name, HOLDER)

    @pytest.mark.parametrize("address", [HOLDER[2:], "0x1234", "0x5aaeb6053F3E94C9b9A09f33669435E7Ef1BeAed"])
    def test_invalid_address(self, tmp_path: Path, address: str) -> None:
        registry = AddressRegistry.load(tmp_path / "contracts.json")
        with pytest.raises(InvalidAddress):
            registry.set("Token", address)

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "contracts.json"
        path.write_text(json.dumps([{"name": "Token", "address": "nope"}]), encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid contract registry"):
            AddressRegistry.load(path)

    def test_unparseable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "contracts.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError):
            AddressRegistry.load(path)
