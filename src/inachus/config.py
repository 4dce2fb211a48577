"""
Settings for Inachus.

Settings come from the environment, after ``~/.inachus/.env`` (or an
explicit env file) has been loaded with python-dotenv.  Values already
set in the process environment win over the file.

Recognised keys:
  INACHUS_RPC_URL  - JSON-RPC endpoint (default http://localhost:8545)
  PRIVATE_KEY      - signing key; only needed for write calls
  CHAIN_ID         - transaction signing domain (default 1)
  WAIT_TIME        - confirmation budget, e.g. 30s, 1m30s (default 30s)
  POLL_INTERVAL    - receipt polling cadence (default 2s)
  ABI_DIR          - directory of *.abi / *.json files (default ./abis)
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .utils import parse_duration

INACHUS_DIR = Path.home() / ".inachus"
INACHUS_ENV = INACHUS_DIR / ".env"
CONTRACTS_FILE = INACHUS_DIR / "contracts.json"

DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_CHAIN_ID = 1
DEFAULT_WAIT_TIME = "30s"
DEFAULT_POLL_INTERVAL = "2s"
DEFAULT_ABI_DIR = "./abis"

_PRIVATE_KEY = re.compile(r"(0x)?[0-9a-fA-F]{64}")


def validate_rpc_url(url: str) -> str:
    if not url.startswith(("http://", "https://")):
        raise ConfigError(f"Invalid RPC URL: {url} (must start with http:// or https://)")
    return url


def validate_chain_id(value: str) -> int:
    try:
        chain_id = int(value, 10)
    except ValueError:
        raise ConfigError(f"Invalid chain ID: {value}") from None
    if chain_id < 0:
        raise ConfigError(f"Invalid chain ID: {value}")
    return chain_id


def validate_private_key(private_key: str) -> str:
    if not _PRIVATE_KEY.fullmatch(private_key):
        raise ConfigError("Invalid private key: must be 32 bytes (64 hex characters)")
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key
    return private_key


def validate_duration(name: str, value: str) -> float:
    try:
        return parse_duration(value)
    except ValueError:
        raise ConfigError(f"Invalid {name}: {value} (examples: 30s, 1m30s, 500ms)") from None


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    private_key: Optional[str] = None
    chain_id: int = DEFAULT_CHAIN_ID
    wait_time: float = 30.0
    poll_interval: float = 2.0
    abi_dir: Path = Path(DEFAULT_ABI_DIR)
    contracts_file: Path = CONTRACTS_FILE

    def __repr__(self) -> str:
        key = "<set>" if self.private_key else None
        return (
            f"Settings(rpc_url={self.rpc_url!r}, private_key={key!r}, chain_id={self.chain_id}, "
            f"wait_time={self.wait_time}, poll_interval={self.poll_interval}, abi_dir={str(self.abi_dir)!r})"
        )


def load_settings(env_path: Optional[Path] = None) -> Settings:
    """
    Load and validate settings.

    Args:
        env_path: .env file to load first (default: ~/.inachus/.env)

    Returns:
        Validated Settings

    Raises:
        ConfigError: If any value is malformed
    """
    env_path = env_path or INACHUS_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)

    private_key = os.environ.get("PRIVATE_KEY") or None
    poll_interval = validate_duration(
        "poll interval", os.environ.get("POLL_INTERVAL", DEFAULT_POLL_INTERVAL)
    )
    if poll_interval <= 0:
        raise ConfigError("Invalid poll interval: must be positive")

    return Settings(
        rpc_url=validate_rpc_url(os.environ.get("INACHUS_RPC_URL", DEFAULT_RPC_URL)),
        private_key=validate_private_key(private_key) if private_key else None,
        chain_id=validate_chain_id(os.environ.get("CHAIN_ID", str(DEFAULT_CHAIN_ID))),
        wait_time=validate_duration("wait time", os.environ.get("WAIT_TIME", DEFAULT_WAIT_TIME)),
        poll_interval=poll_interval,
        abi_dir=Path(os.environ.get("ABI_DIR", DEFAULT_ABI_DIR)).expanduser(),
        contracts_file=Path(os.environ.get("INACHUS_CONTRACTS", str(CONTRACTS_FILE))).expanduser(),
    )


def save_setting(key: str, value: str, env_path: Optional[Path] = None) -> Path:
    """
    Save one setting to the .env file, keeping the others.

    Returns:
        Path to the saved .env file
    """
    env_path = env_path or INACHUS_ENV
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing = {}
    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                k, v = line.split("=", 1)
                existing[k.strip()] = v.strip()

    existing[key] = value

    lines = [f"{k}={v}" for k, v in existing.items()]
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    # Set secure permissions on Unix
    if os.name != "nt":
        env_path.chmod(0o600)

    return env_path
