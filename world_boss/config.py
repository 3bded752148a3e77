"""Client configuration constants and settings."""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv
from web3 import Web3

from .errors import ConfigurationMissing

load_dotenv()

TIMEZONE = os.getenv("WORLD_BOSS_TIMEZONE", "UTC")

# Contract address files, searched in order
MONAD_ADDRESSES_FILE = "monad-contract-addresses.json"
LOCAL_ADDRESSES_FILE = "local-contract-addresses.json"
ADDRESS_FILES = (MONAD_ADDRESSES_FILE, LOCAL_ADDRESSES_FILE)

PRODUCTION_NETWORK = "Monad Testnet"
NETWORK_RPC_URLS = {
    PRODUCTION_NETWORK: "https://testnet-rpc.monad.xyz",
}
LOCAL_RPC_URL = "http://localhost:8545"

SESSION_DB_PATH = os.getenv("WORLD_BOSS_SESSION_DB", "world_boss_session.db")

LEADERBOARD_SIZE = 3
LATEST_RECORDS_LIMIT = 10


@dataclass
class ContractAddresses:
    """Deployed contract addresses for one network."""
    network: str
    boss_core: str
    fight_records: str
    user_stats: str
    world_boss_system: str
    nft_awards: Optional[str] = None


@dataclass
class WalletTransport:
    """How the client reaches the chain and who signs its transactions.

    ``private_key`` signs locally; ``account`` asks the node to sign, which
    is how an injected browser wallet behaves. With neither, the transport
    is read-only unless the node exposes accounts of its own.
    """
    rpc_url: str
    private_key: Optional[str] = None
    account: Optional[str] = None


_ADDRESS_KEYS = {
    "boss_core": "bossCore",
    "fight_records": "fightRecords",
    "user_stats": "userStats",
    "world_boss_system": "worldBossSystem",
}


def config_dir() -> Path:
    """Directory holding the contract address files."""
    return Path(os.getenv("WORLD_BOSS_CONFIG_DIR", "."))


def find_addresses_file(directory: Optional[Path] = None,
                        names: Iterable[str] = ADDRESS_FILES) -> Path:
    """Return the first contract address file that exists."""
    directory = Path(directory) if directory is not None else config_dir()
    for name in names:
        path = directory / name
        if path.exists():
            return path
    raise ConfigurationMissing(f"No contract addresses file found in {directory}")


def parse_contract_addresses(data: dict) -> ContractAddresses:
    """Build ContractAddresses from the JSON written by the deploy scripts."""
    missing = [key for key in _ADDRESS_KEYS.values() if not data.get(key)]
    if missing:
        raise ConfigurationMissing(f"Contract addresses file is missing: {', '.join(missing)}")

    invalid = [key for key in _ADDRESS_KEYS.values() if not Web3.is_address(data[key])]
    if data.get("nftAwards") and not Web3.is_address(data["nftAwards"]):
        invalid.append("nftAwards")
    if invalid:
        raise ConfigurationMissing(f"Contract addresses file has invalid addresses: {', '.join(invalid)}")

    return ContractAddresses(
        network=data.get("network", ""),
        nft_awards=data.get("nftAwards"),
        **{field: data[key] for field, key in _ADDRESS_KEYS.items()},
    )


def load_contract_addresses(directory: Optional[Path] = None) -> ContractAddresses:
    """Load the contract addresses for whichever network is configured."""
    path = find_addresses_file(directory)
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationMissing(f"Error loading contract addresses from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationMissing(f"Contract addresses file {path} must hold a JSON object")
    return parse_contract_addresses(data)


def rpc_url_for(network: str) -> str:
    """Pick the RPC endpoint for a named network."""
    override = os.getenv("WORLD_BOSS_RPC_URL")
    if override:
        return override
    return NETWORK_RPC_URLS.get(network, LOCAL_RPC_URL)


def transport_from_env(network: str) -> WalletTransport:
    """Build the wallet transport from the environment."""
    return WalletTransport(
        rpc_url=rpc_url_for(network),
        private_key=os.getenv("WORLD_BOSS_PRIVATE_KEY") or None,
        account=os.getenv("WORLD_BOSS_ACCOUNT") or None,
    )
