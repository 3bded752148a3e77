import json

import pytest

from world_boss.config import (
    LOCAL_ADDRESSES_FILE,
    LOCAL_RPC_URL,
    MONAD_ADDRESSES_FILE,
    load_contract_addresses,
    rpc_url_for,
    transport_from_env,
)
from world_boss.errors import ConfigurationMissing

from conftest import BOSS_CORE, FIGHT_RECORDS, USER_STATS, WORLD_BOSS_SYSTEM


def address_file(network):
    return {
        "network": network,
        "bossCore": BOSS_CORE,
        "fightRecords": FIGHT_RECORDS,
        "userStats": USER_STATS,
        "worldBossSystem": WORLD_BOSS_SYSTEM,
    }


def write(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")


def test_monad_file_wins_over_local(tmp_path):
    write(tmp_path / MONAD_ADDRESSES_FILE, address_file("Monad Testnet"))
    write(tmp_path / LOCAL_ADDRESSES_FILE, address_file("localhost"))

    addresses = load_contract_addresses(tmp_path)

    assert addresses.network == "Monad Testnet"
    assert addresses.boss_core == BOSS_CORE
    assert addresses.world_boss_system == WORLD_BOSS_SYSTEM
    assert addresses.nft_awards is None


def test_falls_back_to_local_file(tmp_path):
    write(tmp_path / LOCAL_ADDRESSES_FILE, address_file("localhost"))

    assert load_contract_addresses(tmp_path).network == "localhost"


def test_no_file_is_configuration_missing(tmp_path):
    with pytest.raises(ConfigurationMissing):
        load_contract_addresses(tmp_path)


def test_invalid_json_is_configuration_missing(tmp_path):
    write(tmp_path / LOCAL_ADDRESSES_FILE, "{not json")

    with pytest.raises(ConfigurationMissing):
        load_contract_addresses(tmp_path)


def test_missing_contract_is_configuration_missing(tmp_path):
    data = address_file("localhost")
    del data["userStats"]
    write(tmp_path / LOCAL_ADDRESSES_FILE, data)

    with pytest.raises(ConfigurationMissing, match="userStats"):
        load_contract_addresses(tmp_path)


def test_rpc_url_by_network_name(monkeypatch):
    monkeypatch.delenv("WORLD_BOSS_RPC_URL", raising=False)

    assert rpc_url_for("Monad Testnet") == "https://testnet-rpc.monad.xyz"
    assert rpc_url_for("localhost") == LOCAL_RPC_URL
    assert rpc_url_for("") == LOCAL_RPC_URL


def test_rpc_url_override(monkeypatch):
    monkeypatch.setenv("WORLD_BOSS_RPC_URL", "http://node:9545")

    assert rpc_url_for("Monad Testnet") == "http://node:9545"


def test_transport_from_env(monkeypatch):
    monkeypatch.delenv("WORLD_BOSS_RPC_URL", raising=False)
    monkeypatch.delenv("WORLD_BOSS_PRIVATE_KEY", raising=False)
    monkeypatch.setenv("WORLD_BOSS_ACCOUNT", WORLD_BOSS_SYSTEM)

    transport = transport_from_env("localhost")

    assert transport.rpc_url == LOCAL_RPC_URL
    assert transport.private_key is None
    assert transport.account == WORLD_BOSS_SYSTEM


def test_malformed_address_is_configuration_missing(tmp_path):
    data = address_file("localhost")
    data["bossCore"] = "not-an-address"
    write(tmp_path / LOCAL_ADDRESSES_FILE, data)

    with pytest.raises(ConfigurationMissing, match="bossCore"):
        load_contract_addresses(tmp_path)


def test_malformed_nft_address_is_configuration_missing(tmp_path):
    data = address_file("localhost")
    data["nftAwards"] = "0x1234"
    write(tmp_path / LOCAL_ADDRESSES_FILE, data)

    with pytest.raises(ConfigurationMissing, match="nftAwards"):
        load_contract_addresses(tmp_path)
