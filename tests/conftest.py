"""In-memory stand-ins for the web3 objects the gateway talks to."""

import pytest

from world_boss.config import ContractAddresses, WalletTransport
from world_boss.gateway import ChainGateway

# Digit-only addresses are already in checksum form
WORLD_BOSS_SYSTEM = "0x" + "10" * 20
BOSS_CORE = "0x" + "20" * 20
FIGHT_RECORDS = "0x" + "30" * 20
USER_STATS = "0x" + "40" * 20

PLAYER_A = "0x" + "1" * 40
PLAYER_B = "0x" + "2" * 40
PLAYER_C = "0x" + "3" * 40
PLAYER_D = "0x" + "4" * 40

TX_HASH = b"\x01" * 32


class FakeCall:
    def __init__(self, contract, name, args):
        self.contract = contract
        self.name = name
        self.args = args

    def _respond(self, default=None):
        response = self.contract.responses.get(self.name, default)
        if callable(response):
            response = response(*self.args)
        if isinstance(response, Exception):
            raise response
        return response

    async def call(self):
        self.contract.calls.append((self.name, self.args))
        return self._respond()

    async def transact(self, tx=None):
        self.contract.calls.append((self.name, self.args))
        self.contract.sent.append(tx)
        return self._respond(TX_HASH)


class FakeFunctions:
    def __init__(self, contract):
        self._contract = contract

    def __getattr__(self, name):
        return lambda *args: FakeCall(self._contract, name, args)


class FakeContract:
    def __init__(self, address):
        self.address = address
        self.responses = {}
        self.calls = []
        self.sent = []
        self.functions = FakeFunctions(self)

    def call_names(self):
        return [name for name, _ in self.calls]


class FakeEth:
    def __init__(self, chain):
        self.chain = chain

    def contract(self, address, abi):
        # Unknown addresses get a fresh contract so tests can see what was bound
        return self.chain.by_address.setdefault(address.lower(), FakeContract(address))

    @property
    def accounts(self):
        async def fetch():
            return list(self.chain.accounts)
        return fetch()

    async def wait_for_transaction_receipt(self, tx_hash):
        if isinstance(self.chain.receipt, Exception):
            raise self.chain.receipt
        return self.chain.receipt


class FakeProvider:
    def __init__(self, chain):
        self.chain = chain

    async def disconnect(self):
        self.chain.disconnects += 1


class FakeWeb3:
    def __init__(self, chain):
        self.chain = chain
        self.eth = FakeEth(chain)
        self.provider = FakeProvider(chain)

    async def is_connected(self):
        return self.chain.reachable


class FakeChain:
    """Four fake contracts plus the connection bookkeeping tests assert on."""

    def __init__(self):
        self.world_boss_system = FakeContract(WORLD_BOSS_SYSTEM)
        self.boss_core = FakeContract(BOSS_CORE)
        self.fight_records = FakeContract(FIGHT_RECORDS)
        self.user_stats = FakeContract(USER_STATS)
        self.by_address = {
            c.address.lower(): c
            for c in (self.world_boss_system, self.boss_core, self.fight_records, self.user_stats)
        }
        self.accounts = [PLAYER_A]
        self.receipt = {"status": 1, "transactionHash": TX_HASH}
        self.reachable = True
        self.connections = []
        self.disconnects = 0

    def factory(self, rpc_url):
        self.connections.append(rpc_url)
        return FakeWeb3(self)

    def set_damage(self, damage_by_address):
        """Serve UserStats.getAllParticipants and getUserStats from a dict."""
        self.user_stats.responses["getAllParticipants"] = list(damage_by_address)
        self.user_stats.responses["getUserStats"] = (
            lambda boss_id, address: (1, damage_by_address[address], 0)
        )


def boss_tuple(boss_id=1, name="Flame Dragon", level=3, max_hp=10**30, current_hp=10**29,
               attack_count=42, is_active=True, is_defeated=False, skill=""):
    return (
        boss_id, name, "A world boss", max_hp, current_hp, level,
        "https://img/boss.png", "https://img/gold.png", "https://img/silver.png",
        "https://img/bronze.png", attack_count, is_active, is_defeated, skill,
    )


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def addresses():
    return ContractAddresses(
        network="Local Dev",
        boss_core=BOSS_CORE,
        fight_records=FIGHT_RECORDS,
        user_stats=USER_STATS,
        world_boss_system=WORLD_BOSS_SYSTEM,
    )


@pytest.fixture
def transport():
    return WalletTransport(rpc_url="http://localhost:8545")


@pytest.fixture
def gateway(chain, addresses, transport):
    return ChainGateway(addresses, transport, web3_factory=chain.factory)
