"""Chain gateway: every call to the World Boss contracts goes through here."""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import ContractLogicError

from .abi import BOSS_CORE_ABI, FIGHT_RECORDS_ABI, USER_STATS_ABI, WORLD_BOSS_SYSTEM_ABI
from .config import LATEST_RECORDS_LIMIT, ContractAddresses, WalletTransport, rpc_url_for
from .error_handler import ErrorHandler, ErrorKind
from .errors import ContractReverted, NetworkError, QueryFailed, TransactionRejected, WalletUnavailable
from .models import AttackHistoryEntry, AttackRecord, BossSnapshot, SkillInfo, UserStats
from .normalizer import (
    attack_history_from_chain,
    attack_record_from_chain,
    boss_from_chain,
    skill_from_chain,
    user_stats_from_chain,
)
from .storage import SessionStore

logger = logging.getLogger(__name__)

# EIP-1193 "user rejected request"
USER_REJECTED_CODE = 4001


def _default_web3(rpc_url: str) -> AsyncWeb3:
    return AsyncWeb3(AsyncHTTPProvider(rpc_url))


def _is_user_rejection(error: Exception) -> bool:
    """Whether a send failed because the signer declined it."""
    payload = error.args[0] if error.args else None
    if isinstance(payload, dict) and payload.get("code") == USER_REJECTED_CODE:
        return True
    message = str(error).lower()
    return "user rejected" in message or "user denied" in message


class ChainGateway:
    """Owns the chain connection, the signer and the contract bindings."""

    def __init__(
        self,
        addresses: ContractAddresses,
        transport: Optional[WalletTransport],
        session: Optional[SessionStore] = None,
        web3_factory: Optional[Callable[[str], Any]] = None,
        error_handler: Optional[ErrorHandler] = None,
        networks: Optional[Dict[str, ContractAddresses]] = None,
    ):
        self.addresses = addresses
        self.transport = transport
        self.session = session
        self.web3_factory = web3_factory or _default_web3
        self.error_handler = error_handler or ErrorHandler()
        # Contract addresses for networks the session may switch to
        self.networks = dict(networks or {})
        self.networks.setdefault(addresses.network, addresses)

        self.w3 = None
        self.contracts: Dict[str, Any] = {}
        self.account: Optional[str] = None
        self.network: Optional[str] = None
        self.connected_transport: Optional[WalletTransport] = None
        self._ready_lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        """Connected, and still on the network the session expects."""
        if self.w3 is None:
            return False
        if self.session is not None:
            wanted = self.session.get_current_network()
            if wanted and wanted != self.network:
                return False
        return True

    async def ensure_ready(self):
        """Connect if needed. Concurrent callers share a single connection attempt."""
        if self.is_ready:
            return
        async with self._ready_lock:
            if self.is_ready:
                return
            await self._connect()

    def _transport_for(self, network: str) -> WalletTransport:
        """Same signer, pointed at the RPC endpoint of ``network``."""
        if network == self.addresses.network:
            return self.transport
        return replace(self.transport, rpc_url=rpc_url_for(network))

    async def _connect(self):
        if self.transport is None or not self.transport.rpc_url:
            raise WalletUnavailable("No wallet transport configured. Install a wallet or set WORLD_BOSS_RPC_URL.")

        wanted = self.session.get_current_network() if self.session is not None else ""
        network = wanted or self.addresses.network
        addresses = self.networks.get(network)
        if addresses is None:
            raise WalletUnavailable(f"No contract addresses configured for network {network!r}")

        transport = self._transport_for(network)
        w3 = self.web3_factory(transport.rpc_url)
        if not await w3.is_connected():
            raise WalletUnavailable(f"Cannot reach wallet transport at {transport.rpc_url}")

        contracts = self._bind_contracts(w3, addresses)
        if self.w3 is not None:
            await self.w3.provider.disconnect()

        self.w3 = w3
        self.contracts = contracts
        self.connected_transport = transport
        self.account = None
        self.network = network
        logger.info(f"Connected to {self.network or 'chain'} via {transport.rpc_url}")

    def _bind_contracts(self, w3, addresses: ContractAddresses) -> Dict[str, Any]:
        """Create contract instances for all four contracts."""
        bindings = {
            "world_boss_system": (addresses.world_boss_system, WORLD_BOSS_SYSTEM_ABI),
            "boss_core": (addresses.boss_core, BOSS_CORE_ABI),
            "fight_records": (addresses.fight_records, FIGHT_RECORDS_ABI),
            "user_stats": (addresses.user_stats, USER_STATS_ABI),
        }
        return {
            name: w3.eth.contract(address=AsyncWeb3.to_checksum_address(address), abi=abi)
            for name, (address, abi) in bindings.items()
        }

    async def close(self):
        """Drop the connection; the next call reconnects."""
        if self.w3 is not None:
            await self.w3.provider.disconnect()
        self.w3 = None
        self.contracts = {}
        self.account = None
        self.network = None
        self.connected_transport = None

    async def get_current_account(self) -> str:
        """Address of the account that signs attacks."""
        await self.ensure_ready()
        if self.account:
            return self.account

        if self.transport.private_key:
            self.account = Account.from_key(self.transport.private_key).address
        elif self.transport.account:
            self.account = AsyncWeb3.to_checksum_address(self.transport.account)
        else:
            try:
                accounts = await self.w3.eth.accounts
            except Exception as e:
                raise NetworkError(f"Could not list wallet accounts: {e}") from e
            if not accounts:
                raise WalletUnavailable("The connected wallet exposes no accounts")
            self.account = accounts[0]
        return self.account

    async def connect_wallet(self) -> str:
        """Connect and record the wallet address and network in the session."""
        address = await self.get_current_account()
        if self.session is not None:
            await self.session.set_current_address(address)
            await self.session.set_current_network(self.network)
        logger.info(f"Wallet {address} connected on {self.network}")
        return address

    async def attack(self, boss_id: int):
        """Attack a boss and wait until the transaction is mined."""
        account = await self.get_current_account()
        call = self.contracts["world_boss_system"].functions.attackBoss(int(boss_id))

        try:
            if self.transport.private_key:
                tx_hash = await self._send_signed(call, account)
            else:
                tx_hash = await call.transact({"from": account})
            receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except ContractLogicError as e:
            kind = self.error_handler.handle(e, "attackBoss")
            raise ContractReverted(kind, e.message or str(e)) from e
        except Exception as e:
            self.error_handler.handle(e, "attackBoss")
            if _is_user_rejection(e):
                raise TransactionRejected(str(e)) from e
            raise NetworkError(str(e)) from e

        if receipt.get("status") == 0:
            message = f"Attack on boss {boss_id} reverted in transaction {receipt.get('transactionHash')}"
            kind = self.error_handler.handle(ContractReverted(ErrorKind.UNCLASSIFIED, message), "attackBoss")
            raise ContractReverted(kind, message)

        logger.info(f"{account} attacked boss {boss_id}")
        return receipt

    async def _send_signed(self, call, account: str):
        tx = await call.build_transaction({
            "from": account,
            "nonce": await self.w3.eth.get_transaction_count(account),
        })
        signed = Account.sign_transaction(tx, self.transport.private_key)
        return await self.w3.eth.send_raw_transaction(signed.raw_transaction)

    async def _query(self, contract: str, function: str, *args):
        """Run a read-only call, wrapping any failure in QueryFailed."""
        await self.ensure_ready()
        try:
            return await getattr(self.contracts[contract].functions, function)(*args).call()
        except Exception as e:
            self.error_handler.handle(e, function)
            raise QueryFailed(function, e) from e

    async def get_active_boss_status(self) -> BossSnapshot:
        """Get the boss the fight system currently targets."""
        raw = await self._query("world_boss_system", "getActiveBossStatus")
        return boss_from_chain(raw)

    async def get_boss_hp_percentage(self) -> int:
        """Get the active boss's remaining HP as a whole percentage."""
        return int(await self._query("world_boss_system", "getBossHpPercentage"))

    async def get_user_stats(self, address: str) -> UserStats:
        """Get a user's stats against the active boss."""
        raw = await self._query("world_boss_system", "getUserStats", AsyncWeb3.to_checksum_address(address))
        return user_stats_from_chain(raw)

    async def get_latest_attack_records(self, boss_id: int, limit: int = LATEST_RECORDS_LIMIT) -> List[AttackRecord]:
        """Get the most recent fight log entries for a boss."""
        raw = await self._query("fight_records", "getLatestAttackRecords", int(boss_id), int(limit))
        return [attack_record_from_chain(record) for record in raw]

    async def get_boss_attack_history(self, boss_id: int) -> List[AttackHistoryEntry]:
        """Get every recorded attack on a boss."""
        raw = await self._query("fight_records", "getBossAttackRecords", int(boss_id))
        return attack_history_from_chain(raw)

    async def get_boss_info(self, boss_id: int) -> BossSnapshot:
        """Get a boss by id."""
        raw = await self._query("boss_core", "getBossInfo", int(boss_id))
        return boss_from_chain(raw)

    async def get_active_bosses(self) -> List[BossSnapshot]:
        """Get all currently active bosses."""
        boss_ids = await self._query("boss_core", "getActiveBosses")
        return list(await asyncio.gather(*(self.get_boss_info(boss_id) for boss_id in boss_ids)))

    async def get_boss_skill(self, boss_id: int, skill_index: int) -> SkillInfo:
        """Get one skill slot of a boss."""
        raw = await self._query("boss_core", "getBossSkill", int(boss_id), int(skill_index))
        return skill_from_chain(raw)

    async def get_all_participants(self, boss_id: int) -> List[str]:
        """Get every address that has attacked a boss, in contract order."""
        return list(await self._query("user_stats", "getAllParticipants", int(boss_id)))

    async def get_participant_count(self, boss_id: int) -> int:
        """Get how many addresses have attacked a boss."""
        return int(await self._query("user_stats", "getParticipantCount", int(boss_id)))

    async def get_boss_user_stats(self, boss_id: int, address: str) -> UserStats:
        """Get a user's stats against a specific boss."""
        raw = await self._query("user_stats", "getUserStats", int(boss_id), AsyncWeb3.to_checksum_address(address))
        return user_stats_from_chain(raw)

    async def get_participant_damage(self, boss_id: int, address: str) -> int:
        """Total damage a participant dealt to a boss, as an exact integer."""
        raw = await self._query("user_stats", "getUserStats", int(boss_id), AsyncWeb3.to_checksum_address(address))
        return int(raw[1])
