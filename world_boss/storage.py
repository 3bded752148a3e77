"""Persisted wallet session state."""

import aiosqlite
from typing import Dict
from .config import SESSION_DB_PATH

ADDRESS_KEY = "wallet_address"
NETWORK_KEY = "current_network"


class SessionStore:
    """Wallet address and network for one client session.

    Values live in memory for fast reads and are written through to a
    key/value table so a restarted client picks up where it left off.
    """

    def __init__(self, db_path: str = SESSION_DB_PATH):
        self.db_path = db_path
        self._address = ""
        self._network = ""

    async def initialize(self):
        """Create the session table and load persisted values."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS session (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            await db.commit()

            async with db.execute("SELECT key, value FROM session") as cursor:
                rows = await cursor.fetchall()

        values: Dict[str, str] = {key: value for key, value in rows}
        self._address = values.get(ADDRESS_KEY, "")
        self._network = values.get(NETWORK_KEY, "")

    async def _put(self, key: str, value: str):
        async with aiosqlite.connect(self.db_path) as db:
            if value:
                await db.execute(
                    "INSERT OR REPLACE INTO session (key, value) VALUES (?, ?)",
                    (key, value)
                )
            else:
                await db.execute("DELETE FROM session WHERE key = ?", (key,))
            await db.commit()

    def get_current_address(self) -> str:
        return self._address

    async def set_current_address(self, address: str):
        """Set the wallet address. An empty address means disconnected."""
        self._address = address or ""
        await self._put(ADDRESS_KEY, self._address)

    @property
    def is_wallet_connected(self) -> bool:
        return bool(self._address)

    def get_current_network(self) -> str:
        return self._network

    async def set_current_network(self, network: str):
        """Set the current network name."""
        self._network = network or ""
        await self._put(NETWORK_KEY, self._network)

    async def disconnect(self):
        """Forget the wallet and network, in memory and on disk."""
        self._address = ""
        self._network = ""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute("DELETE FROM session WHERE key IN (?, ?)", (ADDRESS_KEY, NETWORK_KEY))
            await db.commit()
