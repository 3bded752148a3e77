"""Damage leaderboards computed from per-participant stats."""

import asyncio
import logging
from typing import List, Tuple

from .config import LEADERBOARD_SIZE
from .gateway import ChainGateway
from .models import Leaderboard, RankEntry
from .normalizer import to_decimal_string

logger = logging.getLogger(__name__)


class RankingAggregator:
    """Builds top-K damage rankings for a boss.

    The contracts keep no sorted leaderboard, so every query reads the
    participant list and then each participant's total damage. Damage is
    compared as exact integers and stringified only for the result.
    """

    def __init__(self, gateway: ChainGateway, fetch_concurrency: int = 1):
        self.gateway = gateway
        self.fetch_concurrency = max(1, fetch_concurrency)

    async def _fetch_damage(self, boss_id: int, participants: List[str]) -> List[int]:
        if self.fetch_concurrency == 1:
            return [await self.gateway.get_participant_damage(boss_id, address) for address in participants]

        semaphore = asyncio.Semaphore(self.fetch_concurrency)

        async def fetch(address: str) -> int:
            async with semaphore:
                return await self.gateway.get_participant_damage(boss_id, address)

        tasks = [asyncio.ensure_future(fetch(address)) for address in participants]
        try:
            # gather keeps results in participant order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # One failure fails the ranking; stop the remaining calls
            for task in tasks:
                task.cancel()
            raise

    async def rank_participants(self, boss_id: int) -> List[Tuple[str, int]]:
        """All participants as (address, damage), highest damage first.

        Ties keep the contract's participant order.
        """
        participants = await self.gateway.get_all_participants(boss_id)
        if not participants:
            return []

        damages = await self._fetch_damage(boss_id, participants)
        return sorted(zip(participants, damages), key=lambda item: item[1], reverse=True)

    async def build_leaderboard(self, boss_id: int, k: int = LEADERBOARD_SIZE) -> Leaderboard:
        """Top ``k`` damage dealers plus the total participant count."""
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")

        ranked = await self.rank_participants(boss_id)
        entries = [
            RankEntry(address=address, total_damage=to_decimal_string(damage))
            for address, damage in ranked[:k]
        ]
        logger.info(f"Ranked {len(ranked)} participant(s) for boss {boss_id}")
        return Leaderboard(boss_id=int(boss_id), entries=entries, participant_count=len(ranked))

    async def top_damage_dealers(self, boss_id: int, k: int = LEADERBOARD_SIZE) -> List[RankEntry]:
        """Top ``k`` damage dealers for a boss, rank 1 first."""
        leaderboard = await self.build_leaderboard(boss_id, k)
        return leaderboard.entries
