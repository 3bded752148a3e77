"""Data models for the World Boss client."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import IntEnum
from typing import List, Optional


class RecordType(IntEnum):
    """Known attack record tags. The chain may emit others."""
    NORMAL = 0
    SKILL = 1


@dataclass
class BossSnapshot:
    """A boss as read from the chain. HP and attack count are decimal strings."""
    id: int
    name: str
    description: str
    max_hp: str
    current_hp: str
    level: int
    image_url: str
    gold_nft_url: str
    silver_nft_url: str
    bronze_nft_url: str
    attack_count: str
    is_active: bool
    is_defeated: bool
    skill_name: str = ""
    rarity: Optional[str] = None
    theme: Optional[str] = None


@dataclass
class SkillInfo:
    """A boss skill slot."""
    name: str
    duration: int
    trigger_interval: int
    trigger_attack_count: int
    is_active: bool
    activated_time: datetime

    @property
    def ends_at(self) -> datetime:
        return self.activated_time + timedelta(seconds=self.duration)


@dataclass
class UserStats:
    """A user's fight statistics."""
    attack_count: str
    total_damage: str
    rank: int


@dataclass
class AttackRecord:
    """One entry of a boss's fight log."""
    attacker: str
    timestamp: datetime
    damage: str
    boss_hp_after: str
    record_type: int
    skill_name: str = ""

    @property
    def is_skill_event(self) -> bool:
        return self.record_type != RecordType.NORMAL


@dataclass
class AttackHistoryEntry:
    """Attacker, damage and time from the full attack history of a boss."""
    attacker: str
    damage: str
    timestamp: datetime


@dataclass
class RankEntry:
    """A leaderboard row."""
    address: str
    total_damage: str


@dataclass
class Leaderboard:
    """Top damage dealers for a boss."""
    boss_id: int
    entries: List[RankEntry] = field(default_factory=list)
    participant_count: int = 0
