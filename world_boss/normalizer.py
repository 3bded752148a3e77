"""Conversion of raw contract return values into display-ready models.

web3 hands back multi-value returns as positional tuples of Python ints,
strings, bools and addresses. Everything here is pure: integers become
decimal strings (never floats, on-chain values overflow a double), block
timestamps become aware datetimes, and text passes through unchanged.
"""

from typing import List, Sequence

from .models import AttackHistoryEntry, AttackRecord, BossSnapshot, SkillInfo, UserStats
from .timeutils import from_chain_time

RARITY_EPIC = "Epic"
RARITY_RARE = "Rare"
RARITY_COMMON = "Common"

# Checked in order; first match wins
THEME_KEYWORDS = (
    ("fire", ("烈焰", "火", "flame", "fire")),
    ("ice", ("冰霜", "冰", "frost")),
    ("shadow", ("暗影", "暗", "shadow")),
)
DEFAULT_THEME = "fire"


def to_decimal_string(value) -> str:
    """Render an on-chain integer as a decimal string."""
    return str(int(value))


def chain_time_to_datetime(seconds):
    """Convert a block timestamp to a wall-clock datetime."""
    return from_chain_time(int(seconds))


def reward_rarity(level: int) -> str:
    """Reward tier shown for a boss level."""
    if level >= 3:
        return RARITY_EPIC
    if level >= 2:
        return RARITY_RARE
    return RARITY_COMMON


def theme_for_name(name: str) -> str:
    """Guess a colour theme from a boss name.

    Best-effort display heuristic: the contract stores no theme, so this
    only looks for element keywords in the name.
    """
    lowered = (name or "").lower()
    for theme, keywords in THEME_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return theme
    return DEFAULT_THEME


def boss_from_chain(raw: Sequence) -> BossSnapshot:
    """Build a BossSnapshot from a getBossInfo / getActiveBossStatus tuple."""
    (boss_id, name, description, max_hp, current_hp, level, image_url,
     gold_url, silver_url, bronze_url, attack_count, is_active, is_defeated,
     skill_name) = raw
    level = int(level)
    return BossSnapshot(
        id=int(boss_id),
        name=name,
        description=description,
        max_hp=to_decimal_string(max_hp),
        current_hp=to_decimal_string(current_hp),
        level=level,
        image_url=image_url,
        gold_nft_url=gold_url,
        silver_nft_url=silver_url,
        bronze_nft_url=bronze_url,
        attack_count=to_decimal_string(attack_count),
        is_active=is_active,
        is_defeated=is_defeated,
        skill_name=skill_name or "",
        rarity=reward_rarity(level),
        theme=theme_for_name(name),
    )


def skill_from_chain(raw: Sequence) -> SkillInfo:
    """Build a SkillInfo from a getBossSkill tuple."""
    name, duration, trigger_interval, trigger_attack_count, is_active, activated_time = raw
    return SkillInfo(
        name=name,
        duration=int(duration),
        trigger_interval=int(trigger_interval),
        trigger_attack_count=int(trigger_attack_count),
        is_active=is_active,
        activated_time=chain_time_to_datetime(activated_time),
    )


def user_stats_from_chain(raw: Sequence) -> UserStats:
    """Build UserStats from an (attackCount, totalDamage, rank) tuple."""
    attack_count, total_damage, rank = raw
    return UserStats(
        attack_count=to_decimal_string(attack_count),
        total_damage=to_decimal_string(total_damage),
        rank=int(rank),
    )


def attack_record_from_chain(raw: Sequence) -> AttackRecord:
    """Build an AttackRecord from one element of getLatestAttackRecords."""
    attacker, timestamp, damage, boss_hp_after, record_type, skill_name = raw
    return AttackRecord(
        attacker=attacker,
        timestamp=chain_time_to_datetime(timestamp),
        damage=to_decimal_string(damage),
        boss_hp_after=to_decimal_string(boss_hp_after),
        record_type=int(record_type),
        skill_name=skill_name or "",
    )


def attack_history_from_chain(raw: Sequence) -> List[AttackHistoryEntry]:
    """Zip the parallel arrays returned by getBossAttackRecords."""
    attackers, damages, timestamps = raw
    return [
        AttackHistoryEntry(
            attacker=attacker,
            damage=to_decimal_string(damage),
            timestamp=chain_time_to_datetime(timestamp),
        )
        for attacker, damage, timestamp in zip(attackers, damages, timestamps)
    ]


def format_wallet_address(address: str) -> str:
    """Shorten an address for display, e.g. 0x1234...abcd."""
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"
