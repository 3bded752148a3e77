"""Command-line utility printing the top damage dealers for a boss."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from world_boss.config import LEADERBOARD_SIZE, WalletTransport, load_contract_addresses, rpc_url_for
from world_boss.errors import ConfigurationMissing, WorldBossError
from world_boss.gateway import ChainGateway
from world_boss.models import Leaderboard
from world_boss.ranking import RankingAggregator

logger = logging.getLogger(__name__)

USAGE = "Usage: world-boss-top <bossId>"

MEDALS = {1: "🥇", 2: "🥈", 3: "🥉"}


def ordinal(n: int) -> str:
    """1 -> 1st, 2 -> 2nd, 11 -> 11th, 22 -> 22nd."""
    if 11 <= n % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def setup_logging():
    """Log to stderr so stdout stays a clean report."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler()]
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Show the top damage dealers for a World Boss.")
    parser.add_argument("boss_id", nargs="?", help="Boss ID to rank")
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding the contract address files")
    parser.add_argument("--top", type=int, default=LEADERBOARD_SIZE,
                        help="Number of places to show")
    return parser.parse_args(argv)


def print_leaderboard(leaderboard: Leaderboard):
    """Print ranked entries and the summary block."""
    print(f"🏆 Top {len(leaderboard.entries)} Damage Dealers:\n")

    for rank, entry in enumerate(leaderboard.entries, start=1):
        emoji = MEDALS.get(rank, "🏅")
        print(f"{emoji} {ordinal(rank)} Place:")
        print(f"   Address: {entry.address}")
        print(f"   Damage: {entry.total_damage}")
        print("")

    print("📋 Summary:")
    print(f"   Boss ID: {leaderboard.boss_id}")
    print(f"   Total Participants: {leaderboard.participant_count}")
    print(f"   Top {len(leaderboard.entries)} Rankings Generated: {len(leaderboard.entries)}")
    print("\n=== Ranking Complete ===")


async def run(boss_id: int, config_dir=None, top: int = LEADERBOARD_SIZE, web3_factory=None) -> int:
    """Query and print the leaderboard. Returns the process exit code."""
    print(f"=== Boss Damage Ranking - Top {top} ===\n")

    try:
        addresses = load_contract_addresses(config_dir)
    except ConfigurationMissing as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    print(f"📋 Querying top {top} for Boss ID: {boss_id}\n")

    # Read-only: no signer needed
    transport = WalletTransport(rpc_url=rpc_url_for(addresses.network))
    gateway = ChainGateway(addresses, transport, web3_factory=web3_factory)
    aggregator = RankingAggregator(gateway)

    try:
        leaderboard = await aggregator.build_leaderboard(boss_id, top)
    except WorldBossError as e:
        logger.error(f"Ranking failed for boss {boss_id}: {e}")
        print(f"❌ Error getting rankings: {e}", file=sys.stderr)
        return 1
    finally:
        await gateway.close()

    if leaderboard.participant_count == 0:
        print("ℹ️  No participants found.")
        return 0

    print_leaderboard(leaderboard)
    return 0


def main(argv=None, web3_factory=None) -> int:
    """Entry point for the ranking utility."""
    load_dotenv()
    setup_logging()
    args = parse_args(argv)

    if args.boss_id is None:
        print(f"❌ {USAGE}", file=sys.stderr)
        print("Example: world-boss-top 0", file=sys.stderr)
        return 1

    try:
        boss_id = int(args.boss_id)
    except ValueError:
        print(f"❌ Boss ID must be an integer, got {args.boss_id!r}", file=sys.stderr)
        return 1

    if args.top < 0:
        print(f"❌ --top must be non-negative, got {args.top}", file=sys.stderr)
        return 1

    return asyncio.run(run(boss_id, args.config_dir, args.top, web3_factory))


if __name__ == "__main__":
    sys.exit(main())
