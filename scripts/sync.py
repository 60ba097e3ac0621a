#!/usr/bin/env python3
"""Sync running activities from a source platform into the local database.

Usage:
    # Auto-detect source (Strava preferred), incremental from the latest stored run
    python scripts/sync.py

    # Explicit source, full re-scan limited to 50 activities
    python scripts/sync.py --source strava --full --limit 50

    # A date window
    python scripts/sync.py --source strava --start 2024-01-01 --end 2024-06-30
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")

sys.path.insert(0, str(Path(__file__).parent.parent))

from paceflow.config import settings
from paceflow.db.session import init_db, session_scope
from paceflow.features.activities.repository import ActivityRepository
from paceflow.features.sync.service import SyncOptions, SyncService
from paceflow.logging_config import setup_logging
from paceflow.shared.constants import SourceKind

logger = logging.getLogger("paceflow.scripts.sync")


def detect_source() -> SourceKind | None:
    """Pick a configured source; Strava wins when both are set."""
    if settings.strava_refresh_token or settings.strava_access_token:
        return SourceKind.STRAVA
    if settings.nike_access_token:
        return SourceKind.NIKE
    return None


def parse_date(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d").replace(tzinfo=timezone.utc)


async def run(args: argparse.Namespace) -> int:
    await init_db()

    source = SourceKind(args.source) if args.source else detect_source()
    if source is None:
        logger.error("No source configured: set STRAVA_REFRESH_TOKEN or NIKE_ACCESS_TOKEN")
        return 1

    async with session_scope() as db:
        after = None
        if not args.full and not args.start:
            latest = await ActivityRepository(db).get_latest_start_time()
            if latest:
                after = int(latest.replace(tzinfo=timezone.utc).timestamp())
                logger.info(f"Incremental sync after {latest.isoformat()}")

        options = SyncOptions(
            source=source,
            start_date=parse_date(args.start) if args.start else None,
            end_date=parse_date(args.end) if args.end else None,
            limit=args.limit,
            after=after,
        )
        result = await SyncService(db).perform_sync(options)

    if not result.success:
        print(f"Sync failed: {result.error_message}")
        return 1

    print(f"Synced {result.activities_count} activities from {source.value} (log {result.log_id})")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Sync activities from Strava or Nike Run Club")
    parser.add_argument("--source", choices=[s.value for s in SourceKind], help="Source platform")
    parser.add_argument("--limit", type=int, default=None, help="Maximum running activities to fetch")
    parser.add_argument("--start", help="Earliest start date (YYYY-MM-DD)")
    parser.add_argument("--end", help="Latest start date (YYYY-MM-DD)")
    parser.add_argument(
        "--full",
        action="store_true",
        help="Ignore stored activities and scan from the beginning",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    args = parser.parse_args()

    setup_logging(args.log_level)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
