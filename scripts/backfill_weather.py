#!/usr/bin/env python3
"""Fill in start weather for outdoor activities that have none.

Usage:
    python scripts/backfill_weather.py
    python scripts/backfill_weather.py --delay-ms 2000
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")

sys.path.insert(0, str(Path(__file__).parent.parent))

from paceflow.db.session import init_db, session_scope
from paceflow.features.activities.processor import ActivityProcessor
from paceflow.logging_config import setup_logging


async def run(delay_ms: int | None) -> dict:
    await init_db()
    async with session_scope() as db:
        return await ActivityProcessor(db).backfill_missing_weather(delay_ms=delay_ms)


def main() -> None:
    parser = argparse.ArgumentParser(description="Backfill weather for stored activities")
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Pause between weather API calls (default: WEATHER_BACKFILL_DELAY_MS)",
    )
    args = parser.parse_args()

    setup_logging()
    result = asyncio.run(run(args.delay_ms))

    print("=" * 40)
    print(f"Total:   {result['total']}")
    print(f"Success: {result['success']}")
    print(f"Failed:  {result['failed']}")
    print(f"Skipped: {result['skipped']}")


if __name__ == "__main__":
    main()
