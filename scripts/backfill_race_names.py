#!/usr/bin/env python3
"""Match stored long runs to races from the public race calendar.

Launches a headless Chrome for the duration of the run.

Usage:
    python scripts/backfill_race_names.py
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
from paceflow.features.races.matcher import RaceMatcher
from paceflow.logging_config import setup_logging


async def run(min_distance: float | None) -> dict:
    await init_db()
    async with session_scope() as db:
        async with RaceMatcher(min_distance=min_distance) as matcher:
            return await ActivityProcessor(db).backfill_race_names(matcher)


def main() -> None:
    parser = argparse.ArgumentParser(description="Backfill race names for long activities")
    parser.add_argument(
        "--min-distance",
        type=float,
        default=None,
        help="Minimum distance in meters (default: RACE_MATCH_MIN_DISTANCE_M setting)",
    )
    args = parser.parse_args()

    setup_logging()
    result = asyncio.run(run(args.min_distance))
    print(f"Processed {result['processed']} activities, matched {result['matched']} races")


if __name__ == "__main__":
    main()
