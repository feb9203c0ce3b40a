"""
Demo Data Seeder — fills a FlowState store with a week of synthetic focus
sessions (and a few activity sessions and breaks) so the stats endpoints
have something to show.

Usage:
    python scripts/seed_demo.py                    # default store under data/
    python scripts/seed_demo.py --days 30          # a month instead of a week
    python scripts/seed_demo.py --db /tmp/demo.db  # a specific SQLite file
    python scripts/seed_demo.py --force            # seed even if sessions exist
"""

from __future__ import annotations

import argparse
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator

sys.path.insert(0, str(Path(__file__).parent.parent))

from flowstate.config import config
from flowstate.storage.log_store import (
    ACTIVITY_SESSIONS,
    BREAK_HISTORY,
    FOCUS_SESSIONS,
    SQLiteLogStore,
)
from flowstate.storage.records import (
    ActivitySessionRecord,
    BreakRecord,
    FocusSessionRecord,
)

BREAK_TYPES = ["Eye Rest", "Stretch Break", "Breathing Exercise", "Hydration Break"]


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def focus_sessions(days: int, rng: random.Random) -> Iterator[FocusSessionRecord]:
    """2–9 sessions a day, 25 minutes each, roughly 80% completed."""
    now = datetime.now().astimezone()
    for offset in range(days - 1, -1, -1):
        day = now - timedelta(days=offset)
        for _ in range(rng.randint(2, 9)):
            started = day.replace(
                hour=rng.randint(7, 22), minute=rng.randint(0, 59), second=0, microsecond=0
            )
            yield FocusSessionRecord(date=started, duration=25, completed=rng.random() > 0.2)


def activity_sessions(count: int, rng: random.Random) -> Iterator[ActivitySessionRecord]:
    now = datetime.now().timestamp()
    for i in range(count):
        start = now - (i + 1) * 86_400 + rng.randint(0, 3600)
        yield ActivitySessionRecord(
            start_time=start,
            end_time=start + rng.randint(10, 50) * 60,
            final_focus_score=rng.randint(55, 100),
            total_distractions=rng.randint(0, 6),
        )


def breaks(count: int, rng: random.Random) -> Iterator[BreakRecord]:
    now = datetime.now().timestamp()
    for i in range(count):
        yield BreakRecord(timestamp=now - i * 5400, type=rng.choice(BREAK_TYPES))


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Seed FlowState with demo data")
    parser.add_argument("--db", type=Path, default=config.data_dir / config.store_db)
    parser.add_argument("--days", type=int, default=7, help="Days of focus history (default 7)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    parser.add_argument("--force", action="store_true", help="Seed even if sessions already exist")
    args = parser.parse_args()

    store = SQLiteLogStore(args.db)
    if store.get(FOCUS_SESSIONS) and not args.force:
        print(f"[!] {args.db} already has focus sessions; use --force to add demo data anyway")
        return

    rng = random.Random(args.seed)
    focus = [r.to_dict() for r in focus_sessions(args.days, rng)]
    store.put(FOCUS_SESSIONS, store.get(FOCUS_SESSIONS) + focus)
    for record in activity_sessions(min(args.days, 12), rng):
        store.append(ACTIVITY_SESSIONS, record.to_dict())
    for record in breaks(5, rng):
        store.append(BREAK_HISTORY, record.to_dict())

    completed = sum(1 for r in focus if r["completed"])
    print(f"[✓] Seeded {len(focus)} focus sessions ({completed} completed) over {args.days} days")
    print(f"    Store: {args.db}")


if __name__ == "__main__":
    main()
