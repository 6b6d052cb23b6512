"""
Back-fill internship_phase on applications written before the phase column.

    python backfill_phases.py --dry-run   # report only
    python backfill_phases.py             # write changes

Only rows whose internship_phase is NULL are touched.
"""

import argparse
import asyncio
from collections import Counter

from dotenv import load_dotenv

load_dotenv()

from portal.dependencies import get_db  # noqa: E402
from portal.domain.dates import utcnow  # noqa: E402
from portal.domain.lifecycle import backfill_phase  # noqa: E402
from portal.services.common import scan_all  # noqa: E402

_BATCH = 500


async def backfill(dry_run: bool) -> Counter:
    db = get_db()
    now = utcnow()

    # Collect first: updating while paging would shift the NULL-phase window
    pending = await scan_all(db.list_applications, {"internship_phase": None}, batch=_BATCH)
    print(f"Found {len(pending)} application(s) without a phase.")

    changed: Counter = Counter()
    for row in pending:
        phase = backfill_phase(row, now)
        changed[phase.value] += 1
        print(f"{row['id']}: -> {phase.value}")
        if not dry_run:
            await db.update_application(row["id"], {"internship_phase": phase.value})
    return changed


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Back-fill internship_phase on legacy rows.")
    parser.add_argument("--dry-run", action="store_true", help="print changes without writing")
    args = parser.parse_args()

    print("Back-filling internship phases" + (" (dry run)" if args.dry_run else "") + "...")
    summary = asyncio.run(backfill(args.dry_run))
    print(f"Done. {sum(summary.values())} application(s): {dict(summary)}")
