"""Preview or apply the team-assignment fix on a program store.

Every participant belongs to the team that owns their chest number. This
script lists participants filed under the wrong team, and those whose chest
number no team owns, and with --apply rewrites the affected programs.

Usage:
    python scripts/fix_team_assignments.py data/programs.json
    python scripts/fix_team_assignments.py data/programs.json --apply
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

# Import stores to register them
from festival.store import jsonfile  # noqa: F401
from festival.store import memory  # noqa: F401

from festival.config import load_config
from festival.service import FestivalService
from festival.session import Session
from festival.store import open_store


async def run(location: str, apply: bool) -> int:
    service = FestivalService(open_store(location), Session.admin("maintenance"), load_config())

    report = await service.preview_team_fix()
    print(f"Checked {report.total_programs} programs, "
          f"{report.affected_programs} need fixing")
    for move in report.moves:
        print(f"  {move.program_name}: {move.name} ({move.chest_number}) "
              f"{move.from_team} -> {move.to_team}")
    for gone in report.dropped:
        print(f"  {gone.program_name}: {gone.name} ({gone.chest_number}) "
              f"removed from {gone.team_name}, no team owns this chest number")

    if not apply:
        if report.moves or report.dropped:
            print("Run again with --apply to write the fix.")
        return 0

    result = await service.fix_team_assignments()
    print(result.message)
    for program_id in result.failed:
        print(f"  FAILED: {program_id}")
    return 0 if result.ok else 1


def main():
    parser = argparse.ArgumentParser(
        description="Fix participants filed under the wrong team")
    parser.add_argument("store", help="Store location, e.g. data/programs.json")
    parser.add_argument("--apply", action="store_true",
                        help="Write the fix (default: only report)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show info-level log messages")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args.store, args.apply)))


if __name__ == "__main__":
    main()
