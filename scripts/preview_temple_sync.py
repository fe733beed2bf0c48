#!/usr/bin/env python3
"""
Preview what a TempleOSRS sync would tick for a player, without touching the DB.

Usage:
    python scripts/preview_temple_sync.py "Some Rsn"
    python scripts/preview_temple_sync.py "Some Rsn" --verbose
"""
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from osrs_common.catalog.items import get_catalog
from osrs_common.ranks.pvm import evaluate_pvm_rank
from osrs_common.reconcile.runner import merge_into_checklist, reconcile_item_names
from osrs_common.trackers.temple_client import TempleClient


async def main(rsn: str, verbose: bool) -> int:
    client = TempleClient(
        os.environ.get("TEMPLE_BASE_URL", "https://templeosrs.com/api"),
        user_agent=os.environ.get("TRACKER_USER_AGENT", "reborn-iron-ranks"),
    )
    await client.initialize()
    try:
        snapshot = await client.get_collection_log(rsn)
    finally:
        await client.close()

    report = reconcile_item_names(snapshot.item_names, quantities=snapshot.quantities)
    checklist = merge_into_checklist({}, report.matched_ids)
    evaluation = evaluate_pvm_rank(checklist)
    catalog = get_catalog()

    print(f"{rsn}: {len(snapshot.quantities)} obtained, {snapshot.pets_unique} pets, "
          f"clog {snapshot.completed}/{snapshot.available}")
    print(f"Matched {len(report.matched_ids)} catalog items:")
    for item_id in sorted(report.matched_ids):
        item = catalog.lookup_by_id(item_id)
        print(f"  [x] {item.name} ({item.points if item.points is not None else 'req'})")

    print(f"Points {evaluation.points_earned}/{evaluation.points_max}, "
          f"base {'ok' if evaluation.base_ok else 'missing ' + str(len(evaluation.base_missing_item_ids))}, "
          f"qualified {evaluation.qualified_rank.label}")

    if verbose:
        print(f"Unmatched ({len(report.unmatched_names)}):")
        for name in report.unmatched_names:
            print(f"  - {name}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("rsn")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    sys.exit(asyncio.run(main(args.rsn, args.verbose)))
