"""Check a published house race from its disclosed data.

Usage:
    python -m creature_league.verify_cli race.json

``race.json`` holds ``server_seed``, ``server_seed_hash``, ``combined_seed``
(optional), ``entry_fee``, ``entries`` and ``results`` as published.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from creature_league.converter import DataConverter
from creature_league.domain.seed_verifier import verify_race
from creature_league.domain.segment_race import combine_seed, verify_server_seed
from creature_league.errors import EngineError

data_converter = DataConverter()


def build_report(race: dict) -> List[str]:
    """Run every verification step and describe each one.

    Returns:
        List[str]: Report lines; the last line is the verdict
    """
    entrants = data_converter.convert_segment_rows(race.get("entries") or [])
    published = [
        data_converter.convert_segment_result_row(row) for row in race.get("results") or []
    ]
    server_seed = race.get("server_seed") or ""
    published_hash = race.get("server_seed_hash") or ""
    entry_fee = int(race.get("entry_fee") or 0)

    lines = [f"Race: {race.get('id', 'unknown')}", f"Entrants: {len(entrants)}"]
    seed_ok = verify_server_seed(server_seed, published_hash)
    lines.append(f"[{'OK' if seed_ok else 'FAIL'}] server seed matches published hash")

    combined = combine_seed(server_seed, [entrant.signature for entrant in entrants])
    if race.get("combined_seed"):
        lines.append(
            f"[{'OK' if combined == race['combined_seed'] else 'FAIL'}] "
            "combined seed matches entrant signatures"
        )

    result = verify_race(
        server_seed,
        published_hash,
        entrants,
        entry_fee,
        published,
        race.get("combined_seed"),
    )
    if result.valid:
        for entry in published:
            lines.append(
                f"  {entry.position}. {entry.name or entry.token_id} "
                f"{entry.final_distance:.2f} payout "
                f"{data_converter.nano_to_coin(entry.payout_amount):.4f}"
            )
        lines.append("VERIFIED: race results match the disclosed seed")
    else:
        lines.append(f"FAILED: {result.reason}")
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Verify a published house race")
    parser.add_argument("race_file", type=Path, help="JSON file with the disclosed race data")
    args = parser.parse_args(argv)

    try:
        with args.race_file.open(encoding="utf-8") as f:
            race = json.load(f)
        lines = build_report(race)
    except (OSError, ValueError, KeyError, EngineError) as e:
        logging.error(f"Could not verify {args.race_file}: {e}")
        return 1

    print("\n".join(lines))
    return 0 if lines[-1].startswith("VERIFIED") else 1


if __name__ == "__main__":
    sys.exit(main())
