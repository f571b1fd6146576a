import json

from creature_league.converter import DataConverter
from creature_league.domain.segment_race import combine_seed, simulate_segment_race
from creature_league.seeded_rng import sha256_hex
from creature_league.verify_cli import build_report, main

SERVER_SEED = "5e1f0c7d2a9b48e6a3c1d0f9b8e7a6c5"
ENTRIES = [
    {"nft_token_id": "tok-1", "nft_name": "Pet 1", "owner_address": "9fA", "signature": "s1", "speed_multiplier": 1.0, "consistency": 0.6},
    {"nft_token_id": "tok-2", "nft_name": "Pet 2", "owner_address": "9fB", "signature": "s2", "speed_multiplier": 1.04, "consistency": 0.7},
    {"nft_token_id": "tok-3", "nft_name": "Pet 3", "owner_address": "9fC", "signature": "s3", "speed_multiplier": 1.1, "consistency": 0.8},
]


def _race() -> dict:
    entrants = DataConverter().convert_segment_rows(ENTRIES)
    combined = combine_seed(SERVER_SEED, [entrant.signature for entrant in entrants])
    results = simulate_segment_race(combined, entrants, 100_000_000).results
    return {
        "id": "house-42",
        "server_seed": SERVER_SEED,
        "server_seed_hash": sha256_hex(SERVER_SEED),
        "combined_seed": combined,
        "entry_fee": 100_000_000,
        "entries": ENTRIES,
        "results": [result.model_dump() for result in results],
    }


def test_report_for_honest_race() -> None:
    lines = build_report(_race())

    assert lines[0] == "Race: house-42"
    assert "[OK] server seed matches published hash" in lines
    assert lines[-1] == "VERIFIED: race results match the disclosed seed"


def test_report_for_tampered_race() -> None:
    race = _race()
    race["results"][0]["payout_amount"] += 1

    lines = build_report(race)

    assert lines[-1].startswith("FAILED: Mismatch at position 1 (payout_amount)")


def test_main_exit_codes(tmp_path, capsys) -> None:
    honest = tmp_path / "honest.json"
    honest.write_text(json.dumps(_race()))
    tampered_race = _race()
    tampered_race["server_seed"] = "not the seed"
    tampered = tmp_path / "tampered.json"
    tampered.write_text(json.dumps(tampered_race))

    assert main([str(honest)]) == 0
    assert "VERIFIED" in capsys.readouterr().out
    assert main([str(tampered)]) == 1
    assert main([str(tmp_path / "missing.json")]) == 1
