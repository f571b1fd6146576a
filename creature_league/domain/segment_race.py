"""Segment accumulation races (house-seeded, signature-verifiable format).

The house commits to ``sha256(server_seed)`` before entries close. Each entrant
signs its entry; the race seed is ``sha256(server_seed + sorted signatures)``,
so entry order never changes the outcome. After the race the server seed is
disclosed and anyone can re-run the simulation.
"""
import logging
import math
import secrets
from typing import Dict, List, Sequence, Tuple

from creature_league.errors import EngineError
from creature_league.domain.stat_rules import round_half_up
from creature_league.models.schema_models import (
    SegmentRaceEntrant,
    SegmentRaceResult,
    SegmentRaceSimulation,
    SegmentRecord,
)
from creature_league.seeded_rng import SeedRandom, sha256_hex

RACE_SEGMENTS = 10
PAYOUT_SPLIT: Tuple[float, ...] = (0.50, 0.30, 0.15)
HOUSE_CUT = 0.05
VARIANCE_RANGE = 40


def combine_seed(server_seed: str, signatures: Sequence[str]) -> str:
    return sha256_hex(server_seed + "".join(sorted(signatures)))


def verify_server_seed(server_seed: str, published_hash: str) -> bool:
    return sha256_hex(server_seed) == published_hash


def generate_server_seed() -> Tuple[str, str]:
    """Return a fresh ``(server_seed, published_hash)`` pair."""
    seed = sha256_hex(secrets.token_hex(32))
    return seed, sha256_hex(seed)


def simulate_segment(rng: SeedRandom, speed_multiplier: float, consistency: float) -> float:
    base_roll = rng() * 100
    # Lower consistency = more variance
    variance = (1 - consistency) * VARIANCE_RANGE
    swing = (rng() - 0.5) * variance
    return (base_roll + swing) * speed_multiplier


def split_pot(total_pot: int) -> Tuple[int, List[int]]:
    """Return the house cut and the payouts for ranks 1..3."""
    house_cut = math.floor(total_pot * HOUSE_CUT)
    prize_pot = total_pot - house_cut
    return house_cut, [math.floor(prize_pot * share) for share in PAYOUT_SPLIT]


def simulate_segment_race(
    combined_seed: str,
    entrants: Sequence[SegmentRaceEntrant],
    entry_fee: int,
) -> SegmentRaceSimulation:
    """Run the full race from the combined seed.

    Args:
        combined_seed (str): Output of ``combine_seed``
        entrants (Sequence[SegmentRaceEntrant]): Entrants in entry order
        entry_fee (int): Fee per entrant in nano units

    Returns:
        SegmentRaceSimulation: Per-segment history, ranked results and total pot
    """
    token_ids = [entrant.token_id for entrant in entrants]
    if len(set(token_ids)) != len(token_ids):
        raise EngineError("Duplicate token in race entrants")

    rng = SeedRandom(combined_seed)
    distances: Dict[str, float] = {token_id: 0.0 for token_id in token_ids}
    segments: List[List[SegmentRecord]] = []

    for _ in range(RACE_SEGMENTS):
        segment_results: List[SegmentRecord] = []
        for entrant in entrants:
            segment_distance = simulate_segment(
                rng, entrant.speed_multiplier, entrant.consistency
            )
            distances[entrant.token_id] += segment_distance
            segment_results.append(
                SegmentRecord(
                    token_id=entrant.token_id,
                    segment_distance=segment_distance,
                    total_distance=distances[entrant.token_id],
                )
            )
        segments.append(segment_results)

    ranked = sorted(entrants, key=lambda e: (-distances[e.token_id], e.token_id))

    total_pot = len(entrants) * entry_fee
    _, payouts = split_pot(total_pot)

    results = [
        SegmentRaceResult(
            token_id=entrant.token_id,
            name=entrant.name,
            owner_address=entrant.owner_address,
            position=index + 1,
            final_distance=round_half_up(distances[entrant.token_id], 2),
            is_house=entrant.is_house,
            payout_amount=payouts[index] if index < len(payouts) else 0,
        )
        for index, entrant in enumerate(ranked)
    ]
    logging.debug(f"segment race {combined_seed[:16]}: {len(entrants)} entrants, pot {total_pot}")
    return SegmentRaceSimulation(
        combined_seed=combined_seed,
        segments=segments,
        results=results,
        total_pot=total_pot,
    )
