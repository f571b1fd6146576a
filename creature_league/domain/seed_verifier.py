"""Independent re-computation of published races.

A failed verification is an expected outcome, so these functions always
return a ``VerificationResult`` and never raise for a mismatch.
"""
import logging
from typing import Mapping, Optional, Sequence

from creature_league.domain.segment_race import (
    combine_seed,
    simulate_segment_race,
    verify_server_seed,
)
from creature_league.domain.stat_rules import (
    DEFAULT_PRIZE_DISTRIBUTION,
    MIN_PAID_ENTRANTS,
    PER_STAT_CAP,
)
from creature_league.domain.weighted_scorer import score_race
from creature_league.errors import EngineError
from creature_league.models.schema_models import (
    RaceEntrantSnapshot,
    RaceResultEntry,
    RaceTypeWeights,
    SegmentRaceEntrant,
    SegmentRaceResult,
    SharpnessModifier,
    VerificationResult,
)

SEGMENT_RESULT_FIELDS = (
    "token_id",
    "position",
    "final_distance",
    "payout_amount",
    "name",
    "owner_address",
    "is_house",
)
WEIGHTED_RESULT_FIELDS = ("creature_id", "position", "performance_score", "payout")


def _count_mismatch(expected: int, actual: int) -> VerificationResult:
    return VerificationResult(
        valid=False,
        reason=f"Result count mismatch: expected {expected}, got {actual}",
        expected=str(expected),
        actual=str(actual),
    )


def verify_race(
    server_seed: str,
    published_hash: str,
    entrants: Sequence[SegmentRaceEntrant],
    entry_fee: int,
    published_results: Sequence[SegmentRaceResult],
    published_combined_seed: Optional[str] = None,
) -> VerificationResult:
    """Re-run a segment race from its disclosed seed and compare the results.

    Args:
        server_seed (str): Disclosed server seed
        published_hash (str): Hash committed before entries closed
        entrants (Sequence[SegmentRaceEntrant]): Original entrants with signatures
        entry_fee (int): Fee per entrant in nano units
        published_results (Sequence[SegmentRaceResult]): Results as published
        published_combined_seed (Optional[str]): Combined seed as published, if any

    Returns:
        VerificationResult: valid, or the first mismatch with position and identifiers
    """
    if not verify_server_seed(server_seed, published_hash):
        return VerificationResult(
            valid=False, reason="Server seed does not match published hash"
        )

    combined = combine_seed(server_seed, [entrant.signature for entrant in entrants])
    if published_combined_seed is not None and published_combined_seed != combined:
        return VerificationResult(
            valid=False,
            reason="Combined seed does not match entrant signatures",
            expected=combined,
            actual=published_combined_seed,
        )

    try:
        computed = simulate_segment_race(combined, entrants, entry_fee).results
    except EngineError as e:
        return VerificationResult(valid=False, reason=str(e))
    if len(computed) != len(published_results):
        return _count_mismatch(len(computed), len(published_results))

    for index, (expected, actual) in enumerate(zip(computed, published_results)):
        for field in SEGMENT_RESULT_FIELDS:
            if getattr(expected, field) != getattr(actual, field):
                logging.info(f"segment race mismatch at position {index + 1} on {field}")
                return VerificationResult(
                    valid=False,
                    reason=(
                        f"Mismatch at position {index + 1} ({field}): "
                        f"expected {expected.token_id}, got {actual.token_id}"
                    ),
                    position=index + 1,
                    field=field,
                    expected=expected.token_id,
                    actual=actual.token_id,
                )

    return VerificationResult(valid=True)


def verify_weighted_race(
    entrants: Sequence[RaceEntrantSnapshot],
    race_type: str,
    weights: Mapping[str, RaceTypeWeights],
    seed_material: str,
    published_results: Sequence[RaceResultEntry],
    prize_distribution: Sequence[float] = DEFAULT_PRIZE_DISTRIBUTION,
    focus_cap: float = PER_STAT_CAP,
    sharpness_variant: SharpnessModifier = SharpnessModifier.flat,
    min_paid_entrants: int = MIN_PAID_ENTRANTS,
) -> VerificationResult:
    """Re-score a weighted aggregate race from its block hash and compare."""
    try:
        computed = score_race(
            entrants,
            race_type,
            weights,
            seed_material,
            prize_distribution,
            focus_cap,
            sharpness_variant,
            min_paid_entrants,
        ).results
    except EngineError as e:
        return VerificationResult(valid=False, reason=str(e))

    if len(computed) != len(published_results):
        return _count_mismatch(len(computed), len(published_results))

    for index, (expected, actual) in enumerate(zip(computed, published_results)):
        for field in WEIGHTED_RESULT_FIELDS:
            if getattr(expected, field) != getattr(actual, field):
                return VerificationResult(
                    valid=False,
                    reason=(
                        f"Mismatch at position {index + 1} ({field}): "
                        f"expected {expected.creature_id}, got {actual.creature_id}"
                    ),
                    position=index + 1,
                    field=field,
                    expected=expected.creature_id,
                    actual=actual.creature_id,
                )

    return VerificationResult(valid=True)
