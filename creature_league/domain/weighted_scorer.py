"""Weighted aggregate race scoring (the primary season race format).

finalScore = basePower * fatigueMod * sharpnessMod * (1 + noise * focusSwing)

- basePower: effective stats (base + trained) dotted with the race type weights
- noise: first draw of ``SeedRandom(sha256(seed_material + creature_id))``
  mapped onto [-1, 1)
- focusSwing: 0.30 * (1 - effective_focus / (focus_cap + base_focus)); more
  focus means a narrower swing

Every float is computed in the same order as the published reference, so an
independent verifier reproduces the same bits.
"""
import logging
from typing import List, Mapping, Sequence, Tuple

from creature_league.domain.condition import fatigue_modifier, sharpness_modifier
from creature_league.domain.stat_rules import (
    DEFAULT_PRIZE_DISTRIBUTION,
    FOCUS_SWING,
    MIN_PAID_ENTRANTS,
    PER_STAT_CAP,
    STAT_KEYS,
    round_half_up,
)
from creature_league.errors import EngineError, UnknownRaceType
from creature_league.models.schema_models import (
    RaceEntrantSnapshot,
    RaceResultEntry,
    RaceScoreOutcome,
    RaceTypeWeights,
    SharpnessModifier,
)
from creature_league.seeded_rng import seed_to_signed_float, sha256_hex


def entrant_seed(seed_material: str, creature_id: str) -> str:
    return sha256_hex(seed_material + creature_id)


def entrant_noise(seed_material: str, creature_id: str) -> float:
    return seed_to_signed_float(entrant_seed(seed_material, creature_id))


def focus_swing(effective_focus: float, base_focus: float, focus_cap: float = PER_STAT_CAP) -> float:
    return FOCUS_SWING * (1 - effective_focus / (focus_cap + base_focus))


def base_power(entrant: RaceEntrantSnapshot, weights: RaceTypeWeights) -> float:
    effective = entrant.base_stats.plus(entrant.trained_stats)
    total = 0.0
    for key in STAT_KEYS:
        total = total + effective.get(key) * weights.get(key)
    return total


def score_entrant(
    entrant: RaceEntrantSnapshot,
    weights: RaceTypeWeights,
    seed_material: str,
    focus_cap: float = PER_STAT_CAP,
    sharpness_variant: SharpnessModifier = SharpnessModifier.flat,
) -> float:
    effective_focus = entrant.base_stats.focus + entrant.trained_stats.focus
    weighted = base_power(entrant, weights)
    fatigue_mod = fatigue_modifier(entrant.fatigue)
    sharpness_mod = sharpness_modifier(entrant.sharpness, sharpness_variant)
    noise = entrant_noise(seed_material, entrant.creature_id)
    swing = focus_swing(effective_focus, entrant.base_stats.focus, focus_cap)
    return weighted * fatigue_mod * sharpness_mod * (1 + noise * swing)


def rank_scores(scored: Sequence[Tuple[str, float]]) -> List[Tuple[str, float]]:
    """Highest score first; equal scores fall back to ascending creature id."""
    return sorted(scored, key=lambda item: (-item[1], item[0]))


def score_race(
    entrants: Sequence[RaceEntrantSnapshot],
    race_type: str,
    weights: Mapping[str, RaceTypeWeights],
    seed_material: str,
    prize_distribution: Sequence[float] = DEFAULT_PRIZE_DISTRIBUTION,
    focus_cap: float = PER_STAT_CAP,
    sharpness_variant: SharpnessModifier = SharpnessModifier.flat,
    min_paid_entrants: int = MIN_PAID_ENTRANTS,
) -> RaceScoreOutcome:
    """Rank a weighted aggregate race.

    Args:
        entrants (Sequence[RaceEntrantSnapshot]): Snapshots taken at entry time
        race_type (str): Key into ``weights``
        weights (Mapping[str, RaceTypeWeights]): Weight vector per race type
        seed_material (str): Public unpredictable value, e.g. a block hash
        prize_distribution (Sequence[float], optional): Pool share by rank index
        focus_cap (float, optional): Focus cap used by the swing formula. Defaults to 80.
        sharpness_variant (SharpnessModifier, optional): Sharpness modifier formula
        min_paid_entrants (int, optional): Entrants needed before prizes are paid. Defaults to 3.

    Raises:
        UnknownRaceType: ``race_type`` has no weight vector
        EngineError: the same creature is entered twice

    Returns:
        RaceScoreOutcome: Ranked results and the abstract pool size (entrant count)
    """
    race_weights = weights.get(race_type)
    if race_weights is None:
        raise UnknownRaceType(race_type)

    creature_ids = [entrant.creature_id for entrant in entrants]
    if len(set(creature_ids)) != len(creature_ids):
        raise EngineError("Duplicate creature in race entrants")

    scored = [
        (
            entrant.creature_id,
            score_entrant(entrant, race_weights, seed_material, focus_cap, sharpness_variant),
        )
        for entrant in entrants
    ]
    ranked = rank_scores(scored)

    pays_out = len(entrants) >= min_paid_entrants
    results = [
        RaceResultEntry(
            creature_id=creature_id,
            position=index + 1,
            performance_score=round_half_up(score, 3),
            payout=prize_distribution[index] if pays_out and index < len(prize_distribution) else 0.0,
        )
        for index, (creature_id, score) in enumerate(ranked)
    ]
    logging.debug(f"scored {race_type} race of {len(entrants)} with seed {seed_material[:16]}")
    return RaceScoreOutcome(results=results, total_pool=len(entrants))
