"""Training gains with diminishing returns and stat budgets.

Invariants for trained stats:
- each stat stays within [0, per_stat_cap] (80)
- the six stats sum to at most total_stat_cap (300)

A gain that would break either bound is clamped or scaled down before it is
returned; when no budget is left every gain is zero.
"""
import logging
from datetime import datetime
from typing import Dict, Optional

from creature_league.domain.condition import decay
from creature_league.domain.stat_rules import (
    STAT_KEYS,
    clamp_condition,
    round_half_up,
)
from creature_league.errors import UnknownActivity
from creature_league.models.schema_models import (
    GameConfigSchema,
    RaceEntrantSnapshot,
    StatBlock,
    TrainingGains,
    TrainingOutcome,
)


def _diminished(base_gain: float, current: float, cap: float) -> float:
    return max(0.0, base_gain * (1 - current / cap))


def compute_gains(
    activity_id: str,
    current_stats: StatBlock,
    config: GameConfigSchema,
    boost_multiplier: float = 0.0,
) -> TrainingGains:
    """Compute stat gains for one training action.

    Diminishing returns: ``gain = base_gain * (1 - current / 80)``, computed for
    the primary and secondary stat independently and summed when they coincide.
    Selected boosts scale the raw gains by ``1 + boost_multiplier`` before the
    caps are applied.

    Args:
        activity_id (str): Key into ``config.activities``
        current_stats (StatBlock): Current trained stats
        config (GameConfigSchema): Game configuration for this call
        boost_multiplier (float, optional): Sum of selected boost multipliers. Defaults to 0.0.

    Raises:
        UnknownActivity: ``activity_id`` is not configured

    Returns:
        TrainingGains: Changes for the touched stats, rounded to 2 decimals
    """
    activity = config.activities.get(activity_id)
    if activity is None:
        raise UnknownActivity(activity_id)

    cap = config.per_stat_cap
    raw: Dict[str, float] = {}
    raw[activity.primary] = _diminished(
        activity.primary_gain, current_stats.get(activity.primary), cap
    )
    raw[activity.secondary] = raw.get(activity.secondary, 0.0) + _diminished(
        activity.secondary_gain, current_stats.get(activity.secondary), cap
    )

    if boost_multiplier:
        for key in raw:
            raw[key] *= 1 + boost_multiplier

    gains: Dict[str, float] = {key: raw[key] for key in STAT_KEYS if key in raw}

    # Per-stat cap
    for key in gains:
        current = current_stats.get(key)
        if current + gains[key] > cap:
            gains[key] = max(0.0, cap - current)

    # Total budget
    current_total = current_stats.total()
    gains_total = sum(gains.values())
    if current_total + gains_total > config.total_stat_cap:
        available = max(0.0, config.total_stat_cap - current_total)
        if gains_total > 0 and available > 0:
            scale = available / gains_total
            gains = {key: value * scale for key, value in gains.items()}
        else:
            gains = {key: 0.0 for key in gains}

    gains = {key: round_half_up(value, 2) for key, value in gains.items()}
    gains = _trim_rounding_overflow(gains, current_total, config.total_stat_cap)

    result = TrainingGains(
        stat_changes=gains,
        fatigue_delta=activity.fatigue_cost,
        sharpness_delta=config.sharpness_gain,
    )
    logging.debug(f"gains for {activity_id}: {result.stat_changes}")
    return result


def _trim_rounding_overflow(
    gains: Dict[str, float], current_total: float, total_cap: float
) -> Dict[str, float]:
    """Rounding two scaled gains up can overshoot the budget by a cent."""
    excess = round_half_up(current_total + sum(gains.values()) - total_cap, 2)
    if excess <= 0 or not gains:
        return gains
    largest = max(gains, key=lambda key: gains[key])
    trimmed = dict(gains)
    trimmed[largest] = max(0.0, round_half_up(trimmed[largest] - excess, 2))
    return trimmed


def apply_training(
    current_stats: StatBlock,
    fatigue: float,
    sharpness: float,
    gains: TrainingGains,
    config: GameConfigSchema,
    recovery: float = 0.0,
) -> TrainingOutcome:
    """Turn computed gains into the next committed progression state.

    Args:
        current_stats (StatBlock): Trained stats before the action
        fatigue (float): Fatigue before the action
        sharpness (float): Sharpness before the action
        gains (TrainingGains): Output of ``compute_gains``
        config (GameConfigSchema): Game configuration for this call
        recovery (float, optional): Fatigue removed by recovery packs. Defaults to 0.0.

    Returns:
        TrainingOutcome: New trained stats and condition
    """
    new_stats = current_stats.as_dict()
    for key, change in gains.stat_changes.items():
        new_stats[key] = round_half_up(min(config.per_stat_cap, new_stats[key] + change), 2)

    new_fatigue = clamp_condition(
        round_half_up(fatigue + gains.fatigue_delta - recovery, 2)
    )
    new_sharpness = clamp_condition(
        round_half_up(min(100.0, sharpness + gains.sharpness_delta), 2)
    )
    return TrainingOutcome(
        new_stats=StatBlock(**new_stats), fatigue=new_fatigue, sharpness=new_sharpness
    )


def snapshot_entrant(
    creature_id: str,
    base_stats: StatBlock,
    trained_stats: StatBlock,
    fatigue: float,
    sharpness: float,
    last_action_at: Optional[datetime],
    config: GameConfigSchema,
    now: Optional[datetime] = None,
) -> RaceEntrantSnapshot:
    """Freeze an entrant for a race, with condition decayed to entry time.

    The stored condition is rounded to whole points.
    """
    condition = decay(fatigue, sharpness, last_action_at, now, config.condition_formula)
    return RaceEntrantSnapshot(
        creature_id=creature_id,
        base_stats=base_stats,
        trained_stats=trained_stats,
        fatigue=round_half_up(condition.fatigue, 0),
        sharpness=round_half_up(condition.sharpness, 0),
    )
