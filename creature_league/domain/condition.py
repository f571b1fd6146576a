"""Fatigue and sharpness over time, and their race modifiers.

Two condition formulas exist because the published player docs and the
implemented formulas disagree (see DESIGN.md). Both are kept and selectable;
``ConditionFormula.flat`` and ``SharpnessModifier.flat`` match the formulas the
live races were scored with.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from creature_league.domain.stat_rules import clamp_condition, round_half_up
from creature_league.models.schema_models import (
    ConditionFormula,
    DecayedCondition,
    SharpnessModifier,
)

FATIGUE_DECAY_PER_DAY = 3.0
SHARPNESS_GRACE_HOURS = 24.0
SHARPNESS_DECAY_PER_DAY = 10.0

# (band floor, rate multiplier), highest band first.
RATE_SCALED_BANDS = ((60.0, 1.5), (30.0, 1.0), (0.0, 0.5))


def as_utc(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def hours_between(start: datetime, end: datetime) -> float:
    return (as_utc(end) - as_utc(start)).total_seconds() / 3600.0


def _flat_fatigue(fatigue: float, hours: float) -> float:
    return max(0.0, fatigue - (hours / 24.0) * FATIGUE_DECAY_PER_DAY)


def _rate_scaled_fatigue(fatigue: float, hours: float) -> float:
    """Integrate the banded recovery rate over ``hours``."""
    remaining = hours
    current = fatigue
    base_rate = FATIGUE_DECAY_PER_DAY / 24.0
    while remaining > 0 and current > 0:
        for floor, multiplier in RATE_SCALED_BANDS:
            if current > floor:
                break
        rate = base_rate * multiplier
        to_floor = (current - floor) / rate
        if to_floor >= remaining:
            current -= rate * remaining
            remaining = 0.0
        else:
            current = floor
            remaining -= to_floor
    return max(0.0, current)


def _decayed_sharpness(sharpness: float, hours: float) -> float:
    if hours <= SHARPNESS_GRACE_HOURS:
        return sharpness
    days_over_window = (hours - SHARPNESS_GRACE_HOURS) / 24.0
    return sharpness - days_over_window * SHARPNESS_DECAY_PER_DAY


def decay(
    fatigue: float,
    sharpness: float,
    last_action_at: Optional[datetime],
    now: Optional[datetime] = None,
    formula: ConditionFormula = ConditionFormula.flat,
) -> DecayedCondition:
    """Natural condition decay based on time since the last qualifying action.

    Args:
        fatigue (float): Stored fatigue
        sharpness (float): Stored sharpness
        last_action_at (Optional[datetime]): Last training or race action, None if never
        now (Optional[datetime]): Evaluation time. Defaults to the current UTC time.
        formula (ConditionFormula): Fatigue recovery variant

    Returns:
        DecayedCondition: Both values rounded to 2 decimals and clamped to [0, 100]
    """
    if last_action_at is None:
        return DecayedCondition(
            fatigue=clamp_condition(fatigue), sharpness=clamp_condition(sharpness)
        )

    if now is None:
        now = datetime.now(timezone.utc)
    # A last action stamped in the future never adds fatigue back.
    hours = max(0.0, hours_between(last_action_at, now))

    if formula == ConditionFormula.rate_scaled:
        new_fatigue = _rate_scaled_fatigue(fatigue, hours)
    else:
        new_fatigue = _flat_fatigue(fatigue, hours)
    new_sharpness = _decayed_sharpness(sharpness, hours)

    result = DecayedCondition(
        fatigue=clamp_condition(round_half_up(new_fatigue, 2)),
        sharpness=clamp_condition(round_half_up(new_sharpness, 2)),
    )
    logging.debug(f"decay after {hours:.2f}h ({formula.value}): {result}")
    return result


def fatigue_modifier(fatigue: float) -> float:
    """1.00 when fresh down to 0.50 when exhausted."""
    return 1.0 - fatigue / 200


def sharpness_modifier(
    sharpness: float, variant: SharpnessModifier = SharpnessModifier.flat
) -> float:
    if variant == SharpnessModifier.documented:
        return 0.80 + sharpness / 400
    return 0.90 + sharpness / 1000
