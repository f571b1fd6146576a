"""Whether a creature may act now, and whether it may enter a race.

Denials are results, not errors: every decision carries a reason code for
machines and a message for people.
"""
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional

from creature_league.domain.condition import as_utc
from creature_league.domain.stat_rules import BASE_ACTIONS, COOLDOWN_HOURS
from creature_league.models.schema_models import (
    ActionAccounting,
    ActionState,
    EligibilityReason,
    EligibilityResult,
    EntryDecision,
    EntryReason,
    RaceEntryContext,
)

ACTIVE_SEASON_STATUS = "active"
OPEN_RACE_STATUS = "open"


def format_remaining(remaining: timedelta) -> str:
    """Format a cooldown as ``"2h 5m"`` or ``"45m"``."""
    remaining_ms = remaining.total_seconds() * 1000
    hours, minutes = divmod(math.ceil(remaining_ms / (60 * 1000)), 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def check_eligibility(
    season_status: str,
    bonus_actions: int,
    regular_actions_today: int,
    last_regular_action_at: Optional[datetime],
    now: Optional[datetime] = None,
    base_actions: int = BASE_ACTIONS,
    cooldown_hours: float = COOLDOWN_HOURS,
) -> EligibilityResult:
    """Decide whether a training or race action is allowed right now.

    Bonus actions are consumed first and bypass both the daily cap and the
    cooldown. The caller decrements the bonus counter when ``used_bonus`` is
    set, and stamps the regular-action timestamp otherwise.

    Args:
        season_status (str): Status of the creature's season
        bonus_actions (int): Bonus-action counter
        regular_actions_today (int): Non-bonus actions since UTC midnight
        last_regular_action_at (Optional[datetime]): Last non-bonus action
        now (Optional[datetime]): Evaluation time. Defaults to the current UTC time.
        base_actions (int, optional): Daily regular action cap. Defaults to 2.
        cooldown_hours (float, optional): Gap between regular actions. Defaults to 6.

    Returns:
        EligibilityResult: allow/deny, reason and which branch was taken
    """
    if season_status != ACTIVE_SEASON_STATUS:
        return EligibilityResult(
            allowed=False,
            reason_code=EligibilityReason.season_not_active,
            reason=f"Season is not active (status: {season_status})",
        )

    if bonus_actions > 0:
        return EligibilityResult(
            allowed=True,
            reason_code=EligibilityReason.ok,
            used_bonus=True,
            state=ActionState.has_bonus_action,
        )

    if regular_actions_today >= base_actions:
        return EligibilityResult(
            allowed=False,
            reason_code=EligibilityReason.no_actions_remaining,
            reason="No actions remaining today",
            state=ActionState.no_actions_today,
        )

    if last_regular_action_at is not None:
        if now is None:
            now = datetime.now(timezone.utc)
        ready_at = as_utc(last_regular_action_at) + timedelta(hours=cooldown_hours)
        if ready_at > as_utc(now):
            remaining = ready_at - as_utc(now)
            logging.debug(f"cooldown active, {remaining} remaining")
            return EligibilityResult(
                allowed=False,
                reason_code=EligibilityReason.cooldown_active,
                reason=f"Cooldown active - {format_remaining(remaining)} remaining",
                state=ActionState.on_cooldown,
                cooldown_remaining_seconds=remaining.total_seconds(),
            )

    return EligibilityResult(
        allowed=True,
        reason_code=EligibilityReason.ok,
        state=ActionState.has_regular_actions,
    )


def actions_remaining(
    bonus_actions: int,
    regular_actions_today: int,
    used_bonus: bool,
    now: datetime,
    base_actions: int = BASE_ACTIONS,
    cooldown_hours: float = COOLDOWN_HOURS,
) -> ActionAccounting:
    """Action budget after an action has been taken.

    Args:
        bonus_actions (int): Bonus counter before the action
        regular_actions_today (int): Regular actions today, including this one
        used_bonus (bool): Whether this action consumed a bonus action
        now (datetime): Time of the action

    Returns:
        ActionAccounting: Remaining bonus counter, total actions left and next ready time
    """
    new_bonus = max(0, bonus_actions - 1) if used_bonus else bonus_actions
    regular_left = max(0, base_actions - regular_actions_today)
    remaining = new_bonus + regular_left

    next_action_at = None
    if remaining > 0:
        if new_bonus > 0:
            next_action_at = now
        else:
            next_action_at = now + timedelta(hours=cooldown_hours)

    return ActionAccounting(
        bonus_actions=new_bonus,
        actions_remaining=remaining,
        next_action_at=next_action_at,
    )


def _deny(reason_code: EntryReason, reason: str) -> EntryDecision:
    return EntryDecision(allowed=False, reason_code=reason_code, reason=reason)


def check_race_entry(
    context: RaceEntryContext,
    rarity_classes: dict,
    now: Optional[datetime] = None,
) -> EntryDecision:
    """Decide whether a creature may enter a race.

    Checks run in a fixed order and the first failure is reported.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    if context.race_status != OPEN_RACE_STATUS:
        return _deny(
            EntryReason.race_not_open,
            f"Race is not open (status: {context.race_status})",
        )

    if as_utc(context.entry_deadline) < as_utc(now):
        return _deny(EntryReason.deadline_passed, "Race entry deadline has passed")

    if (
        context.race_collection_id
        and context.creature_collection_id != context.race_collection_id
    ):
        return _deny(
            EntryReason.collection_mismatch,
            "This creature cannot enter this race - collection mismatch",
        )

    if context.rarity_class:
        allowed_rarities = rarity_classes.get(context.rarity_class)
        if not allowed_rarities:
            return _deny(
                EntryReason.unknown_rarity_class,
                f"Unknown rarity class: {context.rarity_class}",
            )
        if (context.creature_rarity or "").lower() not in allowed_rarities:
            return _deny(
                EntryReason.rarity_not_allowed,
                f"This race is restricted to {context.rarity_class} class "
                f"({', '.join(allowed_rarities)})",
            )

    if context.entry_count >= context.max_entries:
        return _deny(EntryReason.race_full, "Race is full")

    if context.already_entered:
        return _deny(
            EntryReason.already_entered, "Creature is already entered in this race"
        )

    if context.treatment_ends_at is not None and as_utc(context.treatment_ends_at) > as_utc(now):
        return _deny(
            EntryReason.in_treatment,
            "Creature is currently in treatment and cannot enter races",
        )

    return EntryDecision(allowed=True, reason_code=EntryReason.ok)
