import logging
from datetime import datetime, timezone
from typing import Optional

from creature_league.domain.condition import decay
from creature_league.domain.eligibility import actions_remaining, check_eligibility
from creature_league.domain.progression import apply_training, compute_gains
from creature_league.domain.rewards import select_boosts, select_recoveries
from creature_league.errors import UnknownActivity
from creature_league.models.dc_models import TrainingPreview, TrainingRequest
from creature_league.models.schema_models import GameConfigSchema


def preview_training(
    request: TrainingRequest,
    config: GameConfigSchema,
    now: Optional[datetime] = None,
) -> TrainingPreview:
    """Work out what one training action would do, without committing it.

    Condition is decayed to ``now`` first, then eligibility is checked; a
    denied action comes back as a preview with ``allowed`` unset.

    Args:
        request (TrainingRequest): Creature state and the chosen activity
        config (GameConfigSchema): Game configuration for this call
        now (Optional[datetime]): Evaluation time. Defaults to ``request.now`` or the current UTC time.

    Raises:
        UnknownActivity: the activity is not configured
        InvalidReward: a selected boost or recovery pack cannot be spent

    Returns:
        TrainingPreview: Gains, next state and remaining actions
    """
    if request.activity_id not in config.activities:
        raise UnknownActivity(request.activity_id)
    if now is None:
        now = request.now or datetime.now(timezone.utc)

    condition = decay(
        request.fatigue,
        request.sharpness,
        request.last_action_at,
        now,
        config.condition_formula,
    )
    eligibility = check_eligibility(
        request.season_status,
        request.bonus_actions,
        request.regular_actions_today,
        request.last_regular_action_at,
        now,
        config.base_actions,
        config.cooldown_hours,
    )
    if not eligibility.allowed:
        logging.info(
            f"Training denied for {request.creature_id}: {eligibility.reason_code.value}"
        )
        return TrainingPreview(
            creature_id=request.creature_id,
            activity_id=request.activity_id,
            allowed=False,
            eligibility=eligibility,
            condition=condition,
        )

    boost, boosts = select_boosts(
        request.boosts, request.selected_boost_ids, request.creature_id, request.current_height
    )
    recovery, recoveries = select_recoveries(
        request.recoveries,
        request.selected_recovery_ids,
        request.creature_id,
        request.current_height,
    )

    gains = compute_gains(request.activity_id, request.trained_stats, config, boost)
    outcome = apply_training(
        request.trained_stats,
        condition.fatigue,
        condition.sharpness,
        gains,
        config,
        recovery,
    )
    regular_today = request.regular_actions_today + (0 if eligibility.used_bonus else 1)
    accounting = actions_remaining(
        request.bonus_actions,
        regular_today,
        eligibility.used_bonus,
        now,
        config.base_actions,
        config.cooldown_hours,
    )

    logging.info(
        f"Training preview for {request.creature_id} ({request.activity_id}): "
        f"{gains.stat_changes}, {accounting.actions_remaining} action(s) left"
    )
    return TrainingPreview(
        creature_id=request.creature_id,
        activity_id=request.activity_id,
        allowed=True,
        eligibility=eligibility,
        condition=condition,
        gains=gains,
        outcome=outcome,
        accounting=accounting,
        spent_boost_ids=[token.token_id for token in boosts],
        spent_recovery_ids=[token.token_id for token in recoveries],
    )
