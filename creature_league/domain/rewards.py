"""Finish-position rewards and their later consumption.

Rewards are returned as intents. Applying an intent (incrementing the bonus
counter, inserting a boost row) is the persistence layer's job and must be
atomic and idempotent per ``(race_id, creature_id)``; nothing here prevents
the same race from being rewarded twice.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from creature_league.domain.stat_rules import BOOST_EXPIRY_BLOCKS
from creature_league.errors import EngineError, InvalidReward
from creature_league.models.schema_models import (
    BoostToken,
    RaceResultEntry,
    RecoveryToken,
    RewardGrant,
    RewardIntent,
)

# position -> (bonus actions, boost multiplier); 4th and beyond use the last row.
REWARD_TABLE: Tuple[Tuple[int, float], ...] = (
    (1, 0.0),
    (0, 0.50),
    (0, 0.25),
    (0, 0.10),
)


def reward_for_position(position: int) -> RewardGrant:
    """1st: +1 bonus action; 2nd: 0.50 boost; 3rd: 0.25 boost; 4th+: 0.10 boost."""
    if position < 1:
        raise EngineError(f"Invalid finish position: {position}")
    bonus_actions, boost_multiplier = REWARD_TABLE[min(position, len(REWARD_TABLE)) - 1]
    return RewardGrant(bonus_actions=bonus_actions, boost_multiplier=boost_multiplier)


def reward_label(position: int) -> str:
    grant = reward_for_position(position)
    if grant.bonus_actions:
        return f"+{grant.bonus_actions} Action"
    return f"+{round(grant.boost_multiplier * 100)}% Boost"


def idempotency_key(race_id: str, creature_id: str) -> str:
    return f"{race_id}:{creature_id}"


def issue_rewards(
    results: Sequence[RaceResultEntry],
    race_id: str,
    block_height: int,
    boost_expiry_blocks: int = BOOST_EXPIRY_BLOCKS,
    recovery_by_position: Sequence[float] = (),
    recovery_expiry_blocks: int = BOOST_EXPIRY_BLOCKS,
) -> List[RewardIntent]:
    """Build one reward intent per ranked entrant.

    Args:
        results (Sequence[RaceResultEntry]): Ranked race results
        race_id (str): Race being rewarded
        block_height (int): Chain height at resolution; expiry counts from here
        boost_expiry_blocks (int, optional): Boost lifetime in blocks. Defaults to 2160.
        recovery_by_position (Sequence[float], optional): Fatigue reduction by rank
            index, empty for races without recovery packs
        recovery_expiry_blocks (int, optional): Recovery pack lifetime in blocks

    Returns:
        List[RewardIntent]: Intents in finishing order
    """
    intents: List[RewardIntent] = []
    for result in results:
        grant = reward_for_position(result.position)
        key = idempotency_key(race_id, result.creature_id)

        boost = None
        if grant.boost_multiplier > 0:
            boost = BoostToken(
                token_id=f"{key}:boost",
                creature_id=result.creature_id,
                race_id=race_id,
                multiplier=grant.boost_multiplier,
                awarded_at_height=block_height,
                expires_at_height=block_height + boost_expiry_blocks,
            )

        recovery = None
        if recovery_by_position:
            reduction = recovery_by_position[
                min(result.position, len(recovery_by_position)) - 1
            ]
            if reduction > 0:
                recovery = RecoveryToken(
                    token_id=f"{key}:recovery",
                    creature_id=result.creature_id,
                    race_id=race_id,
                    fatigue_reduction=reduction,
                    awarded_at_height=block_height,
                    expires_at_height=block_height + recovery_expiry_blocks,
                )

        intents.append(
            RewardIntent(
                idempotency_key=key,
                race_id=race_id,
                creature_id=result.creature_id,
                position=result.position,
                bonus_actions_delta=grant.bonus_actions,
                boost=boost,
                recovery=recovery,
            )
        )
    logging.debug(f"issued {len(intents)} reward intents for race {race_id}")
    return intents


def _select(
    tokens: Iterable,
    selected_ids: Sequence[str],
    creature_id: str,
    current_height: int,
    kind: str,
) -> List:
    if not selected_ids:
        return []
    owned = {
        token.token_id: token
        for token in tokens
        if token.token_id is not None
        and token.creature_id in (None, creature_id)
        and not token.spent
    }
    if len(set(selected_ids)) != len(selected_ids) or any(
        token_id not in owned for token_id in selected_ids
    ):
        raise InvalidReward(
            f"One or more selected {kind}s are invalid, already spent, "
            "or do not belong to this creature"
        )
    chosen = [owned[token_id] for token_id in selected_ids]
    expired = [token for token in chosen if token.is_expired(current_height)]
    if expired:
        raise InvalidReward(f"{len(expired)} selected {kind}(s) have expired")
    return chosen


def select_boosts(
    tokens: Iterable[BoostToken],
    selected_ids: Sequence[str],
    creature_id: str,
    current_height: int,
) -> Tuple[float, List[BoostToken]]:
    """Validate the boosts a holder chose to spend.

    Raises:
        InvalidReward: a selected boost is unknown, foreign, spent or expired

    Returns:
        Tuple[float, List[BoostToken]]: Summed multiplier and the tokens to mark spent
    """
    chosen = _select(tokens, selected_ids, creature_id, current_height, "boost")
    return sum(token.multiplier for token in chosen), chosen


def select_recoveries(
    tokens: Iterable[RecoveryToken],
    selected_ids: Sequence[str],
    creature_id: str,
    current_height: int,
) -> Tuple[float, List[RecoveryToken]]:
    chosen = _select(tokens, selected_ids, creature_id, current_height, "recovery pack")
    return sum(abs(token.fatigue_reduction) for token in chosen), chosen


def recovery_schedule(rarity_class: Optional[str], recovery_by_position: Sequence[float]) -> Sequence[float]:
    """Recovery packs are only awarded in rarity-class races."""
    if not rarity_class:
        return ()
    return recovery_by_position
