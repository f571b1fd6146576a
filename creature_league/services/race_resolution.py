import logging
import math
from typing import Sequence

from creature_league.domain.rewards import issue_rewards, recovery_schedule, reward_label
from creature_league.domain.weighted_scorer import score_race
from creature_league.models.schema_models import (
    BlockInfo,
    GameConfigSchema,
    RaceEntrantSnapshot,
    RaceSpec,
    ResolutionOutcome,
    ResolvedEntry,
)


def resolve_race(
    race: RaceSpec,
    snapshots: Sequence[RaceEntrantSnapshot],
    block: BlockInfo,
    config: GameConfigSchema,
) -> ResolutionOutcome:
    """Resolve a closed weighted race against the block that seeds it.

    Nothing is written here. The returned reward intents must be applied by
    the caller atomically and at most once per idempotency key.

    Args:
        race (RaceSpec): Race being resolved
        snapshots (Sequence[RaceEntrantSnapshot]): Entrant snapshots taken at entry
        block (BlockInfo): Block whose hash seeds the race
        config (GameConfigSchema): Game configuration for this call

    Returns:
        ResolutionOutcome: Ranked results with nano payouts and reward intents,
            or a cancelled outcome when too few creatures entered
    """
    if len(snapshots) < config.min_entrants:
        logging.info(
            f"Race {race.race_id} cancelled: {len(snapshots)} entrant(s), "
            f"{config.min_entrants} required"
        )
        return ResolutionOutcome(
            race_id=race.race_id,
            cancelled=True,
            reason=f"Not enough entrants (minimum {config.min_entrants})",
        )

    scored = score_race(
        snapshots,
        race.race_type,
        config.race_type_weights,
        block.hash,
        config.prize_distribution,
        config.focus_cap,
        config.sharpness_modifier,
        config.min_paid_entrants,
    )

    total_pool = race.entry_fee * scored.total_pool
    results = [
        ResolvedEntry(
            position=entry.position,
            creature_id=entry.creature_id,
            performance_score=entry.performance_score,
            payout=math.floor(total_pool * entry.payout),
            reward=reward_label(entry.position),
        )
        for entry in scored.results
    ]
    intents = issue_rewards(
        scored.results,
        race.race_id,
        block.height,
        config.boost_expiry_blocks,
        recovery_schedule(race.rarity_class, config.recovery_by_position),
        config.recovery_expiry_blocks,
    )

    logging.info(
        f"Race {race.race_id} resolved at block {block.height}: "
        f"{len(results)} entrants, winner {results[0].creature_id}"
    )
    return ResolutionOutcome(
        race_id=race.race_id,
        block_hash=block.hash,
        block_height=block.height,
        total_pool=total_pool,
        results=results,
        reward_intents=intents,
    )
