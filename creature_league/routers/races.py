import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status

from creature_league.domain.rewards import reward_for_position, reward_label
from creature_league.domain.seed_verifier import verify_race, verify_weighted_race
from creature_league.domain.segment_race import combine_seed, simulate_segment_race
from creature_league.domain.weighted_scorer import score_race
from creature_league.errors import EngineError
from creature_league.models.dc_models import (
    ResolveRaceRequest,
    RewardModel,
    ScoreRaceRequest,
    SegmentSimulateRequest,
    SegmentVerifyRequest,
    WeightedVerifyRequest,
)
from creature_league.models.schema_models import (
    GameConfigSchema,
    RaceScoreOutcome,
    ResolutionOutcome,
    SegmentRaceSimulation,
    VerificationResult,
)
from creature_league.routers.dependencies import get_game_config
from creature_league.services.race_resolution import resolve_race

race_router = APIRouter()


def _bad_request(e: EngineError) -> HTTPException:
    logging.warning(f"race request rejected: {e}")
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


class WeightedRaceAPI:
    @staticmethod
    @race_router.post("/races/score", response_model=RaceScoreOutcome)
    async def score(
        request: ScoreRaceRequest, config: GameConfigSchema = Depends(get_game_config)
    ):
        try:
            return score_race(
                request.entrants,
                request.race_type,
                config.race_type_weights,
                request.seed_material,
                config.prize_distribution,
                config.focus_cap,
                config.sharpness_modifier,
                config.min_paid_entrants,
            )
        except EngineError as e:
            raise _bad_request(e)

    @staticmethod
    @race_router.post("/races/resolve", response_model=ResolutionOutcome)
    async def resolve(
        request: ResolveRaceRequest, config: GameConfigSchema = Depends(get_game_config)
    ):
        try:
            return resolve_race(request.race, request.entrants, request.block, config)
        except EngineError as e:
            raise _bad_request(e)

    @staticmethod
    @race_router.post("/races/weighted/verify", response_model=VerificationResult)
    async def verify_weighted(
        request: WeightedVerifyRequest, config: GameConfigSchema = Depends(get_game_config)
    ):
        return verify_weighted_race(
            request.entrants,
            request.race_type,
            config.race_type_weights,
            request.seed_material,
            request.results,
            config.prize_distribution,
            config.focus_cap,
            config.sharpness_modifier,
            config.min_paid_entrants,
        )


class SegmentRaceAPI:
    @staticmethod
    @race_router.post("/races/segment/simulate", response_model=SegmentRaceSimulation)
    async def simulate(request: SegmentSimulateRequest):
        combined = combine_seed(
            request.server_seed, [entrant.signature for entrant in request.entrants]
        )
        try:
            return simulate_segment_race(combined, request.entrants, request.entry_fee)
        except EngineError as e:
            raise _bad_request(e)

    @staticmethod
    @race_router.post("/races/segment/verify", response_model=VerificationResult)
    async def verify(request: SegmentVerifyRequest):
        try:
            return verify_race(
                request.server_seed,
                request.server_seed_hash,
                request.entrants,
                request.entry_fee,
                request.results,
                request.combined_seed,
            )
        except EngineError as e:
            raise _bad_request(e)


class RewardAPI:
    @staticmethod
    @race_router.get("/rewards/{position}", response_model=RewardModel)
    async def reward(position: int = Path(ge=1)):
        grant = reward_for_position(position)
        return RewardModel(
            position=position,
            bonus_actions=grant.bonus_actions,
            boost_multiplier=grant.boost_multiplier,
            label=reward_label(position),
        )
