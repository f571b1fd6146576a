import logging

from fastapi import APIRouter, Depends, HTTPException, status

from creature_league.domain.condition import decay
from creature_league.domain.eligibility import check_eligibility
from creature_league.errors import EngineError
from creature_league.models.dc_models import (
    DecayRequest,
    EligibilityRequest,
    TrainingPreview,
    TrainingRequest,
)
from creature_league.models.schema_models import (
    DecayedCondition,
    EligibilityResult,
    GameConfigSchema,
)
from creature_league.routers.dependencies import get_game_config
from creature_league.services.training_service import preview_training

training_router = APIRouter()


class TrainingAPI:
    @staticmethod
    @training_router.post("/training/preview", response_model=TrainingPreview)
    async def training_preview(
        request: TrainingRequest, config: GameConfigSchema = Depends(get_game_config)
    ):
        try:
            return preview_training(request, config)
        except EngineError as e:
            logging.warning(f"training preview rejected: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


class ConditionAPI:
    @staticmethod
    @training_router.post("/condition/decay", response_model=DecayedCondition)
    async def condition_decay(
        request: DecayRequest, config: GameConfigSchema = Depends(get_game_config)
    ):
        return decay(
            request.fatigue,
            request.sharpness,
            request.last_action_at,
            request.now,
            request.formula or config.condition_formula,
        )

    @staticmethod
    @training_router.post("/eligibility", response_model=EligibilityResult)
    async def eligibility(
        request: EligibilityRequest, config: GameConfigSchema = Depends(get_game_config)
    ):
        return check_eligibility(
            request.season_status,
            request.bonus_actions,
            request.regular_actions_today,
            request.last_regular_action_at,
            request.now,
            config.base_actions,
            config.cooldown_hours,
        )
