from fastapi import APIRouter, Depends, HTTPException, Request, status

from creature_league.domain.traits import compute_base_stats, segment_stats
from creature_league.models.dc_models import TokenStatsModel
from creature_league.models.schema_models import GameConfigSchema
from creature_league.routers.dependencies import get_game_config

token_router = APIRouter()


class TokenAPI:
    @staticmethod
    @token_router.get("/tokens/{token_id}/stats", response_model=TokenStatsModel)
    async def token_stats(
        token_id: str, request: Request, config: GameConfigSchema = Depends(get_game_config)
    ):
        registry = request.app.state.token_registry
        if registry is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Token data is not loaded",
            )
        entry = registry.get(token_id)
        if entry is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown token: {token_id}"
            )
        traits = registry.traits_for(token_id)
        if traits is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Token {token_id} has unreadable traits",
            )
        speed_multiplier, consistency = segment_stats(traits)
        return TokenStatsModel(
            token_id=token_id,
            name=entry.name,
            traits=traits,
            base_stats=compute_base_stats(
                traits.rarity,
                traits.body_part_count,
                traits.material_quality,
                config.base_stat_template,
                config.trait_mapping,
            ),
            speed_multiplier=speed_multiplier,
            consistency=consistency,
        )
