from fastapi import HTTPException, Request, status

from creature_league.models.schema_models import GameConfigSchema


def get_game_config(request: Request) -> GameConfigSchema:
    config = getattr(request.app.state, "game_config", None)
    if config is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Game config is not loaded",
        )
    return config
