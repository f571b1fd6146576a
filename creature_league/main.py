import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from creature_league import __version__
from creature_league.config_loader import ConfigLoader
from creature_league.load_settings import (
    config_overrides_path,
    config_path,
    log_level,
    token_data_path,
)
from creature_league.models.dc_models import HealthModel
from creature_league.routers import races, tokens, training
from creature_league.seeded_rng import SEED_ALGORITHM_VERSION
from creature_league.token_registry import TokenRegistry

logging.basicConfig(level=log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the game config (and token data, when configured) once at startup."""
    app.state.game_config = ConfigLoader(config_path, config_overrides_path).load()
    app.state.token_registry = None
    if token_data_path:
        registry = TokenRegistry(token_data_path)
        registry.load()
        app.state.token_registry = registry
    try:
        yield
    finally:
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(training.training_router)
app.include_router(races.race_router)
app.include_router(tokens.token_router)


@app.get("/health", response_model=HealthModel)
async def health(request: Request):
    config = request.app.state.game_config
    return HealthModel(
        status="ok",
        version=__version__,
        activities=len(config.activities),
        race_types=len(config.race_type_weights),
        seed_algorithm=SEED_ALGORITHM_VERSION,
    )
