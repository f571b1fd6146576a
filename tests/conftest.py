import copy
from datetime import datetime, timezone

import pytest

from creature_league.config_loader import ConfigLoader
from creature_league.load_settings import DEFAULT_CONFIG_PATH
from creature_league.models.schema_models import GameConfigSchema

GAME_CONFIG = {
    "activities": {
        "speed_work": {
            "primary": "speed",
            "primary_gain": 10,
            "secondary": "stamina",
            "secondary_gain": 5,
            "fatigue_cost": 8,
        },
        "overload": {
            "primary": "speed",
            "primary_gain": 100,
            "secondary": "stamina",
            "secondary_gain": 0,
            "fatigue_cost": 30,
        },
    },
    "race_type_weights": {
        "sprint": {"speed": 1.0},
        "still": {},
    },
}


@pytest.fixture
def game_config() -> GameConfigSchema:
    return ConfigLoader.parse(GAME_CONFIG)


@pytest.fixture
def default_config() -> GameConfigSchema:
    return ConfigLoader(DEFAULT_CONFIG_PATH).load()


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def game_config_data() -> dict:
    return copy.deepcopy(GAME_CONFIG)
