import json

import pytest
from pydantic import ValidationError

from creature_league.config_loader import ConfigLoader, deep_merge
from creature_league.errors import ConfigError
from creature_league.models.schema_models import ConditionFormula



def test_deep_merge_merges_objects_and_replaces_lists() -> None:
    base = {"a": {"x": 1, "y": 2}, "b": [1, 2], "c": 3}
    override = {"a": {"y": 5}, "b": [9]}

    assert deep_merge(base, override) == {"a": {"x": 1, "y": 5}, "b": [9], "c": 3}
    assert base["a"]["y"] == 2


def test_parse_defaults(game_config_data) -> None:
    config = ConfigLoader.parse(game_config_data)

    assert config.per_stat_cap == 80
    assert config.total_stat_cap == 300
    assert config.prize_distribution == [0.5, 0.3, 0.2]
    assert config.condition_formula == ConditionFormula.flat
    assert config.min_entrants == 2


def test_parse_with_overrides(game_config_data) -> None:
    config = ConfigLoader.parse(
        game_config_data, {"base_actions": 3, "race_type_weights": {"sprint": {"accel": 0.5}}}
    )

    assert config.base_actions == 3
    assert config.race_type_weights["sprint"].speed == 1.0
    assert config.race_type_weights["sprint"].accel == 0.5
    assert "still" in config.race_type_weights


@pytest.mark.parametrize(
    "patch",
    [
        {"activities": {"bad": {"primary": "charisma", "primary_gain": 1, "secondary": "speed", "secondary_gain": 1, "fatigue_cost": 1}}},
        {"race_type_weights": {"sprint": {"luck": 1.0}}},
        {"race_type_weights": {"sprint": {"speed": -1.0}}},
        {"prize_distribution": [0.6, 0.5]},
    ],
)
def test_invalid_config_raises(game_config_data, patch) -> None:
    with pytest.raises(ConfigError, match="Invalid game config"):
        ConfigLoader.parse(game_config_data, patch)


def test_rarity_classes_are_lowercased(game_config_data) -> None:
    config = ConfigLoader.parse(game_config_data, {"rarity_classes": {"rookie": ["Common", "UNCOMMON"]}})

    assert config.rarity_classes == {"rookie": ["common", "uncommon"]}


def test_load_files(tmp_path, game_config_data) -> None:
    config_file = tmp_path / "game.json"
    overrides_file = tmp_path / "collection.json"
    config_file.write_text(json.dumps(game_config_data))
    overrides_file.write_text(json.dumps({"cooldown_hours": 4}))

    config = ConfigLoader(config_file, overrides_file).load()

    assert config.cooldown_hours == 4
    assert set(config.activities) == {"speed_work", "overload"}


def test_load_missing_or_broken_file(tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")

    with pytest.raises(ConfigError):
        ConfigLoader(tmp_path / "missing.json").load()
    with pytest.raises(ConfigError):
        ConfigLoader(broken).load()


def test_bundled_config(default_config) -> None:
    assert set(default_config.activities) == {
        "sprint_drills",
        "distance_runs",
        "agility_course",
        "gate_work",
        "cross_training",
        "mental_prep",
    }
    assert set(default_config.race_type_weights) == {
        "sprint",
        "distance",
        "technical",
        "mixed",
        "hazard",
    }


def test_config_is_immutable(game_config) -> None:
    with pytest.raises(ValidationError):
        game_config.base_actions = 5
