import pytest

from creature_league.domain.weighted_scorer import (
    entrant_noise,
    focus_swing,
    rank_scores,
    score_race,
)
from creature_league.errors import EngineError, UnknownRaceType
from creature_league.models.schema_models import RaceEntrantSnapshot, StatBlock

BLOCK_HASH = "00000000000000000003a1b2c3d4e5f60718293a4b5c6d7e8f90a1b2c3d4e5f6"


def _entrant(creature_id: str, speed: float = 50.0, focus: float = 0.0, **kwargs) -> RaceEntrantSnapshot:
    return RaceEntrantSnapshot(
        creature_id=creature_id,
        base_stats=StatBlock(speed=speed),
        trained_stats=StatBlock(focus=focus),
        **kwargs,
    )


def test_scoring_is_deterministic(game_config) -> None:
    entrants = [_entrant("a", 40), _entrant("b", 45), _entrant("c", 50)]
    first = score_race(entrants, "sprint", game_config.race_type_weights, BLOCK_HASH)
    second = score_race(entrants, "sprint", game_config.race_type_weights, BLOCK_HASH)

    assert first == second
    assert first.total_pool == 3


def test_entry_order_does_not_matter(game_config) -> None:
    entrants = [_entrant("a", 40), _entrant("b", 45), _entrant("c", 50)]
    forward = score_race(entrants, "sprint", game_config.race_type_weights, BLOCK_HASH)
    backward = score_race(
        list(reversed(entrants)), "sprint", game_config.race_type_weights, BLOCK_HASH
    )

    assert forward == backward


def test_score_stays_within_noise_bounds(game_config) -> None:
    # focusSwing = 0.30 * (1 - 40 / 80) = 0.15
    entrant = _entrant("bounded", speed=50, focus=40, fatigue=0, sharpness=100)
    for index in range(50):
        result = score_race(
            [entrant], "sprint", game_config.race_type_weights, f"block-{index}"
        ).results[0]
        assert 42.5 <= result.performance_score <= 57.5


def test_focus_swing() -> None:
    assert focus_swing(40, 0) == pytest.approx(0.15)
    assert focus_swing(0, 0) == pytest.approx(0.30)


def test_noise_is_bounded() -> None:
    for creature_id in ("a", "b", "c", "d"):
        assert -1.0 <= entrant_noise(BLOCK_HASH, creature_id) < 1.0


def test_unknown_race_type(game_config) -> None:
    with pytest.raises(UnknownRaceType, match="Unknown race type: swim"):
        score_race([_entrant("a")], "swim", game_config.race_type_weights, BLOCK_HASH)


def test_duplicate_creature_rejected(game_config) -> None:
    with pytest.raises(EngineError):
        score_race(
            [_entrant("a"), _entrant("a")], "sprint", game_config.race_type_weights, BLOCK_HASH
        )


def test_equal_scores_rank_by_creature_id(game_config) -> None:
    entrants = [_entrant("c"), _entrant("a"), _entrant("b")]
    outcome = score_race(entrants, "still", game_config.race_type_weights, BLOCK_HASH)

    assert [r.creature_id for r in outcome.results] == ["a", "b", "c"]
    assert [r.position for r in outcome.results] == [1, 2, 3]
    assert all(r.performance_score == 0.0 for r in outcome.results)


def test_rank_scores() -> None:
    ranked = rank_scores([("b", 1.0), ("a", 1.0), ("c", 2.0)])

    assert [creature_id for creature_id, _ in ranked] == ["c", "a", "b"]


def test_prizes_need_three_entrants(game_config) -> None:
    two = score_race(
        [_entrant("a"), _entrant("b")], "sprint", game_config.race_type_weights, BLOCK_HASH
    )
    four = score_race(
        [_entrant(name) for name in "abcd"], "sprint", game_config.race_type_weights, BLOCK_HASH
    )

    assert [r.payout for r in two.results] == [0.0, 0.0]
    assert [r.payout for r in four.results] == [0.5, 0.3, 0.2, 0.0]


def test_fatigue_lowers_score(game_config) -> None:
    fresh = score_race(
        [_entrant("a", fatigue=0)], "sprint", game_config.race_type_weights, BLOCK_HASH
    ).results[0]
    tired = score_race(
        [_entrant("a", fatigue=100)], "sprint", game_config.race_type_weights, BLOCK_HASH
    ).results[0]

    assert tired.performance_score == pytest.approx(fresh.performance_score / 2, abs=1e-3)
