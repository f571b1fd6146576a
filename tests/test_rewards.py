import pytest

from creature_league.domain.rewards import (
    issue_rewards,
    recovery_schedule,
    reward_for_position,
    reward_label,
    select_boosts,
    select_recoveries,
)
from creature_league.errors import EngineError, InvalidReward
from creature_league.models.schema_models import BoostToken, RaceResultEntry, RecoveryToken


def _results(count: int):
    return [
        RaceResultEntry(creature_id=f"c{index}", position=index, performance_score=100 - index, payout=0.0)
        for index in range(1, count + 1)
    ]


@pytest.mark.parametrize(
    "position, bonus_actions, boost",
    [(1, 1, 0.0), (2, 0, 0.50), (3, 0, 0.25), (4, 0, 0.10), (12, 0, 0.10)],
)
def test_reward_table(position, bonus_actions, boost) -> None:
    grant = reward_for_position(position)

    assert grant.bonus_actions == bonus_actions
    assert grant.boost_multiplier == boost


def test_invalid_position() -> None:
    with pytest.raises(EngineError):
        reward_for_position(0)


def test_reward_labels() -> None:
    assert [reward_label(p) for p in (1, 2, 3, 4, 9)] == [
        "+1 Action",
        "+50% Boost",
        "+25% Boost",
        "+10% Boost",
        "+10% Boost",
    ]


def test_issue_rewards() -> None:
    intents = issue_rewards(_results(4), "race-7", block_height=1000)

    assert [intent.idempotency_key for intent in intents] == [
        "race-7:c1",
        "race-7:c2",
        "race-7:c3",
        "race-7:c4",
    ]
    winner, second = intents[0], intents[1]
    assert winner.bonus_actions_delta == 1
    assert winner.boost is None
    assert second.bonus_actions_delta == 0
    assert second.boost.multiplier == 0.5
    assert second.boost.token_id == "race-7:c2:boost"
    assert second.boost.expires_at_height == 1000 + 2160
    assert all(intent.recovery is None for intent in intents)


def test_recovery_packs_for_class_races() -> None:
    schedule = recovery_schedule("rookie", [15.0, 10.0, 5.0])
    intents = issue_rewards(_results(4), "race-8", 50, recovery_by_position=schedule)

    assert [intent.recovery.fatigue_reduction for intent in intents] == [15.0, 10.0, 5.0, 5.0]
    assert recovery_schedule(None, [15.0]) == ()


def _boosts():
    return [
        BoostToken(token_id="b1", creature_id="c1", multiplier=0.5, awarded_at_height=0, expires_at_height=100),
        BoostToken(token_id="b2", creature_id="c1", multiplier=0.25, awarded_at_height=0, expires_at_height=200),
        BoostToken(token_id="b3", creature_id="c2", multiplier=0.1, awarded_at_height=0, expires_at_height=200),
        BoostToken(token_id="b4", creature_id="c1", multiplier=0.1, awarded_at_height=0, expires_at_height=200, spent=True),
    ]


def test_select_boosts_sums_multipliers() -> None:
    total, chosen = select_boosts(_boosts(), ["b1", "b2"], "c1", current_height=50)

    assert total == 0.75
    assert [token.token_id for token in chosen] == ["b1", "b2"]
    assert select_boosts(_boosts(), [], "c1", 50) == (0, [])


@pytest.mark.parametrize("selected", [["b3"], ["b4"], ["missing"], ["b1", "b1"]])
def test_select_boosts_rejects_unusable(selected) -> None:
    with pytest.raises(InvalidReward, match="invalid, already spent"):
        select_boosts(_boosts(), selected, "c1", current_height=50)


def test_select_boosts_rejects_expired() -> None:
    with pytest.raises(InvalidReward, match="1 selected boost\\(s\\) have expired"):
        select_boosts(_boosts(), ["b1", "b2"], "c1", current_height=100)


def test_boost_active_window() -> None:
    boost = _boosts()[0]

    assert boost.is_active(99)
    assert not boost.is_active(100)


def test_select_recoveries() -> None:
    packs = [
        RecoveryToken(token_id="r1", creature_id="c1", fatigue_reduction=10, awarded_at_height=0, expires_at_height=10),
        RecoveryToken(token_id="r2", creature_id="c1", fatigue_reduction=5, awarded_at_height=0, expires_at_height=10),
    ]

    total, chosen = select_recoveries(packs, ["r1", "r2"], "c1", current_height=5)

    assert total == 15
    assert len(chosen) == 2
