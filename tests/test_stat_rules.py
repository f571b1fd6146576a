from creature_league.domain.stat_rules import (
    clamp_condition,
    round_half_up,
)


def test_round_half_up_rounds_halves_away_from_even() -> None:
    assert round_half_up(0.625, 2) == 0.63
    assert round_half_up(0.5, 0) == 1.0
    assert round_half_up(1.5, 0) == 2.0
    assert round_half_up(12.3456, 3) == 12.346


def test_clamp_condition() -> None:
    assert clamp_condition(-4.0) == 0.0
    assert clamp_condition(104.0) == 100.0
    assert clamp_condition(42.0) == 42.0
