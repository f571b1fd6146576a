import json

import pytest

from creature_league.domain.traits import (
    base_stats_from_description,
    compute_base_stats,
    parse_traits,
    segment_stats,
)

TRAITS = {
    "Rarity": "Legendary",
    "Pet": "Fox",
    "Body part 1": "Golden Wing",
    "Body part 2": "Diamond Tail",
    "Body part 3": "Plain Ears",
}
TEMPLATE = {"Common": {"total_base": 60, "bias": {}}, "Legendary": {"total_base": 60, "bias": {}}}


def test_parse_direct_form() -> None:
    traits = parse_traits(json.dumps(TRAITS))

    assert traits.rarity == "Legendary"
    assert traits.pet == "Fox"
    assert traits.body_part_count == 3
    assert traits.material_quality == 3


def test_parse_nested_721_form() -> None:
    description = json.dumps({"721": {"policy": {"traits": TRAITS}}})

    assert parse_traits(description) == parse_traits(json.dumps(TRAITS))


@pytest.mark.parametrize("description", ["not json", "[]", '{"721": {}}', ""])
def test_malformed_description_yields_none(description) -> None:
    assert parse_traits(description) is None


def test_compute_base_stats_scales_to_tier_total() -> None:
    stats = compute_base_stats("Common", 2, 3, TEMPLATE, {})

    # 10 each, +1 stamina, +1.5 focus, then scaled by 60 / 62.5
    assert stats.speed == pytest.approx(9.6)
    assert stats.stamina == pytest.approx(10.56)
    assert stats.focus == pytest.approx(11.04)
    assert stats.total() == pytest.approx(60.0)


def test_compute_base_stats_with_bias() -> None:
    template = {"Common": {"total_base": 60, "bias": {"speed": 20}}}
    stats = compute_base_stats("Unknown tier", 0, 0, template, {})

    assert stats.speed == pytest.approx(26.67)
    assert stats.heart == pytest.approx(6.67)


def test_base_stats_from_bad_description() -> None:
    assert base_stats_from_description("{oops", TEMPLATE, {}) is None


def test_segment_stats() -> None:
    traits = parse_traits(json.dumps(TRAITS))

    assert segment_stats(traits) == (1.05, 0.62)

    many_parts = traits.model_copy(update={"body_part_count": 10, "rarity": "Mystery"})
    assert segment_stats(many_parts) == (1.0, 0.82)
