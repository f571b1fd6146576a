import json

import pytest

from creature_league.errors import RegistryLoadError
from creature_league.token_registry import TokenRegistry

TOKENS = {
    "tokens": [
        {
            "token_id": "token-1",
            "name": "CyberPet #1",
            "description": json.dumps({"Rarity": "Rare", "Body part 1": "Silver Claw"}),
            "status": "circulating",
        },
        {"token_id": "token-2", "name": "CyberPet #2", "description": "{}", "status": "burned"},
        {"token_id": "token-3", "name": "CyberPet #3", "description": "garbage", "status": "circulating"},
    ]
}


def _write(path, data) -> None:
    path.write_text(json.dumps(data))


def test_load_keeps_circulating_tokens(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    _write(path, TOKENS)
    registry = TokenRegistry(path)

    assert len(registry) == 0
    registry.load()

    assert registry.loaded
    assert len(registry) == 2
    assert "token-1" in registry
    assert "token-2" not in registry
    assert registry.get("token-1").name == "CyberPet #1"
    assert registry.get("nope") is None


def test_traits_for(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    _write(path, TOKENS)
    registry = TokenRegistry(path)
    registry.load()

    traits = registry.traits_for("token-1")
    assert traits.rarity == "Rare"
    assert traits.material_quality == 1
    assert registry.traits_for("token-3") is None
    assert registry.traits_for("nope") is None


def test_initial_load_failure(tmp_path) -> None:
    with pytest.raises(RegistryLoadError):
        TokenRegistry(tmp_path / "missing.json").load()

    path = tmp_path / "bad.json"
    _write(path, {"items": []})
    with pytest.raises(RegistryLoadError):
        TokenRegistry(path).load()


def test_failed_refresh_keeps_previous_snapshot(tmp_path) -> None:
    path = tmp_path / "tokens.json"
    _write(path, TOKENS)
    registry = TokenRegistry(path)
    registry.load()

    path.write_text("{broken")
    assert not registry.refresh()
    assert len(registry) == 2

    _write(path, {"tokens": TOKENS["tokens"][:1]})
    assert registry.refresh()
    assert len(registry) == 1
