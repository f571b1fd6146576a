import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from creature_league.errors import ConfigError
from creature_league.models.schema_models import GameConfigSchema


def deep_merge(base: dict, override: dict) -> dict:
    """Overlay ``override`` on ``base``.

    Nested objects merge key by key; any other value (lists included) in the
    override replaces the base value.
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class ConfigLoader:
    """Reads and validates the game configuration once, at load time."""

    def __init__(self, config_path: Path, overrides_path: Optional[Path] = None):
        self.config_path = Path(config_path)
        self.overrides_path = Path(overrides_path) if overrides_path else None

    @staticmethod
    def parse(data: dict, overrides: Optional[dict] = None) -> GameConfigSchema:
        """Validate a raw config document, with optional collection overrides.

        Args:
            data (dict): Global game config
            overrides (Optional[dict]): Collection-level overrides

        Raises:
            ConfigError: The merged document is not a valid game config

        Returns:
            GameConfigSchema: Validated configuration
        """
        merged = deep_merge(data, overrides) if overrides else data
        try:
            return GameConfigSchema.model_validate(merged)
        except ValidationError as e:
            raise ConfigError(f"Invalid game config: {e}") from e

    def _read(self, path: Path) -> dict:
        try:
            with path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Failed to read game config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Game config {path} must be a JSON object")
        return data

    def load(self) -> GameConfigSchema:
        data = self._read(self.config_path)
        overrides = self._read(self.overrides_path) if self.overrides_path else None
        config = self.parse(data, overrides)
        logging.info(
            f"Loaded game config from {self.config_path}: "
            f"{len(config.activities)} activities, {len(config.race_type_weights)} race types"
        )
        return config
