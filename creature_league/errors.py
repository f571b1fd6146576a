class EngineError(ValueError):
    """Base class for errors raised by the progression and race engine."""


class UnknownActivity(EngineError):
    def __init__(self, activity_id: str):
        super().__init__(f"Unknown activity: {activity_id}")
        self.activity_id = activity_id


class UnknownRaceType(EngineError):
    def __init__(self, race_type: str):
        super().__init__(f"Unknown race type: {race_type}")
        self.race_type = race_type


class InvalidReward(EngineError):
    """A selected boost or recovery pack cannot be spent."""


class ConfigError(EngineError):
    """Game configuration could not be read or failed validation."""


class RegistryLoadError(Exception):
    """The token data source could not be loaded."""
