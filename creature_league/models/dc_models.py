from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from creature_league.models.schema_models import (
    ActionAccounting,
    BlockInfo,
    BoostToken,
    ConditionFormula,
    DecayedCondition,
    EligibilityResult,
    ParsedTraits,
    RaceEntrantSnapshot,
    RaceResultEntry,
    RaceSpec,
    RecoveryToken,
    SegmentRaceEntrant,
    SegmentRaceResult,
    StatBlock,
    TrainingGains,
    TrainingOutcome,
)


class TrainingRequest(BaseModel):
    creature_id: str
    activity_id: str
    trained_stats: StatBlock = Field(default_factory=StatBlock)
    fatigue: float = Field(default=0.0, ge=0, le=100)
    sharpness: float = Field(default=50.0, ge=0, le=100)
    last_action_at: Optional[datetime] = None
    season_status: str = "active"
    bonus_actions: int = Field(default=0, ge=0)
    regular_actions_today: int = Field(default=0, ge=0)
    last_regular_action_at: Optional[datetime] = None
    boosts: List[BoostToken] = Field(default_factory=list)
    selected_boost_ids: List[str] = Field(default_factory=list)
    recoveries: List[RecoveryToken] = Field(default_factory=list)
    selected_recovery_ids: List[str] = Field(default_factory=list)
    current_height: int = Field(default=0, ge=0)
    now: Optional[datetime] = None


class TrainingPreview(BaseModel):
    creature_id: str
    activity_id: str
    allowed: bool
    eligibility: EligibilityResult
    condition: DecayedCondition
    gains: Optional[TrainingGains] = None
    outcome: Optional[TrainingOutcome] = None
    accounting: Optional[ActionAccounting] = None
    spent_boost_ids: List[str] = Field(default_factory=list)
    spent_recovery_ids: List[str] = Field(default_factory=list)


class DecayRequest(BaseModel):
    fatigue: float = Field(ge=0, le=100)
    sharpness: float = Field(ge=0, le=100)
    last_action_at: Optional[datetime] = None
    now: Optional[datetime] = None
    formula: Optional[ConditionFormula] = None  # None -> configured formula


class EligibilityRequest(BaseModel):
    season_status: str
    bonus_actions: int = Field(default=0, ge=0)
    regular_actions_today: int = Field(default=0, ge=0)
    last_regular_action_at: Optional[datetime] = None
    now: Optional[datetime] = None


class ScoreRaceRequest(BaseModel):
    race_type: str
    seed_material: str
    entrants: List[RaceEntrantSnapshot]


class ResolveRaceRequest(BaseModel):
    race: RaceSpec
    block: BlockInfo
    entrants: List[RaceEntrantSnapshot]


class SegmentSimulateRequest(BaseModel):
    server_seed: str
    entry_fee: int = Field(default=0, ge=0)
    entrants: List[SegmentRaceEntrant]


class SegmentVerifyRequest(BaseModel):
    server_seed: str
    server_seed_hash: str
    combined_seed: Optional[str] = None
    entry_fee: int = Field(default=0, ge=0)
    entrants: List[SegmentRaceEntrant]
    results: List[SegmentRaceResult]


class WeightedVerifyRequest(BaseModel):
    race_type: str
    seed_material: str
    entrants: List[RaceEntrantSnapshot]
    results: List[RaceResultEntry]


class RewardModel(BaseModel):
    position: int
    bonus_actions: int
    boost_multiplier: float
    label: str


class HealthModel(BaseModel):
    status: str
    version: str
    activities: int
    race_types: int
    seed_algorithm: str


class TokenStatsModel(BaseModel):
    token_id: str
    name: str
    traits: ParsedTraits
    base_stats: StatBlock
    speed_multiplier: float
    consistency: float
