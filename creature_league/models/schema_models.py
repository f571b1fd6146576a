from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from creature_league.domain.stat_rules import (
    BASE_ACTIONS,
    BOOST_EXPIRY_BLOCKS,
    COOLDOWN_HOURS,
    DEFAULT_PRIZE_DISTRIBUTION,
    MIN_ENTRANTS,
    MIN_PAID_ENTRANTS,
    PER_STAT_CAP,
    SHARPNESS_GAIN,
    STAT_KEYS,
    TOTAL_STAT_CAP,
)

StatName = Literal["speed", "stamina", "accel", "agility", "heart", "focus"]


class ConditionFormula(str, Enum):
    flat = "flat"  # implemented: -3 fatigue per 24h at any level
    rate_scaled = "rate_scaled"  # documented: slower below 30, faster above 60


class SharpnessModifier(str, Enum):
    flat = "flat"  # implemented: x0.90 .. x1.00
    documented = "documented"  # documented: x0.80 .. x1.05


# ==============================================================================
# ==== Stats and condition =====================================================
# ==============================================================================


class StatBlock(BaseModel):
    speed: float = Field(default=0.0, ge=0)
    stamina: float = Field(default=0.0, ge=0)
    accel: float = Field(default=0.0, ge=0)
    agility: float = Field(default=0.0, ge=0)
    heart: float = Field(default=0.0, ge=0)
    focus: float = Field(default=0.0, ge=0)

    class Config:
        frozen = True
        from_attributes = True

    def get(self, stat: str) -> float:
        return getattr(self, stat)

    def total(self) -> float:
        total = 0.0
        for key in STAT_KEYS:
            total += self.get(key)
        return total

    def as_dict(self) -> Dict[str, float]:
        return {key: self.get(key) for key in STAT_KEYS}

    def plus(self, other: "StatBlock") -> "StatBlock":
        return StatBlock(**{key: self.get(key) + other.get(key) for key in STAT_KEYS})


class DecayedCondition(BaseModel):
    fatigue: float
    sharpness: float


# ==============================================================================
# ==== Configuration ===========================================================
# ==============================================================================


class ActivityDefinition(BaseModel):
    primary: StatName
    primary_gain: float = Field(ge=0)
    secondary: StatName
    secondary_gain: float = Field(ge=0)
    fatigue_cost: float


class RaceTypeWeights(BaseModel):
    speed: float = Field(default=0.0, ge=0)
    stamina: float = Field(default=0.0, ge=0)
    accel: float = Field(default=0.0, ge=0)
    agility: float = Field(default=0.0, ge=0)
    heart: float = Field(default=0.0, ge=0)
    focus: float = Field(default=0.0, ge=0)

    class Config:
        extra = "forbid"

    def get(self, stat: str) -> float:
        return getattr(self, stat)


class GameConfigSchema(BaseModel):
    """Tunables supplied whole by the caller; parsed once, never mutated."""

    activities: Dict[str, ActivityDefinition]
    race_type_weights: Dict[str, RaceTypeWeights]
    prize_distribution: List[float] = Field(default_factory=lambda: list(DEFAULT_PRIZE_DISTRIBUTION))
    per_stat_cap: float = Field(default=PER_STAT_CAP, gt=0)
    total_stat_cap: float = Field(default=TOTAL_STAT_CAP, gt=0)
    focus_cap: float = Field(default=PER_STAT_CAP, gt=0)
    sharpness_gain: float = SHARPNESS_GAIN
    base_actions: int = Field(default=BASE_ACTIONS, ge=0)
    cooldown_hours: float = Field(default=COOLDOWN_HOURS, ge=0)
    boost_expiry_blocks: int = Field(default=BOOST_EXPIRY_BLOCKS, gt=0)
    recovery_by_position: List[float] = Field(default_factory=list)
    recovery_expiry_blocks: int = Field(default=BOOST_EXPIRY_BLOCKS, gt=0)
    min_entrants: int = Field(default=MIN_ENTRANTS, ge=1)
    min_paid_entrants: int = Field(default=MIN_PAID_ENTRANTS, ge=1)
    condition_formula: ConditionFormula = ConditionFormula.flat
    sharpness_modifier: SharpnessModifier = SharpnessModifier.flat
    rarity_classes: Dict[str, List[str]] = Field(default_factory=dict)
    base_stat_template: Dict[str, dict] = Field(default_factory=dict)
    trait_mapping: Dict[str, dict] = Field(default_factory=dict)

    class Config:
        frozen = True

    @field_validator("prize_distribution")
    @classmethod
    def check_prize_distribution(cls, value: List[float]) -> List[float]:
        if any(share < 0 or share > 1 for share in value):
            raise ValueError("prize shares must be between 0 and 1")
        if sum(value) > 1 + 1e-9:
            raise ValueError("prize shares must not sum to more than 1")
        return value

    @field_validator("rarity_classes")
    @classmethod
    def lower_rarities(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        return {name: [rarity.lower() for rarity in rarities] for name, rarities in value.items()}


# ==============================================================================
# ==== Training ================================================================
# ==============================================================================


class TrainingGains(BaseModel):
    stat_changes: Dict[str, float]
    fatigue_delta: float
    sharpness_delta: float


class TrainingOutcome(BaseModel):
    new_stats: StatBlock
    fatigue: float
    sharpness: float


# ==============================================================================
# ==== Eligibility =============================================================
# ==============================================================================


class EligibilityReason(str, Enum):
    ok = "ok"
    season_not_active = "season_not_active"
    no_actions_remaining = "no_actions_remaining"
    cooldown_active = "cooldown_active"


class ActionState(str, Enum):
    no_actions_today = "no-actions-today"
    has_regular_actions = "has-regular-actions"
    on_cooldown = "on-cooldown"
    has_bonus_action = "has-bonus-action"


class EligibilityResult(BaseModel):
    allowed: bool
    reason_code: EligibilityReason
    reason: Optional[str] = None
    used_bonus: bool = False
    state: Optional[ActionState] = None
    cooldown_remaining_seconds: Optional[float] = None


class ActionAccounting(BaseModel):
    bonus_actions: int
    actions_remaining: int
    next_action_at: Optional[datetime] = None


class EntryReason(str, Enum):
    ok = "ok"
    race_not_open = "race_not_open"
    deadline_passed = "deadline_passed"
    collection_mismatch = "collection_mismatch"
    unknown_rarity_class = "unknown_rarity_class"
    rarity_not_allowed = "rarity_not_allowed"
    race_full = "race_full"
    already_entered = "already_entered"
    in_treatment = "in_treatment"


class RaceEntryContext(BaseModel):
    race_status: str
    entry_deadline: datetime
    entry_count: int = 0
    max_entries: int
    race_collection_id: Optional[str] = None
    creature_collection_id: Optional[str] = None
    rarity_class: Optional[str] = None
    creature_rarity: Optional[str] = None
    already_entered: bool = False
    treatment_ends_at: Optional[datetime] = None


class EntryDecision(BaseModel):
    allowed: bool
    reason_code: EntryReason
    reason: Optional[str] = None


# ==============================================================================
# ==== Weighted aggregate races ================================================
# ==============================================================================


class RaceEntrantSnapshot(BaseModel):
    """Entrant state frozen at entry time; later training never touches it."""

    creature_id: str
    base_stats: StatBlock
    trained_stats: StatBlock
    fatigue: float = Field(default=0.0, ge=0, le=100)
    sharpness: float = Field(default=50.0, ge=0, le=100)

    class Config:
        frozen = True
        from_attributes = True


class RaceResultEntry(BaseModel):
    creature_id: str
    position: int
    performance_score: float
    payout: float


class RaceScoreOutcome(BaseModel):
    results: List[RaceResultEntry]
    total_pool: int


class RaceSpec(BaseModel):
    race_id: str
    race_type: str
    entry_fee: int = Field(default=0, ge=0)  # nano units
    rarity_class: Optional[str] = None


class BlockInfo(BaseModel):
    hash: str
    height: int = Field(ge=0)


class ResolvedEntry(BaseModel):
    position: int
    creature_id: str
    performance_score: float
    payout: int  # nano units
    reward: str


# ==============================================================================
# ==== Rewards =================================================================
# ==============================================================================


class RewardGrant(BaseModel):
    bonus_actions: int
    boost_multiplier: float


class BoostToken(BaseModel):
    token_id: Optional[str] = None
    creature_id: Optional[str] = None
    race_id: Optional[str] = None
    multiplier: float = Field(gt=0)
    awarded_at_height: int
    expires_at_height: int
    spent: bool = False

    def is_expired(self, current_height: int) -> bool:
        return self.expires_at_height <= current_height

    def is_active(self, current_height: int) -> bool:
        return not self.spent and not self.is_expired(current_height)


class RecoveryToken(BaseModel):
    token_id: Optional[str] = None
    creature_id: Optional[str] = None
    race_id: Optional[str] = None
    fatigue_reduction: float = Field(gt=0)
    awarded_at_height: int
    expires_at_height: int
    spent: bool = False

    def is_expired(self, current_height: int) -> bool:
        return self.expires_at_height <= current_height


class RewardIntent(BaseModel):
    """Delta the persistence layer must apply atomically, once per key."""

    idempotency_key: str
    race_id: str
    creature_id: str
    position: int
    bonus_actions_delta: int = 0
    boost: Optional[BoostToken] = None
    recovery: Optional[RecoveryToken] = None


class ResolutionOutcome(BaseModel):
    race_id: str
    cancelled: bool = False
    reason: Optional[str] = None
    block_hash: Optional[str] = None
    block_height: Optional[int] = None
    total_pool: int = 0
    results: List[ResolvedEntry] = Field(default_factory=list)
    reward_intents: List[RewardIntent] = Field(default_factory=list)


# ==============================================================================
# ==== Segment (house) races ===================================================
# ==============================================================================


class SegmentRaceEntrant(BaseModel):
    token_id: str
    name: str = ""
    owner_address: str = ""
    signature: str
    speed_multiplier: float = Field(gt=0)
    consistency: float = Field(ge=0, le=1)
    is_house: bool = False


class SegmentRecord(BaseModel):
    token_id: str
    segment_distance: float
    total_distance: float


class SegmentRaceResult(BaseModel):
    token_id: str
    name: str = ""
    owner_address: str = ""
    position: int
    final_distance: float
    is_house: bool = False
    payout_amount: int = 0


class SegmentRaceSimulation(BaseModel):
    combined_seed: str
    segments: List[List[SegmentRecord]]
    results: List[SegmentRaceResult]
    total_pot: int


class VerificationResult(BaseModel):
    valid: bool
    reason: Optional[str] = None
    position: Optional[int] = None
    field: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None


# ==============================================================================
# ==== Token traits ============================================================
# ==============================================================================


class ParsedTraits(BaseModel):
    rarity: str = "Common"
    pet: str = "Unknown"
    skin_color: str = "Unknown"
    background: str = "Unknown"
    stage: str = "1"
    body_parts: List[str] = Field(default_factory=list)
    body_part_count: int = 0
    material_quality: int = 0


class TokenEntry(BaseModel):
    token_id: str
    name: str = ""
    description: str = ""
    number: Optional[int] = None
    current_holder: Optional[str] = None
    status: str = "circulating"
