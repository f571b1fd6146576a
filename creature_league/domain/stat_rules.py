"""Stat and condition rules shared by the training and race modules.

Rule of thumb:
- OK: constants, clamping, rounding, pure transformations.
- Not OK: reading config files, the clock, or any storage.
"""
import math
from typing import Tuple

STAT_KEYS: Tuple[str, ...] = ("speed", "stamina", "accel", "agility", "heart", "focus")

PER_STAT_CAP = 80.0
TOTAL_STAT_CAP = 300.0

CONDITION_MIN = 0.0
CONDITION_MAX = 100.0

# Fixed sharpness gained by every training action.
SHARPNESS_GAIN = 20.0

BASE_ACTIONS = 2
COOLDOWN_HOURS = 6.0

# ~3 days at 720 blocks/day.
BOOST_EXPIRY_BLOCKS = 2160

DEFAULT_PRIZE_DISTRIBUTION: Tuple[float, ...] = (0.50, 0.30, 0.20)
MIN_PAID_ENTRANTS = 3
MIN_ENTRANTS = 2

FOCUS_SWING = 0.30

NANO_PER_COIN = 1_000_000_000


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def clamp_condition(value: float) -> float:
    return clamp(value, CONDITION_MIN, CONDITION_MAX)


def round_half_up(value: float, places: int = 2) -> float:
    """Round like the published results do: halves go up, never to even.

    ``round(0.625, 2)`` gives 0.62 in Python; stored gains must read 0.63.
    """
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor
