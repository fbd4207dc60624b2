"""
Shared value types for the opportunity engine

Enums for the categorical inputs, the MarketSignal input record and a few
numeric helpers used by every scoring module.
"""

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, TypeVar

from .errors import InvalidInputError

T = TypeVar("T")


class LabelEnum(str, Enum):
    """String enum that parses its labels case-insensitively"""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value, field: str = None):
        if isinstance(value, cls):
            return value
        if type(value) is str:
            key = _label_key(value)
            for member in cls:
                if key in (_label_key(member.value), _label_key(member.name)):
                    return member
        raise InvalidInputError(field or cls.__name__, value, [m.value for m in cls])


def _label_key(label: str) -> str:
    return "".join(ch for ch in label.lower() if ch.isalnum())


class CompetitionDensity(LabelEnum):
    """Saturation of existing competitors"""
    LOW = "Low"
    BALANCED = "Balanced"
    HIGH = "High"
    OVERSATURATED = "Oversaturated"


class Level(LabelEnum):
    """Four-step qualitative scale used by category profiles"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class Difficulty(LabelEnum):
    """How hard a category is to enter and operate"""
    EASY = "Easy"
    MODERATE = "Moderate"
    DIFFICULT = "Difficult"
    VERY_DIFFICULT = "Very Difficult"

    @classmethod
    def parse(cls, value, field: str = None):
        if isinstance(value, Level):
            return _LEVEL_TO_DIFFICULTY[value]
        if type(value) is str and _label_key(value) in _DIFFICULTY_ALIASES:
            return _DIFFICULTY_ALIASES[_label_key(value)]
        return super().parse(value, field or "difficulty")


_LEVEL_TO_DIFFICULTY = {
    Level.LOW: Difficulty.EASY,
    Level.MEDIUM: Difficulty.MODERATE,
    Level.HIGH: Difficulty.DIFFICULT,
    Level.VERY_HIGH: Difficulty.VERY_DIFFICULT,
}

_DIFFICULTY_ALIASES = {
    "low": Difficulty.EASY,
    "medium": Difficulty.MODERATE,
    "high": Difficulty.DIFFICULT,
    "veryhigh": Difficulty.VERY_DIFFICULT,
}

# Representative saturation score for each density band (higher = more saturated)
DENSITY_BAND_SCORES = {
    CompetitionDensity.LOW: 15,
    CompetitionDensity.BALANCED: 40,
    CompetitionDensity.HIGH: 65,
    CompetitionDensity.OVERSATURATED: 90,
}


class RiskLevel(LabelEnum):
    VERY_LOW = "Very Low"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    VERY_HIGH = "Very High"


class TrendDirection(LabelEnum):
    GROWING = "growing"
    STABLE = "stable"
    DECLINING = "declining"


class StaffingNeeds(LabelEnum):
    MINIMAL = "Minimal"
    MODERATE = "Moderate"
    EXTENSIVE = "Extensive"


@dataclass(frozen=True)
class ValueRange:
    """Inclusive min/max pair"""
    min: float
    max: float

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class MarketSignal:
    """
    Market inputs for one location/category pairing.

    competition_density_score is the 0-100 saturation score (higher means
    more saturated). When it is not supplied the representative score of the
    density band is used.
    """
    demand_index: float  # 0-100
    competition_density: CompetitionDensity
    competition_count: int = 0
    population_density: float = 0.0  # people per km²
    avg_income: float = 0.0  # lakhs per year
    internet_penetration: float = 0.0  # percent
    literacy_rate: float = 0.0  # percent
    competition_density_score: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(
            self,
            "competition_density",
            CompetitionDensity.parse(self.competition_density, "competition_density"),
        )
        for name in ("demand_index", "population_density", "avg_income",
                     "internet_penetration", "literacy_rate"):
            require_finite(getattr(self, name), name)
        if self.competition_count < 0:
            raise InvalidInputError("competition_count", self.competition_count)
        if self.population_density < 0:
            raise InvalidInputError("population_density", self.population_density)
        if self.competition_density_score is not None:
            require_finite(self.competition_density_score, "competition_density_score")

    @property
    def density_score(self) -> float:
        if self.competition_density_score is not None:
            return clamp(self.competition_density_score)
        return DENSITY_BAND_SCORES[self.competition_density]


def require_finite(value, field: str) -> float:
    """Reject NaN, infinities and non-numbers"""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInputError(field, value)
    return value


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side, the way score tables are published"""
    return int(math.floor(value + 0.5))


def band_for(value: float, bands: Sequence[Tuple[float, T]], default: T) -> T:
    """Return the result of the first (threshold, result) pair with value >= threshold"""
    for threshold, result in bands:
        if value >= threshold:
            return result
    return default


def first_match(rules: Sequence[Tuple[Callable[[], bool], T]], default: T) -> T:
    """Evaluate (predicate, result) rules top to bottom"""
    for predicate, result in rules:
        if predicate():
            return result
    return default


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {_plain(k): _plain(v) for k, v in value.items()}
    return value


def to_plain_dict(obj) -> Dict[str, Any]:
    """dataclasses.asdict with enums and datetimes flattened for JSON"""
    return asdict(obj, dict_factory=lambda items: {k: _plain(v) for k, v in items})
