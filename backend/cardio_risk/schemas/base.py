"""Base schemas and enums for cardiovascular risk scoring."""

from enum import Enum


class Sex(str, Enum):
    """Biological sex used by sex-specific coefficient tables."""

    MALE = "male"
    FEMALE = "female"


class Race(str, Enum):
    """Self-reported race used for coefficient selection."""

    WHITE = "white"
    AFRICAN_AMERICAN = "african_american"
    HISPANIC = "hispanic"
    ASIAN = "asian"
    OTHER = "other"


class RiskCategory(str, Enum):
    """Risk stratification categories shared by all calculators.

    Each calculator uses its own subset; ``rank`` gives the common
    ordering (moderate and intermediate share a rank).
    """

    VERY_LOW = "very_low"
    LOW = "low"
    BORDERLINE = "borderline"
    MODERATE = "moderate"
    INTERMEDIATE = "intermediate"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @property
    def rank(self) -> int:
        """Ordinal position used to compare categories."""
        return _CATEGORY_RANKS[self]


_CATEGORY_RANKS = {
    RiskCategory.VERY_LOW: 0,
    RiskCategory.LOW: 1,
    RiskCategory.BORDERLINE: 2,
    RiskCategory.MODERATE: 3,
    RiskCategory.INTERMEDIATE: 3,
    RiskCategory.HIGH: 4,
    RiskCategory.VERY_HIGH: 5,
}


class ScoreType(str, Enum):
    """Tag identifying which calculator produced a stored score."""

    FRAMINGHAM = "framingham"
    ASCVD = "ascvd"
    CAC = "cac"
    HEART = "heart"
    CHA2DS2_VASC = "cha2ds2_vasc"
    HAS_BLED = "has_bled"
    TIMI = "timi"
    GRACE = "grace"
