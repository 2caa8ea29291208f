"""Input and result records for the cardiovascular risk calculators.

All records are plain value objects owned by the caller. Units:
cholesterol and creatinine in mg/dL, blood pressure in mmHg, heart
rate in bpm. Risk percentages are always floats within 0-100.
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from cardio_risk.schemas.base import Race, RiskCategory, Sex


def _utcnow() -> datetime:
    return datetime.now(UTC)


def clamp_percentage(value: float) -> float:
    """Clamp a risk percentage into [0, 100]."""
    return max(0.0, min(100.0, value))


# ============================================================================
# Clinical Input Model
# ============================================================================

@dataclass
class PatientDemographics:
    """Age, sex and (optional) race of a patient."""

    age: int
    sex: Sex
    race: Race | None = None

    def __post_init__(self) -> None:
        self.sex = Sex(self.sex)
        if self.race is not None:
            self.race = Race(self.race)


@dataclass
class LipidProfile:
    """Fasting lipid panel in mg/dL."""

    total_cholesterol: float
    hdl_cholesterol: float
    ldl_cholesterol: float | None = None
    triglycerides: float | None = None


@dataclass
class CardiovascularRiskFactors:
    """Blood pressure and conventional risk factors."""

    systolic_bp: float
    on_bp_medication: bool = False
    diabetic: bool = False
    smoker: bool = False
    diastolic_bp: float | None = None
    family_history_cvd: bool | None = None
    chronic_kidney_disease: bool | None = None


@dataclass
class PatientRiskData:
    """Lipid, blood pressure and demographic input for Framingham and ASCVD.

    Raises:
        ValueError: If cholesterol, HDL or systolic pressure is not positive.
    """

    age: int
    sex: Sex
    total_cholesterol: float
    hdl_cholesterol: float
    systolic_bp: float
    is_smoker: bool = False
    has_diabetes: bool = False
    is_on_bp_medication: bool = False
    ldl_cholesterol: float | None = None
    diastolic_bp: float | None = None
    has_hypertension: bool | None = None
    family_history_cvd: bool | None = None
    bmi: float | None = None
    race: Race | None = None
    triglycerides: float | None = None
    chronic_kidney_disease: bool | None = None

    def __post_init__(self) -> None:
        self.sex = Sex(self.sex)
        if self.race is not None:
            self.race = Race(self.race)
        for name in ("total_cholesterol", "hdl_cholesterol", "systolic_bp"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @property
    def is_male(self) -> bool:
        return self.sex == Sex.MALE

    @classmethod
    def from_parts(
        cls,
        demographics: PatientDemographics,
        lipids: LipidProfile,
        risk_factors: CardiovascularRiskFactors,
    ) -> "PatientRiskData":
        """Assemble risk data from the split demographic/lipid/risk-factor records."""
        return cls(
            age=demographics.age,
            sex=demographics.sex,
            race=demographics.race,
            total_cholesterol=lipids.total_cholesterol,
            hdl_cholesterol=lipids.hdl_cholesterol,
            ldl_cholesterol=lipids.ldl_cholesterol,
            triglycerides=lipids.triglycerides,
            systolic_bp=risk_factors.systolic_bp,
            diastolic_bp=risk_factors.diastolic_bp,
            is_on_bp_medication=risk_factors.on_bp_medication,
            has_diabetes=risk_factors.diabetic,
            is_smoker=risk_factors.smoker,
            family_history_cvd=risk_factors.family_history_cvd,
            chronic_kidney_disease=risk_factors.chronic_kidney_disease,
        )


@dataclass
class CACScoreInput:
    """Coronary artery calcium scan result."""

    agatston_score: float
    volume_score: float | None = None
    mass_score: float | None = None
    percentile: float | None = None


@dataclass
class HEARTScoreInput:
    """Five ordinal HEART sub-scores, each 0-2.

    history: slightly (0), moderately (1), highly (2) suspicious.
    ecg: normal (0), non-specific repolarization (1), significant ST deviation (2).
    age: <45 (0), 45-64 (1), >=65 (2).
    risk_factors: none (0), 1-2 (1), >=3 or known atherosclerotic disease (2).
    troponin: normal (0), 1-3x upper limit (1), >3x upper limit (2).
    """

    history: int
    ecg: int
    age: int
    risk_factors: int
    troponin: int


@dataclass
class CHADSVASCInput:
    """Stroke risk factors in atrial fibrillation."""

    age: int
    sex: Sex
    congestive_heart_failure: bool = False
    hypertension: bool = False
    diabetes: bool = False
    stroke_tia_history: bool = False
    vascular_disease: bool = False

    def __post_init__(self) -> None:
        self.sex = Sex(self.sex)


@dataclass
class HASBLEDInput:
    """Bleeding risk factors on anticoagulation."""

    hypertension: bool = False  # uncontrolled, SBP >160 mmHg
    renal_disease: bool = False
    liver_disease: bool = False
    stroke_history: bool = False
    bleeding_history: bool = False
    labile_inr: bool = False
    elderly: bool = False  # age >65
    drugs_alcohol: bool = False


@dataclass
class TIMIRiskInput:
    """TIMI criteria for unstable angina / NSTEMI."""

    age_65_or_older: bool = False
    at_least_3_cad_risk_factors: bool = False
    known_cad_50_stenosis: bool = False
    aspirin_use_last_7_days: bool = False
    severe_angina_last_24h: bool = False
    st_deviation_05mm: bool = False
    elevated_cardiac_markers: bool = False


@dataclass
class GRACEScoreInput:
    """GRACE variables for acute coronary syndrome.

    Raises:
        ValueError: If killip_class is not a whole number.
    """

    age: int
    heart_rate: float
    systolic_bp: float
    creatinine: float
    killip_class: int = 1
    cardiac_arrest: bool = False
    st_deviation: bool = False
    elevated_cardiac_markers: bool = False

    def __post_init__(self) -> None:
        killip = self.killip_class
        if isinstance(killip, bool) or not isinstance(killip, int | float) or not float(killip).is_integer():
            raise ValueError(f"killip_class must be a whole number 1-4, got {self.killip_class}")
        self.killip_class = int(self.killip_class)


# ============================================================================
# Results
# ============================================================================

@dataclass(kw_only=True)
class RiskScoreResult:
    """Result shape shared by every calculator."""

    score_name: str
    score: float
    risk_percentage: float
    risk_category: RiskCategory
    interpretation: str
    recommendations: list[str] = field(default_factory=list)
    clinical_notes: list[str] = field(default_factory=list)
    components: dict[str, int] = field(default_factory=dict)
    calculated_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to JSON-compatible primitives."""
        data = asdict(self)
        data["risk_category"] = self.risk_category.value
        data["calculated_at"] = self.calculated_at.isoformat()
        return data


@dataclass(kw_only=True)
class FraminghamResult(RiskScoreResult):
    """Framingham point score with heart age."""

    ten_year_risk: float
    heart_age: int


@dataclass(kw_only=True)
class ASCVDResult(RiskScoreResult):
    """Pooled Cohort Equations result.

    A score of -1 marks an age outside 40-79; the remaining numbers
    are zero placeholders in that case.
    """

    ten_year_risk: float
    lifetime_risk: float
    optimal_risk: float

    @property
    def is_applicable(self) -> bool:
        return self.score >= 0


@dataclass
class ComprehensiveRiskAssessment:
    """ASCVD and CAC results with a combined summary."""

    ascvd: ASCVDResult | None = None
    cac: RiskScoreResult | None = None
    summary: list[str] = field(default_factory=list)
