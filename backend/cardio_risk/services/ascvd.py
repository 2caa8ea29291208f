"""ASCVD 10-year risk using the ACC/AHA 2013 Pooled Cohort Equations.

Four coefficient sets ({male, female} x {white, African-American})
apply to the natural logs of age, total cholesterol, HDL and systolic
pressure. Patients without race data, or of another race, use the
white equations.

Ages outside 40-79 do not raise: the calculator returns a result with
score -1 and a "not applicable" message so composed callers can
branch without exception handling.
"""

import logging
import math
from dataclasses import dataclass, replace

from cardio_risk.schemas.base import Race, RiskCategory, Sex
from cardio_risk.services.framingham import calculate_framingham
from cardio_risk.services.risk_models import ASCVDResult, PatientRiskData, clamp_percentage
from cardio_risk.services.risk_recommendations import build_recommendations

logger = logging.getLogger(__name__)

MIN_AGE = 40
MAX_AGE = 79

NOT_APPLICABLE_SCORE = -1


@dataclass(frozen=True)
class PooledCohortCoefficients:
    """One Pooled Cohort Equation; unused terms are zero."""

    ln_age: float = 0.0
    ln_age_squared: float = 0.0
    ln_total_cholesterol: float = 0.0
    ln_age_x_ln_total_cholesterol: float = 0.0
    ln_hdl: float = 0.0
    ln_age_x_ln_hdl: float = 0.0
    ln_treated_sbp: float = 0.0
    ln_age_x_ln_treated_sbp: float = 0.0
    ln_untreated_sbp: float = 0.0
    ln_age_x_ln_untreated_sbp: float = 0.0
    smoker: float = 0.0
    ln_age_x_smoker: float = 0.0
    diabetes: float = 0.0
    baseline_survival: float = 1.0
    mean_coefficient_sum: float = 0.0


WHITE_MALE = PooledCohortCoefficients(
    ln_age=12.344,
    ln_total_cholesterol=11.853,
    ln_age_x_ln_total_cholesterol=-2.664,
    ln_hdl=-7.990,
    ln_age_x_ln_hdl=1.769,
    ln_treated_sbp=1.797,
    ln_untreated_sbp=1.764,
    smoker=7.837,
    ln_age_x_smoker=-1.795,
    diabetes=0.658,
    baseline_survival=0.9144,
    mean_coefficient_sum=61.18,
)

WHITE_FEMALE = PooledCohortCoefficients(
    ln_age=-29.799,
    ln_age_squared=4.884,
    ln_total_cholesterol=13.540,
    ln_age_x_ln_total_cholesterol=-3.114,
    ln_hdl=-13.578,
    ln_age_x_ln_hdl=3.149,
    ln_treated_sbp=2.019,
    ln_untreated_sbp=1.957,
    smoker=7.574,
    ln_age_x_smoker=-1.665,
    diabetes=0.661,
    baseline_survival=0.9665,
    mean_coefficient_sum=-29.18,
)

BLACK_MALE = PooledCohortCoefficients(
    ln_age=2.469,
    ln_total_cholesterol=0.302,
    ln_hdl=-0.307,
    ln_treated_sbp=1.916,
    ln_untreated_sbp=1.809,
    smoker=0.549,
    diabetes=0.645,
    baseline_survival=0.8954,
    mean_coefficient_sum=19.54,
)

BLACK_FEMALE = PooledCohortCoefficients(
    ln_age=17.114,
    ln_total_cholesterol=0.940,
    ln_hdl=-18.920,
    ln_age_x_ln_hdl=4.475,
    ln_treated_sbp=29.291,
    ln_age_x_ln_treated_sbp=-6.432,
    ln_untreated_sbp=27.820,
    ln_age_x_ln_untreated_sbp=-6.087,
    smoker=0.691,
    diabetes=0.874,
    baseline_survival=0.9533,
    mean_coefficient_sum=86.61,
)

# Ideal reference values for the optimal-risk comparison
OPTIMAL_TOTAL_CHOLESTEROL = 170
OPTIMAL_HDL = 60
OPTIMAL_SYSTOLIC_BP = 110

LIFETIME_RISK_BASE = 30.0
LIFETIME_RISK_CAP = 80.0


def select_coefficients(sex: Sex, race: Race | None) -> PooledCohortCoefficients:
    """Pick the equation for sex and race (African-American or white)."""
    black = race == Race.AFRICAN_AMERICAN
    if sex == Sex.FEMALE:
        return BLACK_FEMALE if black else WHITE_FEMALE
    return BLACK_MALE if black else WHITE_MALE


def pooled_cohort_risk(data: PatientRiskData) -> float:
    """10-year ASCVD risk %, clamped to [0, 100]."""
    c = select_coefficients(data.sex, data.race)

    ln_age = math.log(data.age)
    ln_tc = math.log(data.total_cholesterol)
    ln_hdl = math.log(data.hdl_cholesterol)
    ln_sbp = math.log(data.systolic_bp)
    smoker = 1 if data.is_smoker else 0
    diabetes = 1 if data.has_diabetes else 0

    if data.is_on_bp_medication:
        sbp_term = c.ln_treated_sbp * ln_sbp + c.ln_age_x_ln_treated_sbp * ln_age * ln_sbp
    else:
        sbp_term = c.ln_untreated_sbp * ln_sbp + c.ln_age_x_ln_untreated_sbp * ln_age * ln_sbp

    individual_sum = (
        c.ln_age * ln_age
        + c.ln_age_squared * ln_age * ln_age
        + c.ln_total_cholesterol * ln_tc
        + c.ln_age_x_ln_total_cholesterol * ln_age * ln_tc
        + c.ln_hdl * ln_hdl
        + c.ln_age_x_ln_hdl * ln_age * ln_hdl
        + sbp_term
        + c.smoker * smoker
        + c.ln_age_x_smoker * ln_age * smoker
        + c.diabetes * diabetes
    )

    risk = (1 - c.baseline_survival ** math.exp(individual_sum - c.mean_coefficient_sum)) * 100
    return clamp_percentage(risk)


def lifetime_risk(data: PatientRiskData) -> float:
    """Simplified additive lifetime risk heuristic, capped at 80%.

    This is not the Pooled Cohort lifetime model.
    """
    risk = LIFETIME_RISK_BASE
    if data.is_smoker:
        risk += 10
    if data.has_diabetes:
        risk += 15
    if data.systolic_bp > 140:
        risk += 10
    if data.total_cholesterol > 240:
        risk += 5
    if data.hdl_cholesterol < 40:
        risk += 5
    return min(LIFETIME_RISK_CAP, risk)


def optimal_risk(data: PatientRiskData) -> float:
    """Framingham 10-year risk with every modifiable factor at its ideal value.

    Diabetes is left unchanged as non-modifiable.
    """
    optimal = replace(
        data,
        total_cholesterol=OPTIMAL_TOTAL_CHOLESTEROL,
        hdl_cholesterol=OPTIMAL_HDL,
        systolic_bp=OPTIMAL_SYSTOLIC_BP,
        is_smoker=False,
        is_on_bp_medication=False,
    )
    return calculate_framingham(optimal).ten_year_risk


def ascvd_risk_category(risk: float) -> RiskCategory:
    """ACC/AHA category for a 10-year ASCVD risk percentage."""
    if risk < 5:
        return RiskCategory.LOW
    if risk < 7.5:
        return RiskCategory.BORDERLINE
    if risk < 20:
        return RiskCategory.INTERMEDIATE
    return RiskCategory.HIGH


_INTERPRETATIONS = {
    RiskCategory.LOW: "Low 10-year ASCVD risk",
    RiskCategory.BORDERLINE: "Borderline 10-year ASCVD risk",
    RiskCategory.INTERMEDIATE: "Intermediate 10-year ASCVD risk",
    RiskCategory.HIGH: "High 10-year ASCVD risk",
}


def risk_enhancer_notes(data: PatientRiskData) -> list[str]:
    """ACC/AHA 2018 risk-enhancing factors present in the data."""
    notes = []
    if data.family_history_cvd:
        notes.append("Family history of premature coronary disease - risk enhancer")
    if data.chronic_kidney_disease:
        notes.append("Chronic kidney disease - increased risk")
    if data.triglycerides is not None and data.triglycerides > 175:
        notes.append("Hypertriglyceridemia - probable metabolic syndrome")
    return notes


def _not_applicable(data: PatientRiskData) -> ASCVDResult:
    logger.warning(f"ASCVD not applicable for age {data.age} (requires {MIN_AGE}-{MAX_AGE})")
    return ASCVDResult(
        score_name="ASCVD 10-Year Risk (PCE)",
        score=NOT_APPLICABLE_SCORE,
        risk_percentage=0.0,
        ten_year_risk=0.0,
        lifetime_risk=0.0,
        optimal_risk=0.0,
        risk_category=RiskCategory.LOW,
        interpretation=f"Age outside validated range ({MIN_AGE}-{MAX_AGE} years required)",
        recommendations=["Calculation not applicable for this age"],
    )


def calculate_ascvd(data: PatientRiskData) -> ASCVDResult:
    """Calculate 10-year ASCVD risk with lifetime and optimal comparisons.

    Args:
        data: Patient variables; race defaults to the white equations.

    Returns:
        ASCVDResult. For ages outside 40-79 the score is -1 and the
        category is a LOW placeholder.
    """
    if data.age < MIN_AGE or data.age > MAX_AGE:
        return _not_applicable(data)

    risk = pooled_cohort_risk(data)
    category = ascvd_risk_category(risk)
    recommendations = build_recommendations(data, risk, category, include_statin_guidance=True)

    logger.info(f"ASCVD score calculated: ten_year_risk={risk:.2f}, category={category.value}")

    return ASCVDResult(
        score_name="ASCVD 10-Year Risk (PCE)",
        score=round(risk, 1),
        risk_percentage=risk,
        ten_year_risk=risk,
        lifetime_risk=lifetime_risk(data),
        optimal_risk=optimal_risk(data),
        risk_category=category,
        interpretation=f"{_INTERPRETATIONS[category]} ({risk:.1f}%)",
        recommendations=recommendations,
        clinical_notes=risk_enhancer_notes(data),
    )
