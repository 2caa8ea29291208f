"""Framingham Risk Score (10-year CVD risk, point-based).

Points come from five independently tabulated contributions (age,
total cholesterol, smoking, HDL, systolic pressure), keyed by sex and,
for cholesterol and smoking, by age band. The point total maps to a
10-year risk through sex-specific tables.
"""

import logging

from cardio_risk.schemas.base import RiskCategory, Sex
from cardio_risk.services.risk_bands import BandTable
from cardio_risk.services.risk_models import FraminghamResult, PatientRiskData
from cardio_risk.services.risk_recommendations import build_recommendations

logger = logging.getLogger(__name__)

# ============================================================================
# Point Tables
# ============================================================================

# Age bands: 20-34, 35-39, 40-44, ... 70-74, 75+
_AGE_CUTOFFS = (35, 40, 45, 50, 55, 60, 65, 70, 75)
AGE_POINTS = {
    Sex.MALE: BandTable(_AGE_CUTOFFS, (-9, -4, 0, 3, 6, 8, 10, 11, 12, 13)),
    Sex.FEMALE: BandTable(_AGE_CUTOFFS, (-7, -3, 0, 3, 6, 8, 10, 12, 14, 16)),
}

# Age bands for cholesterol and smoking: <40, 40-49, 50-59, 60-69, 70+
DECADE_BANDS = BandTable((40, 50, 60, 70), (0, 1, 2, 3, 4))

# Cholesterol bands: <160, 160-199, 200-239, 240-279, >=280
CHOLESTEROL_BANDS = BandTable((160, 200, 240, 280), (0, 1, 2, 3, 4))

# Rows: cholesterol band; columns: decade band
CHOLESTEROL_POINTS = {
    Sex.MALE: (
        (0, 0, 0, 0, 0),
        (4, 3, 2, 1, 0),
        (7, 5, 3, 1, 0),
        (9, 6, 4, 2, 1),
        (11, 8, 5, 3, 1),
    ),
    Sex.FEMALE: (
        (0, 0, 0, 0, 0),
        (4, 3, 2, 1, 1),
        (8, 6, 4, 2, 1),
        (11, 8, 5, 3, 2),
        (13, 10, 7, 4, 2),
    ),
}

# Indexed by decade band
SMOKING_POINTS = {
    Sex.MALE: (8, 5, 3, 1, 1),
    Sex.FEMALE: (9, 7, 4, 2, 1),
}

# HDL: <40, 40-49, 50-59, >=60
HDL_POINTS = BandTable((40, 50, 60), (2, 1, 0, -1))

# Systolic: <120, 120-129, 130-139, 140-159, >=160; keyed by (sex, treated)
_SBP_CUTOFFS = (120, 130, 140, 160)
BP_POINTS = {
    (Sex.MALE, False): BandTable(_SBP_CUTOFFS, (0, 0, 1, 1, 2)),
    (Sex.MALE, True): BandTable(_SBP_CUTOFFS, (0, 1, 2, 2, 3)),
    (Sex.FEMALE, False): BandTable(_SBP_CUTOFFS, (0, 1, 2, 3, 4)),
    (Sex.FEMALE, True): BandTable(_SBP_CUTOFFS, (0, 3, 4, 5, 6)),
}

# Point total -> 10-year risk %
POINTS_TO_RISK = {
    Sex.MALE: BandTable(
        (5, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17),
        (1, 2, 3, 4, 5, 6, 8, 10, 12, 16, 20, 25, 30),
    ),
    Sex.FEMALE: BandTable(
        (13, 15, 16, 17, 18, 19, 20, 21, 22, 23, 24, 25),
        (1, 2, 3, 4, 5, 6, 8, 11, 14, 17, 22, 27, 30),
    ),
}

HEART_AGE_BASE = 30
HEART_AGE_MAX = 85


# ============================================================================
# Calculator
# ============================================================================

def framingham_points(data: PatientRiskData) -> dict[str, int]:
    """Points contributed by each Framingham factor."""
    decade = DECADE_BANDS.lookup(data.age)
    cholesterol_band = CHOLESTEROL_BANDS.lookup(data.total_cholesterol)

    return {
        "Age": AGE_POINTS[data.sex].lookup(data.age),
        "Total cholesterol": CHOLESTEROL_POINTS[data.sex][cholesterol_band][decade],
        "Smoking": SMOKING_POINTS[data.sex][decade] if data.is_smoker else 0,
        "HDL cholesterol": HDL_POINTS.lookup(data.hdl_cholesterol),
        "Systolic BP": BP_POINTS[(data.sex, data.is_on_bp_medication)].lookup(data.systolic_bp),
    }


def points_to_risk(points: int, sex: Sex) -> float:
    """Convert a point total to 10-year risk %, clamping to the table ends."""
    return float(POINTS_TO_RISK[sex].lookup(points))


def heart_age(points: int, actual_age: int) -> int:
    """Estimated vascular age, never younger than the patient and capped at 85."""
    estimate = HEART_AGE_BASE + points * 2
    return max(actual_age, min(HEART_AGE_MAX, estimate))


def framingham_risk_category(risk: float) -> RiskCategory:
    """Category for a Framingham 10-year risk percentage."""
    if risk < 5:
        return RiskCategory.LOW
    if risk < 10:
        return RiskCategory.MODERATE
    if risk < 20:
        return RiskCategory.HIGH
    return RiskCategory.VERY_HIGH


def calculate_framingham(data: PatientRiskData) -> FraminghamResult:
    """Calculate the Framingham Risk Score.

    Args:
        data: Patient lipid, blood pressure and demographic variables.

    Returns:
        FraminghamResult with point total, 10-year risk, heart age,
        category and recommendations.
    """
    components = framingham_points(data)
    points = sum(components.values())

    ten_year_risk = points_to_risk(points, data.sex)
    category = framingham_risk_category(ten_year_risk)
    recommendations = build_recommendations(data, ten_year_risk, category)

    logger.info(
        f"Framingham score calculated: points={points}, "
        f"ten_year_risk={ten_year_risk}, category={category.value}"
    )

    return FraminghamResult(
        score_name="Framingham Risk Score",
        score=points,
        risk_percentage=ten_year_risk,
        ten_year_risk=ten_year_risk,
        heart_age=heart_age(points, data.age),
        risk_category=category,
        interpretation=f"{category.value.replace('_', ' ').capitalize()} 10-year cardiovascular risk ({ten_year_risk:g}%)",
        recommendations=recommendations,
        components=components,
    )
