"""Acute coronary syndrome and chest pain risk scores.

- HEART: 6-week MACE risk for undifferentiated chest pain
- TIMI: 14-day event risk in UA/NSTEMI
- GRACE: in-hospital mortality in ACS
"""

import logging

from cardio_risk.schemas.base import RiskCategory
from cardio_risk.services.risk_bands import BandTable
from cardio_risk.services.risk_models import (
    GRACEScoreInput,
    HEARTScoreInput,
    RiskScoreResult,
    TIMIRiskInput,
)

logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


# ============================================================================
# HEART Score
# ============================================================================

HEART_HIGH_RISK_RECOMMENDATION = "Urgent invasive strategy: early coronary angiography"

# Bands: <=3 low, 4-6 intermediate, >=7 high
HEART_BANDS = BandTable(
    (3, 6),
    (
        (
            RiskCategory.LOW,
            1.7,
            "Low risk of major adverse cardiac events",
            (
                "6-week MACE risk: 1-2%",
                "Early discharge from the emergency department can be considered",
                "Outpatient follow-up recommended",
                "Educate on warning symptoms",
            ),
        ),
        (
            RiskCategory.INTERMEDIATE,
            16.6,
            "Intermediate risk of major adverse cardiac events",
            (
                "6-week MACE risk: 12-21%",
                "In-hospital observation recommended",
                "Non-invasive testing",
                "Serial troponin measurements",
                "Consider coronary angiography if tests are positive",
            ),
        ),
        (
            RiskCategory.HIGH,
            50.0,
            "High risk of major adverse cardiac events",
            (
                "6-week MACE risk: >50%",
                "Hospital admission required",
                HEART_HIGH_RISK_RECOMMENDATION,
                "Intensive antithrombotic therapy",
                "Monitoring in a cardiac intensive care unit",
            ),
        ),
    ),
    upper_inclusive=True,
)


def calculate_heart_score(data: HEARTScoreInput) -> RiskScoreResult:
    """Calculate HEART score for chest pain risk stratification.

    Each sub-score is clamped to 0-2, so the total is 0-10.
    """
    components = {
        "History": _clamp(data.history, 0, 2),
        "ECG": _clamp(data.ecg, 0, 2),
        "Age": _clamp(data.age, 0, 2),
        "Risk factors": _clamp(data.risk_factors, 0, 2),
        "Troponin": _clamp(data.troponin, 0, 2),
    }
    score = sum(components.values())
    category, mace_risk, interpretation, recommendations = HEART_BANDS.lookup(score)

    logger.info(f"HEART score calculated: score={score}, category={category.value}")

    return RiskScoreResult(
        score_name="HEART Score",
        score=score,
        risk_percentage=mace_risk,
        risk_category=category,
        interpretation=interpretation,
        recommendations=list(recommendations),
        clinical_notes=[
            f"H (History): {components['History']}",
            f"E (ECG): {components['ECG']}",
            f"A (Age): {components['Age']}",
            f"R (Risk factors): {components['Risk factors']}",
            f"T (Troponin): {components['Troponin']}",
        ],
        components=components,
    )


# ============================================================================
# TIMI Risk Score (UA/NSTEMI)
# ============================================================================

# 14-day risk of death, MI or urgent revascularization, by score
TIMI_RISK_BY_SCORE = (4.7, 4.7, 8.3, 13.2, 19.9, 26.2, 40.9, 40.9)

_TIMI_CRITERIA = (
    ("age_65_or_older", "Age ≥65"),
    ("at_least_3_cad_risk_factors", "≥3 CAD risk factors"),
    ("known_cad_50_stenosis", "Known coronary stenosis ≥50%"),
    ("aspirin_use_last_7_days", "Aspirin use in last 7 days"),
    ("severe_angina_last_24h", "Severe angina (≥2 episodes in 24h)"),
    ("st_deviation_05mm", "ST deviation ≥0.5 mm"),
    ("elevated_cardiac_markers", "Elevated cardiac markers"),
)


def calculate_timi_score(data: TIMIRiskInput) -> RiskScoreResult:
    """Calculate TIMI risk score for unstable angina / NSTEMI."""
    components = {}
    clinical_notes = []
    for attr, label in _TIMI_CRITERIA:
        if getattr(data, attr):
            components[label] = 1
            clinical_notes.append(f"{label} (+1)")

    score = sum(components.values())
    event_risk = TIMI_RISK_BY_SCORE[min(score, len(TIMI_RISK_BY_SCORE) - 1)]

    if score <= 2:
        category = RiskCategory.LOW
        interpretation = "Low TIMI risk"
        recommendations = [
            "Conservative strategy can be considered",
            "Stress testing before discharge",
            "Optimal medical therapy",
        ]
    elif score <= 4:
        category = RiskCategory.INTERMEDIATE
        interpretation = "Intermediate TIMI risk"
        recommendations = [
            "Early invasive strategy to be considered",
            "Coronary angiography within 24-72h",
            "Intensive antithrombotic therapy",
        ]
    else:
        category = RiskCategory.HIGH
        interpretation = "High TIMI risk"
        recommendations = [
            "Urgent invasive strategy recommended",
            "Coronary angiography within 2-24h",
            "Consider GP IIb/IIIa inhibitor",
            "Cardiac intensive care unit",
        ]

    logger.info(f"TIMI score calculated: score={score}, category={category.value}")

    return RiskScoreResult(
        score_name="TIMI Risk Score (UA/NSTEMI)",
        score=score,
        risk_percentage=event_risk,
        risk_category=category,
        interpretation=f"{interpretation}. 14-day event risk: {event_risk}%",
        recommendations=recommendations,
        clinical_notes=clinical_notes,
        components=components,
    )


# ============================================================================
# GRACE Score (ACS In-Hospital Mortality)
# ============================================================================

GRACE_AGE_POINTS = BandTable((30, 40, 50, 60, 70, 80, 90), (0, 8, 25, 41, 58, 75, 91, 100))
GRACE_HEART_RATE_POINTS = BandTable((50, 70, 90, 110, 150, 200), (0, 3, 9, 15, 24, 38, 46))
# Lower systolic pressure scores higher
GRACE_SBP_POINTS = BandTable((80, 100, 120, 140, 160, 200), (58, 53, 43, 34, 24, 10, 0))
GRACE_CREATININE_POINTS = BandTable((0.4, 0.8, 1.2, 1.6, 2.0, 4.0), (1, 4, 7, 10, 13, 21, 28))
GRACE_KILLIP_POINTS = {1: 0, 2: 20, 3: 39, 4: 59}

GRACE_CARDIAC_ARREST_POINTS = 39
GRACE_ST_DEVIATION_POINTS = 28
GRACE_ELEVATED_MARKERS_POINTS = 14

# In-hospital mortality % by score (<=108 ... >196)
GRACE_MORTALITY = BandTable(
    (108, 118, 127, 140, 154, 168, 182, 196),
    (1, 2, 3, 5, 8, 13, 20, 30, 50),
    upper_inclusive=True,
)


def grace_points(data: GRACEScoreInput) -> dict[str, int]:
    """Banded GRACE contributions; the score is their sum."""
    killip = _clamp(data.killip_class, 1, 4)
    return {
        "Age": GRACE_AGE_POINTS.lookup(data.age),
        "Heart rate": GRACE_HEART_RATE_POINTS.lookup(data.heart_rate),
        "Systolic BP": GRACE_SBP_POINTS.lookup(data.systolic_bp),
        "Creatinine": GRACE_CREATININE_POINTS.lookup(data.creatinine),
        "Killip class": GRACE_KILLIP_POINTS[killip],
        "Cardiac arrest": GRACE_CARDIAC_ARREST_POINTS if data.cardiac_arrest else 0,
        "ST deviation": GRACE_ST_DEVIATION_POINTS if data.st_deviation else 0,
        "Elevated cardiac markers": GRACE_ELEVATED_MARKERS_POINTS if data.elevated_cardiac_markers else 0,
    }


def calculate_grace_score(data: GRACEScoreInput) -> RiskScoreResult:
    """Calculate GRACE score for in-hospital mortality in ACS.

    Args:
        data: Age, heart rate (bpm), systolic BP (mmHg), creatinine
            (mg/dL), Killip class 1-4 and three binary findings.

    Returns:
        RiskScoreResult with in-hospital mortality and invasive
        strategy timing.
    """
    components = grace_points(data)
    score = sum(components.values())
    mortality = float(GRACE_MORTALITY.lookup(score))

    if score <= 108:
        category = RiskCategory.LOW
        interpretation = "Low GRACE risk"
        recommendations = [
            "Estimated in-hospital mortality <1%",
            "Non-invasive stratification acceptable",
            "Early discharge if tests are negative",
        ]
    elif score <= 140:
        category = RiskCategory.INTERMEDIATE
        interpretation = "Intermediate GRACE risk"
        recommendations = [
            "In-hospital mortality 1-3%",
            "Invasive strategy within 72h",
            "Monitoring in a cardiology unit",
        ]
    else:
        category = RiskCategory.HIGH
        interpretation = "High GRACE risk"
        recommendations = [
            f"Estimated in-hospital mortality: {mortality:g}%",
            "Urgent invasive strategy (<24h)",
            "Cardiac intensive care",
            "Hemodynamic support if needed",
        ]

    clinical_notes = [f"{name}: +{points}" for name, points in components.items() if points]
    clinical_notes.insert(0, f"Killip class: {_clamp(data.killip_class, 1, 4)}")

    logger.info(f"GRACE score calculated: score={score}, category={category.value}")

    return RiskScoreResult(
        score_name="GRACE Score",
        score=score,
        risk_percentage=mortality,
        risk_category=category,
        interpretation=interpretation,
        recommendations=recommendations,
        clinical_notes=clinical_notes,
        components=components,
    )
