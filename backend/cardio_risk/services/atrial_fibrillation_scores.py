"""Stroke and bleeding risk scores for atrial fibrillation.

- CHA₂DS₂-VASc: annual stroke risk and anticoagulation decision
- HAS-BLED: annual major bleeding risk on anticoagulation
"""

import logging

from cardio_risk.schemas.base import RiskCategory, Sex
from cardio_risk.services.risk_models import CHADSVASCInput, HASBLEDInput, RiskScoreResult

logger = logging.getLogger(__name__)


# ============================================================================
# CHA₂DS₂-VASc Score (Atrial Fibrillation Stroke Risk)
# ============================================================================

# Annual stroke risk % by score (index capped at 9)
STROKE_RISK_BY_SCORE = (0.0, 1.3, 2.2, 3.2, 4.0, 6.7, 9.8, 9.6, 6.7, 15.2)


def calculate_cha2ds2_vasc(data: CHADSVASCInput) -> RiskScoreResult:
    """Calculate CHA₂DS₂-VASc score for stroke risk in atrial fibrillation.

    Args:
        data: Age, sex and stroke risk factors.

    Returns:
        RiskScoreResult with annual stroke risk and anticoagulation guidance.
    """
    components = {}
    clinical_notes = []

    # C - Congestive heart failure (1 point)
    if data.congestive_heart_failure:
        components["Congestive heart failure"] = 1
        clinical_notes.append("C: Congestive heart failure (+1)")

    # H - Hypertension (1 point)
    if data.hypertension:
        components["Hypertension"] = 1
        clinical_notes.append("H: Hypertension (+1)")

    # A₂ - Age ≥75 (2 points) or 65-74 (1 point)
    if data.age >= 75:
        components["Age ≥75"] = 2
        clinical_notes.append("A2: Age ≥75 (+2)")
    elif data.age >= 65:
        components["Age 65-74"] = 1
        clinical_notes.append("A: Age 65-74 (+1)")

    # D - Diabetes (1 point)
    if data.diabetes:
        components["Diabetes"] = 1
        clinical_notes.append("D: Diabetes (+1)")

    # S₂ - Stroke/TIA/thromboembolism (2 points)
    if data.stroke_tia_history:
        components["Prior stroke/TIA"] = 2
        clinical_notes.append("S2: Prior stroke/TIA (+2)")

    # V - Vascular disease (1 point)
    if data.vascular_disease:
        components["Vascular disease"] = 1
        clinical_notes.append("V: Vascular disease (+1)")

    # Sc - Sex category (1 point for female)
    female = data.sex == Sex.FEMALE
    if female:
        components["Female sex"] = 1
        clinical_notes.append("Sc: Female sex (+1)")

    score = sum(components.values())
    stroke_risk = STROKE_RISK_BY_SCORE[min(score, len(STROKE_RISK_BY_SCORE) - 1)]

    if score == 0:
        category = RiskCategory.LOW
        interpretation = "Low thromboembolic risk"
        recommendations = [
            "Anticoagulation not recommended",
            "Aspirin alone not recommended",
            "Reassess score periodically",
        ]
    elif score == 1:
        category = RiskCategory.LOW
        interpretation = "Low-moderate thromboembolic risk"
        if female:
            recommendations = [
                "Score of 1 in a woman reflects sex alone",
                "Anticoagulation not systematically indicated",
                "Evaluate other risk factors",
            ]
        else:
            recommendations = [
                "Consider oral anticoagulation",
                "Discuss benefit/risk with patient",
                "DOAC preferred over VKA if anticoagulating",
            ]
    else:
        category = RiskCategory.HIGH if score >= 4 else RiskCategory.INTERMEDIATE
        interpretation = f"{'High' if score >= 4 else 'Moderate'} thromboembolic risk"
        recommendations = [
            "Oral anticoagulation recommended",
            "DOAC (direct oral anticoagulant) first-line",
            "VKA if mechanical valve or moderate-severe mitral stenosis",
            "Assess bleeding risk (HAS-BLED)",
        ]

    logger.info(f"CHA2DS2-VASc calculated: score={score}, category={category.value}")

    return RiskScoreResult(
        score_name="CHA₂DS₂-VASc",
        score=score,
        risk_percentage=stroke_risk,
        risk_category=category,
        interpretation=f"{interpretation}. Annual stroke risk: ~{stroke_risk}%",
        recommendations=recommendations,
        clinical_notes=clinical_notes,
        components=components,
    )


# ============================================================================
# HAS-BLED Score (Bleeding Risk)
# ============================================================================

# Annual major bleeding risk % by score (index capped at 5)
BLEED_RISK_BY_SCORE = (1.13, 1.02, 1.88, 3.74, 8.70, 12.50)

_HASBLED_CRITERIA = (
    ("hypertension", "Uncontrolled hypertension", "H"),
    ("renal_disease", "Abnormal renal function", "A"),
    ("liver_disease", "Abnormal liver function", "A"),
    ("stroke_history", "Stroke history", "S"),
    ("bleeding_history", "Bleeding history", "B"),
    ("labile_inr", "Labile INR", "L"),
    ("elderly", "Age >65", "E"),
    ("drugs_alcohol", "Drugs/alcohol", "D"),
)


def calculate_has_bled(data: HASBLEDInput) -> RiskScoreResult:
    """Calculate HAS-BLED score for major bleeding risk on anticoagulation.

    A high score flags factors to correct; it never contraindicates
    anticoagulation on its own.
    """
    components = {}
    clinical_notes = []
    for attr, label, letter in _HASBLED_CRITERIA:
        if getattr(data, attr):
            components[label] = 1
            clinical_notes.append(f"{letter}: {label} (+1)")

    score = sum(components.values())
    bleed_risk = BLEED_RISK_BY_SCORE[min(score, len(BLEED_RISK_BY_SCORE) - 1)]

    if score <= 2:
        category = RiskCategory.LOW
        interpretation = "Low bleeding risk"
        recommendations = [
            "Anticoagulation safe if indicated",
            "Standard monitoring",
            "Educate patient on bleeding warning signs",
        ]
    else:
        category = RiskCategory.HIGH if score >= 4 else RiskCategory.INTERMEDIATE
        interpretation = f"{'High' if score >= 4 else 'Moderate'} bleeding risk"
        recommendations = [
            "High bleeding risk does not by itself contraindicate anticoagulation",
            "Identify and correct modifiable risk factors",
            "Closer monitoring recommended",
            "Consider DOAC over VKA",
            "Reinforced patient education",
        ]

    logger.info(f"HAS-BLED calculated: score={score}, category={category.value}")

    return RiskScoreResult(
        score_name="HAS-BLED",
        score=score,
        risk_percentage=bleed_risk,
        risk_category=category,
        interpretation=f"{interpretation}. Annual major bleeding risk: ~{bleed_risk}%",
        recommendations=recommendations,
        clinical_notes=clinical_notes,
        components=components,
    )
