"""Shared recommendation rules for Framingham and ASCVD.

Both calculators feed the same rule set: one message per modifiable
risk factor present, then guidance for the category tier, then
risk-dependent add-ons. ASCVD additionally asks for statin-intensity
and LDL-target guidance.
"""

from collections.abc import Iterable

from cardio_risk.schemas.base import RiskCategory
from cardio_risk.services.risk_models import PatientRiskData

SMOKING_CESSATION = "Smoking cessation recommended - high priority"
LOWER_CHOLESTEROL = "Lower total cholesterol (diet, statin if needed)"
RAISE_HDL = "Raise HDL cholesterol (exercise, diet)"
CONTROL_BP = "Control blood pressure (DASH diet, medication if needed)"
GLYCEMIC_CONTROL = "Optimize glycemic control (HbA1c < 7%)"
WEIGHT_LOSS = "Weight loss recommended (target BMI < 25)"

CARDIOLOGY_REFERRAL = "Cardiology consultation recommended"
CONSIDER_STATIN = "Consider statin therapy"
FULL_WORKUP = "Complete cardiovascular work-up (ECG, echocardiography, exercise stress test)"
REGULAR_FOLLOW_UP = "Regular follow-up of risk factors"
HEALTHY_LIFESTYLE = "Healthy lifestyle (diet, exercise)"
MAINTAIN_LIFESTYLE = "Maintain a healthy lifestyle"
ANNUAL_CHECK = "Annual review of cardiovascular risk factors"
LOW_DOSE_ASPIRIN = "Consider low-dose aspirin (after bleeding risk assessment)"

HIGH_INTENSITY_STATIN = "High-intensity statin recommended (atorvastatin 40-80 mg or rosuvastatin 20-40 mg)"
MODERATE_TO_HIGH_STATIN = "Moderate- to high-intensity statin recommended"
STATIN_DISCUSSION = "Statin discussion recommended (shared decision-making)"
CONSIDER_CAC = "Consider coronary artery calcium scoring to refine risk estimate"
LDL_TARGET_70 = "LDL target < 70 mg/dL for very high risk"
LDL_TARGET_100 = "LDL target < 100 mg/dL recommended"

# Categories whose guidance escalates to specialist referral
_REFERRAL_CATEGORIES = {RiskCategory.INTERMEDIATE, RiskCategory.HIGH, RiskCategory.VERY_HIGH}
_FOLLOW_UP_CATEGORIES = {RiskCategory.BORDERLINE, RiskCategory.MODERATE}


def dedupe(items: Iterable[str]) -> list[str]:
    """Drop repeated strings, keeping first-seen order."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def risk_factor_recommendations(data: PatientRiskData) -> list[str]:
    """One message per modifiable risk factor present."""
    recommendations = []
    if data.is_smoker:
        recommendations.append(SMOKING_CESSATION)
    if data.total_cholesterol > 200:
        recommendations.append(LOWER_CHOLESTEROL)
    if data.hdl_cholesterol < 40:
        recommendations.append(RAISE_HDL)
    if data.systolic_bp > 130:
        recommendations.append(CONTROL_BP)
    if data.has_diabetes:
        recommendations.append(GLYCEMIC_CONTROL)
    # Missing BMI skips the rule
    if data.bmi is not None and data.bmi > 25:
        recommendations.append(WEIGHT_LOSS)
    return recommendations


def category_recommendations(category: RiskCategory) -> list[str]:
    """Guidance for the category tier; low risk still gets baseline advice."""
    if category in _REFERRAL_CATEGORIES:
        return [CARDIOLOGY_REFERRAL, CONSIDER_STATIN, FULL_WORKUP]
    if category in _FOLLOW_UP_CATEGORIES:
        return [REGULAR_FOLLOW_UP, HEALTHY_LIFESTYLE]
    return [MAINTAIN_LIFESTYLE, ANNUAL_CHECK]


def statin_recommendations(risk: float, ldl_cholesterol: float | None) -> list[str]:
    """ACC/AHA statin intensity and LDL target guidance for a 10-year risk."""
    recommendations = []
    if risk >= 20:
        recommendations.append(HIGH_INTENSITY_STATIN)
    elif risk >= 7.5:
        recommendations.append(MODERATE_TO_HIGH_STATIN)
    elif risk >= 5:
        recommendations.append(STATIN_DISCUSSION)

    if 5 <= risk < 20:
        recommendations.append(CONSIDER_CAC)

    if ldl_cholesterol is not None:
        if ldl_cholesterol > 70 and risk >= 20:
            recommendations.append(LDL_TARGET_70)
        elif ldl_cholesterol > 100 and risk >= 7.5:
            recommendations.append(LDL_TARGET_100)
    return recommendations


def build_recommendations(
    data: PatientRiskData,
    risk: float,
    category: RiskCategory,
    include_statin_guidance: bool = False,
) -> list[str]:
    """Assemble the ordered, de-duplicated recommendation list.

    Args:
        data: Patient variables driving the risk-factor rules.
        risk: 10-year risk percentage.
        category: Calculator-specific risk category.
        include_statin_guidance: Append statin/LDL guidance (ASCVD).

    Returns:
        Recommendation strings without duplicates.
    """
    recommendations = risk_factor_recommendations(data)
    recommendations.extend(category_recommendations(category))
    if risk > 20:
        recommendations.append(LOW_DOSE_ASPIRIN)
    if include_statin_guidance:
        recommendations.extend(statin_recommendations(risk, data.ldl_cholesterol))
    return dedupe(recommendations)
