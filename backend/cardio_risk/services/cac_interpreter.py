"""Coronary artery calcium (Agatston) score interpretation.

Based on Multi-Ethnic Study of Atherosclerosis (MESA) risk bands.
"""

import logging
import math
from dataclasses import dataclass

from cardio_risk.schemas.base import Race, RiskCategory, Sex
from cardio_risk.services.risk_bands import BandTable
from cardio_risk.services.risk_models import CACScoreInput, PatientDemographics, RiskScoreResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CACBand:
    """Interpretation attached to one Agatston band."""

    label: str
    category: RiskCategory
    mace_risk: float  # reference 10-year MACE risk %
    recommendations: tuple[str, ...]


NO_SYSTEMATIC_STATIN = "No systematic statin therapy recommended if LDL is normal"

# Bands: 0, 1-10, 11-100, 101-400, 401-1000, >1000
CAC_BANDS = BandTable(
    (0, 10, 100, 400, 1000),
    (
        CACBand(
            "No coronary calcification",
            RiskCategory.VERY_LOW,
            1.1,
            (
                "Very low cardiovascular risk",
                "Continue lifestyle measures",
                "Standard risk factor control",
                NO_SYSTEMATIC_STATIN,
            ),
        ),
        CACBand(
            "Minimal coronary calcification",
            RiskCategory.LOW,
            4.1,
            (
                "Early atherosclerosis detected",
                "Optimize risk factor control",
                "Consider statin if associated risk factors",
                "Regular follow-up recommended",
            ),
        ),
        CACBand(
            "Mild coronary calcification",
            RiskCategory.LOW,
            6.4,
            (
                "Atherosclerotic plaque confirmed",
                "Moderate-intensity statin recommended",
                "LDL-C target < 100 mg/dL",
                "Consider aspirin if benefit outweighs bleeding risk",
            ),
        ),
        CACBand(
            "Moderate coronary calcification",
            RiskCategory.INTERMEDIATE,
            11.3,
            (
                "Significant atherosclerosis",
                "High-intensity statin recommended",
                "LDL-C target < 70 mg/dL",
                "Low-dose aspirin recommended",
                "Consider exercise testing or stress imaging",
            ),
        ),
        CACBand(
            "Severe coronary calcification",
            RiskCategory.HIGH,
            19.5,
            (
                "Advanced atherosclerosis",
                "High-intensity statin plus ezetimibe if needed",
                "LDL-C target < 55 mg/dL",
                "Low-dose aspirin",
                "Consider stress imaging or coronary angiography",
                "Comprehensive cardiology evaluation",
            ),
        ),
        CACBand(
            "Very severe coronary calcification",
            RiskCategory.VERY_HIGH,
            25.8,
            (
                "Very advanced atherosclerosis",
                "Intensive treatment required",
                "Statin plus ezetimibe with or without PCSK9 inhibitor",
                "LDL-C target < 55 mg/dL and >= 50% reduction from baseline",
                "Coronary angiography strongly considered",
                "Assess for myocardial ischemia",
                "Regular cardiology follow-up",
            ),
        ),
    ),
    upper_inclusive=True,
)

HIGH_PERCENTILE = 75
LOW_PERCENTILE = 25


def interpret_cac_score(cac: CACScoreInput, demographics: PatientDemographics) -> RiskScoreResult:
    """Interpret an Agatston score.

    Args:
        cac: Scan result; percentile is optional.
        demographics: Patient age/sex for age-specific notes.

    Returns:
        RiskScoreResult with category, reference MACE risk,
        recommendations and clinical notes.
    """
    score = cac.agatston_score
    band = CAC_BANDS.lookup(score)
    category = band.category
    clinical_notes = []

    if cac.percentile is not None:
        if cac.percentile >= HIGH_PERCENTILE:
            clinical_notes.append(
                f"Percentile {cac.percentile:g} for age/sex - higher than average risk"
            )
            if category == RiskCategory.LOW:
                category = RiskCategory.INTERMEDIATE
        elif cac.percentile < LOW_PERCENTILE:
            clinical_notes.append(f"Percentile {cac.percentile:g} for age/sex - favorable")

    if demographics.age < 45 and score > 0:
        clinical_notes.append(
            "Positive CAC before age 45 - premature atherosclerosis, consider genetic lipid work-up"
        )
    if demographics.age > 75 and score == 0:
        clinical_notes.append("Zero CAC after age 75 - excellent cardiovascular prognosis")

    logger.info(f"CAC score interpreted: agatston={score}, category={category.value}")

    return RiskScoreResult(
        score_name="CAC Agatston Score",
        score=score,
        risk_percentage=band.mace_risk,
        risk_category=category,
        interpretation=band.label,
        recommendations=list(band.recommendations),
        clinical_notes=clinical_notes,
    )


# Race multipliers for the expected median score
_RACE_FACTORS = {
    Race.WHITE: 1.0,
    Race.AFRICAN_AMERICAN: 0.8,
    Race.HISPANIC: 0.85,
    Race.ASIAN: 0.75,
}


def expected_cac_percentile(
    score: float,
    age: int,
    sex: Sex,
    race: Race | None = None,
) -> int:
    """Approximate MESA percentile for a score, age, sex and race.

    Uses a simplified log-normal approximation around an expected
    median; reference lookup tables should be preferred when available.
    """
    if score <= 0:
        return 0

    age_factor = (age - 45) / 10
    sex_factor = 1.3 if Sex(sex) == Sex.MALE else 1.0
    race_factor = _RACE_FACTORS.get(Race(race) if race is not None else Race.WHITE, 1.0)

    median_expected = math.exp(0.1 * age_factor) * 50 * sex_factor * race_factor
    percentile = 50 + 30 * math.log(score / median_expected)

    return max(0, min(100, round(percentile)))
