"""Tests for the comprehensive ASCVD + CAC assessment."""

from cardio_risk.schemas.base import RiskCategory, Sex
from cardio_risk.services.risk_composer import (
    ASCVD_NOT_APPLICABLE_NOTE,
    CAC_HIGH_NOTE,
    CAC_ZERO_NOTE,
    calculate_comprehensive,
)
from cardio_risk.services.risk_models import (
    CACScoreInput,
    CardiovascularRiskFactors,
    LipidProfile,
    PatientDemographics,
)

DEMOGRAPHICS = PatientDemographics(age=55, sex=Sex.MALE)
LIPIDS = LipidProfile(total_cholesterol=213, hdl_cholesterol=50)
RISK_FACTORS = CardiovascularRiskFactors(systolic_bp=120)


class TestComprehensiveAssessment:
    """Orchestration over ASCVD and CAC."""

    def test_demographics_only(self) -> None:
        assessment = calculate_comprehensive(DEMOGRAPHICS)
        assert assessment.ascvd is None
        assert assessment.cac is None
        assert assessment.summary == []

    def test_lipids_without_risk_factors_skip_ascvd(self) -> None:
        assessment = calculate_comprehensive(DEMOGRAPHICS, lipids=LIPIDS)
        assert assessment.ascvd is None

    def test_ascvd_only(self) -> None:
        assessment = calculate_comprehensive(DEMOGRAPHICS, LIPIDS, RISK_FACTORS)

        assert assessment.ascvd is not None
        assert assessment.ascvd.risk_category == RiskCategory.BORDERLINE
        assert len(assessment.summary) == 1
        assert assessment.summary[0].startswith("10-year ASCVD risk:")

    def test_cac_only(self) -> None:
        assessment = calculate_comprehensive(DEMOGRAPHICS, cac=CACScoreInput(agatston_score=0))

        assert assessment.ascvd is None
        assert assessment.cac is not None
        assert assessment.summary == ["CAC score: 0 (No coronary calcification)"]

    def test_zero_cac_may_defer_statin(self) -> None:
        assessment = calculate_comprehensive(
            DEMOGRAPHICS, LIPIDS, RISK_FACTORS, CACScoreInput(agatston_score=0)
        )
        assert CAC_ZERO_NOTE in assessment.summary
        assert CAC_HIGH_NOTE not in assessment.summary

    def test_high_cac_reinforces_statin(self) -> None:
        assessment = calculate_comprehensive(
            DEMOGRAPHICS, LIPIDS, RISK_FACTORS, CACScoreInput(agatston_score=150)
        )
        assert CAC_HIGH_NOTE in assessment.summary
        assert len(assessment.summary) == 3

    def test_cac_between_0_and_100_has_no_cross_note(self) -> None:
        assessment = calculate_comprehensive(
            DEMOGRAPHICS, LIPIDS, RISK_FACTORS, CACScoreInput(agatston_score=40)
        )
        assert len(assessment.summary) == 2

    def test_split_inputs_reach_ascvd(self) -> None:
        """Risk factors and race from the split records drive the ASCVD result."""
        smoker = CardiovascularRiskFactors(systolic_bp=120, smoker=True, family_history_cvd=True)
        assessment = calculate_comprehensive(DEMOGRAPHICS, LIPIDS, smoker)
        baseline = calculate_comprehensive(DEMOGRAPHICS, LIPIDS, RISK_FACTORS)

        assert assessment.ascvd.ten_year_risk > baseline.ascvd.ten_year_risk
        assert assessment.ascvd.clinical_notes


class TestComprehensiveOutOfRange:
    """ASCVD not applicable for the patient's age."""

    def test_not_applicable_summary_line(self) -> None:
        young = PatientDemographics(age=32, sex=Sex.FEMALE)
        assessment = calculate_comprehensive(young, LIPIDS, RISK_FACTORS, CACScoreInput(agatston_score=0))

        assert assessment.ascvd is not None
        assert not assessment.ascvd.is_applicable
        assert assessment.summary[0] == ASCVD_NOT_APPLICABLE_NOTE
        assert CAC_ZERO_NOTE not in assessment.summary
        assert assessment.cac is not None
