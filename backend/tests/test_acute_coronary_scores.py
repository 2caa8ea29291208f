"""Tests for HEART, TIMI and GRACE scores."""

import pytest

from cardio_risk.schemas.base import RiskCategory
from cardio_risk.services.acute_coronary_scores import (
    GRACE_MORTALITY,
    HEART_HIGH_RISK_RECOMMENDATION,
    calculate_grace_score,
    calculate_heart_score,
    calculate_timi_score,
    grace_points,
)
from cardio_risk.services.risk_models import GRACEScoreInput, HEARTScoreInput, TIMIRiskInput


# ============================================================================
# HEART Score
# ============================================================================


class TestHEARTScore:
    """Test HEART score calculation."""

    def test_high_risk_scenario(self) -> None:
        """Components (2,1,2,1,1) sum to 7 -> high risk, urgent invasive strategy."""
        result = calculate_heart_score(
            HEARTScoreInput(history=2, ecg=1, age=2, risk_factors=1, troponin=1)
        )

        assert result.score == 7
        assert result.risk_category == RiskCategory.HIGH
        assert result.risk_percentage == 50.0
        assert HEART_HIGH_RISK_RECOMMENDATION in result.recommendations

    @pytest.mark.parametrize(
        ("parts", "category", "mace"),
        [
            ((0, 0, 0, 0, 0), RiskCategory.LOW, 1.7),
            ((1, 1, 1, 0, 0), RiskCategory.LOW, 1.7),
            ((1, 1, 1, 1, 0), RiskCategory.INTERMEDIATE, 16.6),
            ((2, 2, 1, 1, 0), RiskCategory.INTERMEDIATE, 16.6),
            ((2, 2, 2, 2, 2), RiskCategory.HIGH, 50.0),
        ],
    )
    def test_bands(self, parts: tuple[int, ...], category: RiskCategory, mace: float) -> None:
        """Test <=3 low, 4-6 intermediate, >=7 high."""
        history, ecg, age, risk_factors, troponin = parts
        result = calculate_heart_score(
            HEARTScoreInput(history=history, ecg=ecg, age=age, risk_factors=risk_factors, troponin=troponin)
        )
        assert result.score == sum(parts)
        assert result.risk_category == category
        assert result.risk_percentage == mace

    def test_sub_scores_are_clamped(self) -> None:
        """Test out-of-range sub-scores clamp to 0-2."""
        result = calculate_heart_score(
            HEARTScoreInput(history=5, ecg=-1, age=2, risk_factors=3, troponin=0)
        )
        assert result.components == {
            "History": 2,
            "ECG": 0,
            "Age": 2,
            "Risk factors": 2,
            "Troponin": 0,
        }
        assert result.score == 6

    def test_components_sum_to_score(self) -> None:
        result = calculate_heart_score(
            HEARTScoreInput(history=1, ecg=2, age=0, risk_factors=1, troponin=2)
        )
        assert sum(result.components.values()) == result.score

    def test_clinical_notes_breakdown(self) -> None:
        result = calculate_heart_score(
            HEARTScoreInput(history=2, ecg=1, age=2, risk_factors=1, troponin=1)
        )
        assert result.clinical_notes[0] == "H (History): 2"
        assert len(result.clinical_notes) == 5

    def test_low_band_has_no_urgent_recommendation(self) -> None:
        result = calculate_heart_score(
            HEARTScoreInput(history=0, ecg=0, age=1, risk_factors=1, troponin=0)
        )
        assert HEART_HIGH_RISK_RECOMMENDATION not in result.recommendations


# ============================================================================
# TIMI Score
# ============================================================================


class TestTIMIScore:
    """Test TIMI risk score for UA/NSTEMI."""

    def test_zero_criteria(self) -> None:
        result = calculate_timi_score(TIMIRiskInput())
        assert result.score == 0
        assert result.risk_percentage == 4.7
        assert result.risk_category == RiskCategory.LOW
        assert result.clinical_notes == []

    def test_intermediate(self) -> None:
        result = calculate_timi_score(
            TIMIRiskInput(
                age_65_or_older=True,
                at_least_3_cad_risk_factors=True,
                st_deviation_05mm=True,
            )
        )
        assert result.score == 3
        assert result.risk_percentage == 13.2
        assert result.risk_category == RiskCategory.INTERMEDIATE
        assert "Early invasive strategy to be considered" in result.recommendations

    def test_high(self) -> None:
        result = calculate_timi_score(
            TIMIRiskInput(
                age_65_or_older=True,
                at_least_3_cad_risk_factors=True,
                known_cad_50_stenosis=True,
                aspirin_use_last_7_days=True,
                severe_angina_last_24h=True,
            )
        )
        assert result.score == 5
        assert result.risk_percentage == 26.2
        assert result.risk_category == RiskCategory.HIGH
        assert "Urgent invasive strategy recommended" in result.recommendations

    def test_all_criteria(self) -> None:
        result = calculate_timi_score(
            TIMIRiskInput(
                age_65_or_older=True,
                at_least_3_cad_risk_factors=True,
                known_cad_50_stenosis=True,
                aspirin_use_last_7_days=True,
                severe_angina_last_24h=True,
                st_deviation_05mm=True,
                elevated_cardiac_markers=True,
            )
        )
        assert result.score == 7
        assert result.risk_percentage == 40.9
        assert len(result.clinical_notes) == 7
        assert sum(result.components.values()) == 7

    def test_score_is_literal_sum(self) -> None:
        result = calculate_timi_score(
            TIMIRiskInput(aspirin_use_last_7_days=True, elevated_cardiac_markers=True)
        )
        assert result.score == 2
        assert result.components == {"Aspirin use in last 7 days": 1, "Elevated cardiac markers": 1}


# ============================================================================
# GRACE Score
# ============================================================================


class TestGRACEScore:
    """Test GRACE score for ACS in-hospital mortality."""

    def test_low_risk(self) -> None:
        result = calculate_grace_score(
            GRACEScoreInput(age=62, heart_rate=88, systolic_bp=148, creatinine=1.1)
        )
        assert result.components["Age"] == 58
        assert result.components["Heart rate"] == 9
        assert result.components["Systolic BP"] == 24
        assert result.components["Creatinine"] == 7
        assert result.score == 98
        assert result.risk_category == RiskCategory.LOW
        assert result.risk_percentage == 1.0

    def test_intermediate_risk(self) -> None:
        result = calculate_grace_score(
            GRACEScoreInput(
                age=72,
                heart_rate=95,
                systolic_bp=130,
                creatinine=1.0,
            )
        )
        assert result.score == 131
        assert result.risk_category == RiskCategory.INTERMEDIATE
        assert result.risk_percentage == 5.0
        assert "Invasive strategy within 72h" in result.recommendations

    def test_high_risk(self) -> None:
        result = calculate_grace_score(
            GRACEScoreInput(
                age=85,
                heart_rate=120,
                systolic_bp=90,
                creatinine=2.5,
                killip_class=3,
                cardiac_arrest=True,
                st_deviation=True,
                elevated_cardiac_markers=True,
            )
        )
        assert result.score == 309
        assert result.risk_category == RiskCategory.HIGH
        assert result.risk_percentage == 50.0
        assert "Urgent invasive strategy (<24h)" in result.recommendations

    def test_components_sum_to_score(self) -> None:
        data = GRACEScoreInput(
            age=67, heart_rate=104, systolic_bp=112, creatinine=1.7, killip_class=2, st_deviation=True
        )
        result = calculate_grace_score(data)
        assert sum(grace_points(data).values()) == result.score

    def test_lower_blood_pressure_scores_higher(self) -> None:
        low_bp = grace_points(GRACEScoreInput(age=60, heart_rate=80, systolic_bp=85, creatinine=1.0))
        high_bp = grace_points(GRACEScoreInput(age=60, heart_rate=80, systolic_bp=185, creatinine=1.0))
        assert low_bp["Systolic BP"] > high_bp["Systolic BP"]

    @pytest.mark.parametrize(("killip", "expected"), [(0, 0), (1, 0), (2, 20), (3, 39), (4, 59), (7, 59)])
    def test_killip_class_clamped(self, killip: int, expected: int) -> None:
        points = grace_points(
            GRACEScoreInput(age=60, heart_rate=80, systolic_bp=130, creatinine=1.0, killip_class=killip)
        )
        assert points["Killip class"] == expected

    @pytest.mark.parametrize(
        ("score", "mortality"),
        [(60, 1), (108, 1), (109, 2), (118, 2), (127, 3), (140, 5), (141, 8), (196, 30), (197, 50)],
    )
    def test_mortality_table(self, score: int, mortality: int) -> None:
        """Test mortality thresholds are inclusive upper bounds."""
        assert GRACE_MORTALITY.lookup(score) == mortality

    def test_breakdown_notes(self) -> None:
        result = calculate_grace_score(
            GRACEScoreInput(age=62, heart_rate=88, systolic_bp=148, creatinine=1.1, cardiac_arrest=True)
        )
        assert result.clinical_notes[0] == "Killip class: 1"
        assert "Cardiac arrest: +39" in result.clinical_notes
