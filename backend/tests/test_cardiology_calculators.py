"""Tests for the cardiology calculator registry service."""

import pytest

from cardio_risk.schemas.base import RiskCategory, ScoreType
from cardio_risk.services.cardiology_calculators import (
    CardiologyRiskService,
    ScoreCalculation,
    get_cardiology_risk_service,
    reset_cardiology_risk_service,
)
from cardio_risk.services.risk_models import (
    ASCVDResult,
    CACScoreInput,
    CardiovascularRiskFactors,
    FraminghamResult,
    LipidProfile,
    PatientDemographics,
)
from cardio_risk.services.score_store import InMemoryScoreStore, ScoreStoreError

PATIENT = {
    "age": 55,
    "sex": "male",
    "race": "white",
    "total_cholesterol": 213,
    "hdl_cholesterol": 50,
    "systolic_bp": 120,
}

HEART_PARAMS = {"history": 2, "ecg": 1, "age": 2, "risk_factors": 1, "troponin": 1}


class CommitFailingStore(InMemoryScoreStore):
    """Store that accepts saves but cannot commit them."""

    def commit(self) -> None:
        raise ScoreStoreError("Failed to commit risk score: connection lost")


@pytest.fixture
def service() -> CardiologyRiskService:
    """Create a calculator service."""
    return CardiologyRiskService()


# ============================================================================
# Singleton
# ============================================================================


class TestSingleton:
    """Tests for the module-level service instance."""

    def test_same_instance(self) -> None:
        assert get_cardiology_risk_service() is get_cardiology_risk_service()

    def test_reset_creates_new_instance(self) -> None:
        first = get_cardiology_risk_service()
        reset_cardiology_risk_service()
        assert get_cardiology_risk_service() is not first


# ============================================================================
# Registry
# ============================================================================


class TestRegistry:
    """Calculator lookup."""

    def test_all_calculators_available(self, service: CardiologyRiskService) -> None:
        available = service.get_available_calculators()
        assert set(available) == {score_type.value for score_type in ScoreType}
        assert all(description for description in available.values())

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("heart", ScoreType.HEART),
            ("HEART", ScoreType.HEART),
            ("CHA2DS2-VASc", ScoreType.CHA2DS2_VASC),
            ("has-bled", ScoreType.HAS_BLED),
            (" grace ", ScoreType.GRACE),
            (ScoreType.TIMI, ScoreType.TIMI),
        ],
    )
    def test_resolve_score_type(self, name, expected: ScoreType) -> None:
        assert CardiologyRiskService.resolve_score_type(name) == expected

    def test_unknown_calculator(self, service: CardiologyRiskService) -> None:
        with pytest.raises(ValueError, match="Unknown calculator: qrisk3"):
            service.calculate("qrisk3")

    def test_stats(self, service: CardiologyRiskService) -> None:
        service.calculate("timi")
        service.calculate("has_bled", elderly=True)
        stats = service.get_stats()
        assert stats["total_calculators"] == 8
        assert "grace" in stats["calculator_list"]
        assert stats["calculations_performed"] == 2

    def test_failed_calculation_not_counted(self, service: CardiologyRiskService) -> None:
        with pytest.raises(ValueError):
            service.calculate("heart", history=2)
        assert service.get_stats()["calculations_performed"] == 0


# ============================================================================
# Dispatch
# ============================================================================


class TestCalculate:
    """Dispatch to each calculator with keyword parameters."""

    def test_framingham(self, service: CardiologyRiskService) -> None:
        result = service.calculate("framingham", **PATIENT)
        assert isinstance(result, FraminghamResult)
        assert result.heart_age >= 55

    def test_ascvd(self, service: CardiologyRiskService) -> None:
        result = service.calculate("ascvd", **PATIENT)
        assert isinstance(result, ASCVDResult)
        assert result.ten_year_risk == pytest.approx(5.4, abs=0.1)
        assert result.risk_category == RiskCategory.BORDERLINE

    def test_cac(self, service: CardiologyRiskService) -> None:
        result = service.calculate("cac", agatston_score=0, age=55, sex="male")
        assert result.risk_category == RiskCategory.VERY_LOW
        assert result.risk_percentage == pytest.approx(1.1)

    def test_heart(self, service: CardiologyRiskService) -> None:
        result = service.calculate("heart", **HEART_PARAMS)
        assert result.score == 7
        assert result.risk_category == RiskCategory.HIGH

    def test_cha2ds2_vasc(self, service: CardiologyRiskService) -> None:
        result = service.calculate(
            "CHA2DS2-VASc", age=70, sex="female", hypertension=True, diabetes=True
        )
        assert result.score == 4
        assert result.risk_category == RiskCategory.HIGH
        assert result.risk_percentage == pytest.approx(4.0)

    def test_has_bled(self, service: CardiologyRiskService) -> None:
        result = service.calculate("has_bled")
        assert result.score == 0
        assert result.risk_category == RiskCategory.LOW

    def test_timi(self, service: CardiologyRiskService) -> None:
        result = service.calculate("timi")
        assert result.score == 0
        assert result.risk_percentage == pytest.approx(4.7)

    def test_grace(self, service: CardiologyRiskService) -> None:
        result = service.calculate("grace", age=62, heart_rate=88, systolic_bp=148, creatinine=1.1)
        assert result.score == 98
        assert result.risk_category == RiskCategory.LOW

    def test_unknown_parameter(self, service: CardiologyRiskService) -> None:
        with pytest.raises(ValueError, match="Invalid parameters for heart"):
            service.calculate("heart", bogus=1, **HEART_PARAMS)

    def test_missing_parameter(self, service: CardiologyRiskService) -> None:
        with pytest.raises(ValueError, match="Invalid parameters for grace"):
            service.calculate("grace", age=62)

    def test_invalid_value(self, service: CardiologyRiskService) -> None:
        with pytest.raises(ValueError, match="hdl_cholesterol"):
            service.calculate("framingham", **{**PATIENT, "hdl_cholesterol": 0})

    @pytest.mark.parametrize("killip_class", [2.5, "II", True])
    def test_non_integer_killip_class(self, service: CardiologyRiskService, killip_class) -> None:
        with pytest.raises(ValueError, match="killip_class"):
            service.calculate(
                "grace", age=62, heart_rate=88, systolic_bp=148, creatinine=1.1, killip_class=killip_class
            )

    def test_whole_number_killip_class_accepted(self, service: CardiologyRiskService) -> None:
        result = service.calculate(
            "grace", age=62, heart_rate=88, systolic_bp=148, creatinine=1.1, killip_class=2.0
        )
        assert result.clinical_notes[0] == "Killip class: 2"

    def test_invalid_sex(self, service: CardiologyRiskService) -> None:
        with pytest.raises(ValueError):
            service.calculate("cha2ds2_vasc", age=70, sex="unknown")

    def test_comprehensive(self, service: CardiologyRiskService) -> None:
        assessment = service.calculate_comprehensive(
            PatientDemographics(age=55, sex="male"),
            LipidProfile(total_cholesterol=213, hdl_cholesterol=50),
            CardiovascularRiskFactors(systolic_bp=120),
            CACScoreInput(agatston_score=0),
        )
        assert assessment.ascvd is not None
        assert assessment.cac is not None
        assert len(assessment.summary) == 3


# ============================================================================
# Calculate and store
# ============================================================================


class TestCalculateAndStore:
    """Calculation plus persistence."""

    def test_success(self, service: CardiologyRiskService, memory_store: InMemoryScoreStore) -> None:
        calculation = service.calculate_and_store(
            memory_store, "heart", "P001", "ORG1", "dr.a", **HEART_PARAMS
        )

        assert isinstance(calculation, ScoreCalculation)
        assert calculation.persisted
        assert calculation.persistence_error is None
        assert calculation.score_type == ScoreType.HEART

        [stored] = memory_store.get_history("P001", "ORG1")
        assert stored.id == calculation.measurement_id
        assert stored.score_value == 7

    def test_store_failure_keeps_result(self, service: CardiologyRiskService, failing_store) -> None:
        calculation = service.calculate_and_store(
            failing_store, "heart", "P001", "ORG1", "dr.a", **HEART_PARAMS
        )

        assert not calculation.persisted
        assert calculation.measurement_id is None
        assert calculation.persistence_error == "database unavailable"
        assert calculation.result.score == 7

    def test_store_failure_is_audited(self, service: CardiologyRiskService, failing_store, caplog) -> None:
        with caplog.at_level("WARNING", logger="audit"):
            service.calculate_and_store(failing_store, "timi", "P001", "ORG1", "dr.a")
        assert any("AUDIT: error risk_score" in record.message for record in caplog.records)

    def test_invalid_parameters_store_nothing(
        self, service: CardiologyRiskService, memory_store: InMemoryScoreStore
    ) -> None:
        with pytest.raises(ValueError):
            service.calculate_and_store(memory_store, "grace", "P001", "ORG1", "dr.a", age=62)
        assert len(memory_store) == 0

    def test_commit_failure_keeps_result(self, service: CardiologyRiskService) -> None:
        """A save that cannot be committed is not reported as persisted."""
        store = CommitFailingStore()
        calculation = service.calculate_and_store(store, "heart", "P001", "ORG1", "dr.a", **HEART_PARAMS)

        assert not calculation.persisted
        assert calculation.measurement_id is None
        assert "commit" in calculation.persistence_error
        assert calculation.result.score == 7


# ============================================================================
# Category ordering
# ============================================================================


def _cumulative(flags: list[str], **fixed) -> list[dict]:
    """Parameter sets that switch on one more flag each step."""
    return [{**fixed, **{flag: True for flag in flags[:n]}} for n in range(len(flags) + 1)]


def _heart_params(total: int) -> dict:
    return {
        "history": min(2, total),
        "ecg": min(2, max(0, total - 2)),
        "age": min(2, max(0, total - 4)),
        "risk_factors": min(2, max(0, total - 6)),
        "troponin": min(2, max(0, total - 8)),
    }


RISING_INPUTS = {
    "heart": [_heart_params(total) for total in range(11)],
    "cha2ds2_vasc": _cumulative(
        ["hypertension", "diabetes", "congestive_heart_failure", "vascular_disease", "stroke_tia_history"],
        age=50,
        sex="male",
    ),
    "has_bled": _cumulative(
        [
            "hypertension",
            "renal_disease",
            "liver_disease",
            "stroke_history",
            "bleeding_history",
            "labile_inr",
            "elderly",
            "drugs_alcohol",
        ]
    ),
    "timi": _cumulative(
        [
            "age_65_or_older",
            "at_least_3_cad_risk_factors",
            "known_cad_50_stenosis",
            "aspirin_use_last_7_days",
            "severe_angina_last_24h",
            "st_deviation_05mm",
            "elevated_cardiac_markers",
        ]
    ),
    "grace": [
        {"age": age, "heart_rate": 95, "systolic_bp": 110, "creatinine": 1.5, "killip_class": 2}
        for age in range(30, 100, 10)
    ],
    "cac": [
        {"agatston_score": score, "age": 60, "sex": "male"} for score in (0, 5, 10, 50, 100, 250, 400, 800, 1500)
    ],
}


class TestCategoryOrdering:
    """Categories follow RiskCategory.rank as scores rise."""

    @pytest.mark.parametrize("score_type", sorted(RISING_INPUTS))
    def test_rank_never_decreases(self, service: CardiologyRiskService, score_type: str) -> None:
        results = [service.calculate(score_type, **params) for params in RISING_INPUTS[score_type]]

        scores = [result.score for result in results]
        assert scores == sorted(scores)
        ranks = [result.risk_category.rank for result in results]
        assert ranks == sorted(ranks)
        assert ranks[-1] > ranks[0]

    def test_rank_order(self) -> None:
        ordered = [
            RiskCategory.VERY_LOW,
            RiskCategory.LOW,
            RiskCategory.BORDERLINE,
            RiskCategory.INTERMEDIATE,
            RiskCategory.HIGH,
            RiskCategory.VERY_HIGH,
        ]
        assert [category.rank for category in ordered] == sorted({category.rank for category in ordered})
        assert RiskCategory.MODERATE.rank == RiskCategory.INTERMEDIATE.rank
