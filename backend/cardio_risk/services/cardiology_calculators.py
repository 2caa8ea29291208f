"""Cardiology Risk Calculator Service.

Registry over the cardiovascular risk calculators, keyed by ScoreType,
plus a helper that calculates and persists in one call.
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable

from cardio_risk.core.audit import log_score_saved
from cardio_risk.schemas.base import ScoreType
from cardio_risk.services.acute_coronary_scores import (
    calculate_grace_score,
    calculate_heart_score,
    calculate_timi_score,
)
from cardio_risk.services.ascvd import calculate_ascvd
from cardio_risk.services.atrial_fibrillation_scores import calculate_cha2ds2_vasc, calculate_has_bled
from cardio_risk.services.cac_interpreter import interpret_cac_score
from cardio_risk.services.framingham import calculate_framingham
from cardio_risk.services.risk_composer import calculate_comprehensive
from cardio_risk.services.risk_models import (
    CACScoreInput,
    CardiovascularRiskFactors,
    CHADSVASCInput,
    ComprehensiveRiskAssessment,
    GRACEScoreInput,
    HASBLEDInput,
    HEARTScoreInput,
    LipidProfile,
    PatientDemographics,
    PatientRiskData,
    RiskScoreResult,
    TIMIRiskInput,
)
from cardio_risk.services.score_store import ScoreStore, ScoreStoreError

logger = logging.getLogger(__name__)


def _calculate_cac(
    agatston_score: float,
    age: int,
    sex: str,
    race: str | None = None,
    volume_score: float | None = None,
    mass_score: float | None = None,
    percentile: float | None = None,
) -> RiskScoreResult:
    return interpret_cac_score(
        CACScoreInput(
            agatston_score=agatston_score,
            volume_score=volume_score,
            mass_score=mass_score,
            percentile=percentile,
        ),
        PatientDemographics(age=age, sex=sex, race=race),
    )


@dataclass
class ScoreCalculation:
    """A calculated score and the outcome of persisting it.

    The result is always present; persistence_error is set when the
    store rejected the save.
    """

    score_type: ScoreType
    result: RiskScoreResult
    measurement_id: str | None = None
    persistence_error: str | None = None

    @property
    def persisted(self) -> bool:
        return self.measurement_id is not None


class CardiologyRiskService:
    """Service for cardiovascular risk calculations.

    Provides access to:
    - Framingham 10-year CVD risk
    - ASCVD Pooled Cohort Equations
    - CAC (Agatston) interpretation
    - HEART score (chest pain)
    - CHA₂DS₂-VASc (stroke risk in AF)
    - HAS-BLED (bleeding risk)
    - TIMI (UA/NSTEMI)
    - GRACE (ACS in-hospital mortality)

    Usage:
        service = CardiologyRiskService()

        result = service.calculate("heart", history=2, ecg=1, age=2, risk_factors=1, troponin=1)

        result = service.calculate("cha2ds2_vasc",
            age=70, sex="female", hypertension=True, diabetes=True)
    """

    CALCULATORS: dict[ScoreType, tuple[Callable[..., RiskScoreResult], Callable[..., Any] | None]] = {
        ScoreType.FRAMINGHAM: (calculate_framingham, PatientRiskData),
        ScoreType.ASCVD: (calculate_ascvd, PatientRiskData),
        ScoreType.CAC: (_calculate_cac, None),
        ScoreType.HEART: (calculate_heart_score, HEARTScoreInput),
        ScoreType.CHA2DS2_VASC: (calculate_cha2ds2_vasc, CHADSVASCInput),
        ScoreType.HAS_BLED: (calculate_has_bled, HASBLEDInput),
        ScoreType.TIMI: (calculate_timi_score, TIMIRiskInput),
        ScoreType.GRACE: (calculate_grace_score, GRACEScoreInput),
    }

    DESCRIPTIONS = {
        ScoreType.FRAMINGHAM: "Framingham 10-Year CVD Risk",
        ScoreType.ASCVD: "ASCVD 10-Year Risk (Pooled Cohort Equations)",
        ScoreType.CAC: "Coronary Artery Calcium (Agatston) Interpretation",
        ScoreType.HEART: "HEART Score (chest pain MACE risk)",
        ScoreType.CHA2DS2_VASC: "CHA₂DS₂-VASc Score (AF stroke risk)",
        ScoreType.HAS_BLED: "HAS-BLED Score (bleeding risk)",
        ScoreType.TIMI: "TIMI Risk Score (UA/NSTEMI)",
        ScoreType.GRACE: "GRACE Score (ACS in-hospital mortality)",
    }

    def __init__(self) -> None:
        """Initialize the calculator service."""
        self._calculation_count = 0
        self._count_lock = Lock()

    def get_available_calculators(self) -> dict[str, str]:
        """Get list of available calculators with descriptions.

        Returns:
            Dict of calculator name to description.
        """
        return {score_type.value: description for score_type, description in self.DESCRIPTIONS.items()}

    @staticmethod
    def resolve_score_type(score_type: ScoreType | str) -> ScoreType:
        """Normalize a calculator name ("CHA2DS2-VASc" -> ScoreType.CHA2DS2_VASC).

        Raises:
            ValueError: If no calculator has that name.
        """
        if isinstance(score_type, ScoreType):
            return score_type
        name = score_type.strip().lower().replace("-", "_")
        try:
            return ScoreType(name)
        except ValueError:
            available = ", ".join(t.value for t in ScoreType)
            raise ValueError(f"Unknown calculator: {score_type}. Available: {available}")

    def calculate(self, score_type: ScoreType | str, **parameters: Any) -> RiskScoreResult:
        """Run a risk calculator.

        Args:
            score_type: Name of calculator to run.
            **parameters: Fields of the calculator's input record.

        Returns:
            RiskScoreResult (or FraminghamResult / ASCVDResult).

        Raises:
            ValueError: If calculator not found or parameters invalid.
        """
        resolved = self.resolve_score_type(score_type)
        calc_func, input_type = self.CALCULATORS[resolved]

        try:
            if input_type is None:
                result = calc_func(**parameters)
            else:
                result = calc_func(input_type(**parameters))
        except TypeError as e:
            raise ValueError(f"Invalid parameters for {resolved.value}: {e}")

        with self._count_lock:
            self._calculation_count += 1
        return result

    def calculate_comprehensive(
        self,
        demographics: PatientDemographics,
        lipids: LipidProfile | None = None,
        risk_factors: CardiovascularRiskFactors | None = None,
        cac: CACScoreInput | None = None,
    ) -> ComprehensiveRiskAssessment:
        """Combined ASCVD + CAC assessment for whatever data is available."""
        return calculate_comprehensive(demographics, lipids, risk_factors, cac)

    def calculate_and_store(
        self,
        store: ScoreStore,
        score_type: ScoreType | str,
        patient_id: str,
        organization_id: str,
        calculated_by: str,
        **parameters: Any,
    ) -> ScoreCalculation:
        """Calculate a score and persist it.

        The score counts as persisted only after the store has committed
        it. A failed save or commit does not discard the result: it is
        reported in ``persistence_error`` and ``measurement_id`` stays None.

        Raises:
            ValueError: If calculator not found or parameters invalid.
        """
        resolved = self.resolve_score_type(score_type)
        result = self.calculate(resolved, **parameters)
        calculation = ScoreCalculation(score_type=resolved, result=result)

        try:
            measurement_id = store.save_score(
                patient_id=patient_id,
                organization_id=organization_id,
                score_type=resolved,
                result=result,
                calculated_by=calculated_by,
            )
            store.commit()
            calculation.measurement_id = measurement_id
        except ScoreStoreError as e:
            logger.warning(f"Risk score for patient {patient_id} calculated but not saved: {e}")
            calculation.persistence_error = str(e)

        log_score_saved(
            measurement_id=calculation.measurement_id,
            patient_id=patient_id,
            organization_id=organization_id,
            score_type=resolved.value,
            calculated_by=calculated_by,
            success=calculation.persisted,
        )
        return calculation

    def get_stats(self) -> dict[str, Any]:
        """Get statistics about available calculators.

        Returns:
            Dictionary with calculator statistics.
        """
        return {
            "total_calculators": len(self.CALCULATORS),
            "calculator_list": [score_type.value for score_type in self.CALCULATORS],
            "calculations_performed": self._calculation_count,
        }


# Singleton instance and lock
_cardiology_risk_service: CardiologyRiskService | None = None
_cardiology_risk_lock = Lock()


def get_cardiology_risk_service() -> CardiologyRiskService:
    """Get the singleton CardiologyRiskService instance.

    Returns:
        The singleton CardiologyRiskService instance.
    """
    global _cardiology_risk_service

    if _cardiology_risk_service is None:
        with _cardiology_risk_lock:
            if _cardiology_risk_service is None:
                logger.info("Creating singleton CardiologyRiskService instance")
                _cardiology_risk_service = CardiologyRiskService()

    return _cardiology_risk_service


def reset_cardiology_risk_service() -> None:
    """Reset the singleton instance (for testing)."""
    global _cardiology_risk_service
    with _cardiology_risk_lock:
        _cardiology_risk_service = None
