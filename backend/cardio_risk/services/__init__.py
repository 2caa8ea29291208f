"""Services for the cardiovascular risk scoring engine.

Services implement the calculators and their persistence:
- Framingham / ASCVD: 10-year cardiovascular risk
- CAC interpreter: Agatston score bands and percentile estimate
- Acute coronary scores: HEART, TIMI, GRACE
- Atrial fibrillation scores: CHA₂DS₂-VASc, HAS-BLED
- Risk composer: combined ASCVD + CAC assessment
- ScoreStore: persistence port with in-memory and database adapters
- CardiologyRiskService: calculator registry
"""

from cardio_risk.services.acute_coronary_scores import (
    calculate_grace_score,
    calculate_heart_score,
    calculate_timi_score,
)
from cardio_risk.services.ascvd import calculate_ascvd
from cardio_risk.services.atrial_fibrillation_scores import calculate_cha2ds2_vasc, calculate_has_bled
from cardio_risk.services.cac_interpreter import expected_cac_percentile, interpret_cac_score
from cardio_risk.services.cardiology_calculators import (
    CardiologyRiskService,
    ScoreCalculation,
    get_cardiology_risk_service,
    reset_cardiology_risk_service,
)
from cardio_risk.services.framingham import calculate_framingham
from cardio_risk.services.risk_composer import calculate_comprehensive
from cardio_risk.services.risk_models import (
    ASCVDResult,
    CACScoreInput,
    CardiovascularRiskFactors,
    CHADSVASCInput,
    ComprehensiveRiskAssessment,
    FraminghamResult,
    GRACEScoreInput,
    HASBLEDInput,
    HEARTScoreInput,
    LipidProfile,
    PatientDemographics,
    PatientRiskData,
    RiskScoreResult,
    TIMIRiskInput,
)
from cardio_risk.services.score_store import (
    InMemoryScoreStore,
    ScoreStore,
    ScoreStoreError,
    StoredRiskScore,
)
from cardio_risk.services.score_store_db import DatabaseScoreStore

__all__ = [
    # Input records
    "PatientRiskData",
    "PatientDemographics",
    "LipidProfile",
    "CardiovascularRiskFactors",
    "CACScoreInput",
    "HEARTScoreInput",
    "CHADSVASCInput",
    "HASBLEDInput",
    "TIMIRiskInput",
    "GRACEScoreInput",
    # Results
    "RiskScoreResult",
    "FraminghamResult",
    "ASCVDResult",
    "ComprehensiveRiskAssessment",
    # Calculators
    "calculate_framingham",
    "calculate_ascvd",
    "interpret_cac_score",
    "expected_cac_percentile",
    "calculate_heart_score",
    "calculate_cha2ds2_vasc",
    "calculate_has_bled",
    "calculate_timi_score",
    "calculate_grace_score",
    "calculate_comprehensive",
    # Registry
    "CardiologyRiskService",
    "ScoreCalculation",
    "get_cardiology_risk_service",
    "reset_cardiology_risk_service",
    # Persistence
    "ScoreStore",
    "ScoreStoreError",
    "StoredRiskScore",
    "InMemoryScoreStore",
    "DatabaseScoreStore",
]
