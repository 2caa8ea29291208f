"""Request/response schemas for the cardiology risk score API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cardio_risk.schemas.base import Race, RiskCategory, ScoreType, Sex


# ==============================================================================
# Calculation
# ==============================================================================


class RiskScoreCalculateRequest(BaseModel):
    """Request body for a single calculator run."""

    score_type: str = Field(
        ...,
        description="Calculator name: framingham, ascvd, cac, heart, cha2ds2_vasc, has_bled, timi, grace",
    )
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Calculator-specific parameters",
    )


class RiskScoreSaveRequest(RiskScoreCalculateRequest):
    """Request body for calculate-and-store."""

    patient_id: str = Field(..., min_length=1, description="Patient identifier")
    organization_id: str = Field(..., min_length=1, description="Owning organization")
    calculated_by: str = Field(..., min_length=1, description="User or system requesting the score")


class RiskScoreResultResponse(BaseModel):
    """A calculated risk score."""

    model_config = ConfigDict(from_attributes=True)

    score_name: str = Field(..., description="Full name of the score")
    score: float = Field(..., description="Calculated score (-1 when not applicable)")
    risk_percentage: float = Field(..., description="Associated risk percentage (0-100)")
    risk_category: RiskCategory = Field(..., description="Risk stratification category")
    interpretation: str = Field(..., description="One-line clinical interpretation")
    recommendations: list[str] = Field(default_factory=list)
    clinical_notes: list[str] = Field(default_factory=list)
    components: dict[str, int] = Field(default_factory=dict, description="Points per criterion")
    calculated_at: datetime
    ten_year_risk: float | None = Field(None, description="Framingham/ASCVD 10-year risk %")
    heart_age: int | None = Field(None, description="Framingham estimated heart age")
    lifetime_risk: float | None = Field(None, description="ASCVD lifetime risk %")
    optimal_risk: float | None = Field(None, description="ASCVD risk with optimal risk factors %")


class RiskScoreSaveResponse(BaseModel):
    """Result of calculate-and-store."""

    score_type: ScoreType
    result: RiskScoreResultResponse
    persisted: bool = Field(..., description="Whether the score was saved")
    measurement_id: str | None = Field(None, description="ID of the stored measurement")
    persistence_error: str | None = Field(None, description="Storage error if not saved")


class CalculatorInfo(BaseModel):
    """One available calculator."""

    name: str
    description: str


class CalculatorListResponse(BaseModel):
    """Response listing available calculators."""

    calculators: list[CalculatorInfo] = Field(..., description="Available calculators")
    total_count: int = Field(..., description="Total number of calculators")


# ==============================================================================
# History
# ==============================================================================


class StoredRiskScoreResponse(BaseModel):
    """A stored risk score measurement."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    patient_id: str
    organization_id: str
    score_type: ScoreType
    score_value: float
    risk_percentage: float
    risk_category: RiskCategory
    interpretation: str
    recommendations: list[str] = Field(default_factory=list)
    calculated_by: str
    calculated_at: datetime


class RiskScoreHistoryResponse(BaseModel):
    """Stored scores for a patient, most recent first."""

    patient_id: str
    organization_id: str
    scores: list[StoredRiskScoreResponse]
    total: int


# ==============================================================================
# Comprehensive Assessment
# ==============================================================================


class DemographicsInput(BaseModel):
    age: int = Field(..., ge=0, le=120)
    sex: Sex
    race: Race | None = None


class LipidInput(BaseModel):
    total_cholesterol: float = Field(..., gt=0, description="mg/dL")
    hdl_cholesterol: float = Field(..., gt=0, description="mg/dL")
    ldl_cholesterol: float | None = Field(None, gt=0, description="mg/dL")
    triglycerides: float | None = Field(None, gt=0, description="mg/dL")


class RiskFactorInput(BaseModel):
    systolic_bp: float = Field(..., gt=0, description="mmHg")
    on_bp_medication: bool = False
    diabetic: bool = False
    smoker: bool = False
    diastolic_bp: float | None = Field(None, gt=0, description="mmHg")
    family_history_cvd: bool | None = None
    chronic_kidney_disease: bool | None = None


class CACInput(BaseModel):
    agatston_score: float = Field(..., ge=0)
    volume_score: float | None = None
    mass_score: float | None = None
    percentile: float | None = Field(None, ge=0, le=100)


class ComprehensiveRiskRequest(BaseModel):
    """Demographics plus whatever optional data is available."""

    demographics: DemographicsInput
    lipids: LipidInput | None = None
    risk_factors: RiskFactorInput | None = None
    cac: CACInput | None = None


class ComprehensiveRiskResponse(BaseModel):
    """Combined ASCVD + CAC assessment."""

    ascvd: RiskScoreResultResponse | None = None
    cac: RiskScoreResultResponse | None = None
    summary: list[str] = Field(default_factory=list)
