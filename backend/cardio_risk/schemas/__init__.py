"""Pydantic schemas for the cardiovascular risk service."""

from cardio_risk.schemas.base import Race, RiskCategory, ScoreType, Sex
from cardio_risk.schemas.risk_score import (
    CalculatorInfo,
    CalculatorListResponse,
    ComprehensiveRiskRequest,
    ComprehensiveRiskResponse,
    RiskScoreCalculateRequest,
    RiskScoreHistoryResponse,
    RiskScoreResultResponse,
    RiskScoreSaveRequest,
    RiskScoreSaveResponse,
    StoredRiskScoreResponse,
)

__all__ = [
    # Enums
    "Sex",
    "Race",
    "RiskCategory",
    "ScoreType",
    # Calculation
    "RiskScoreCalculateRequest",
    "RiskScoreSaveRequest",
    "RiskScoreResultResponse",
    "RiskScoreSaveResponse",
    "CalculatorInfo",
    "CalculatorListResponse",
    # History
    "StoredRiskScoreResponse",
    "RiskScoreHistoryResponse",
    # Comprehensive
    "ComprehensiveRiskRequest",
    "ComprehensiveRiskResponse",
]
