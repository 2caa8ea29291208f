"""Cardiology risk score API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from cardio_risk.core.audit import log_data_access
from cardio_risk.core.config import settings
from cardio_risk.core.database import get_db
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
from cardio_risk.services.cardiology_calculators import get_cardiology_risk_service
from cardio_risk.services.risk_models import (
    CACScoreInput,
    CardiovascularRiskFactors,
    LipidProfile,
    PatientDemographics,
    RiskScoreResult,
)
from cardio_risk.services.score_store import ScoreStore, ScoreStoreError
from cardio_risk.services.score_store_db import DatabaseScoreStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cardiology", tags=["Cardiology"])


def get_score_store(db: Annotated[Session, Depends(get_db)]) -> ScoreStore:
    """Dependency providing a database-backed store bound to the request session."""
    return DatabaseScoreStore(db)


def _to_response(result: RiskScoreResult) -> RiskScoreResultResponse:
    return RiskScoreResultResponse.model_validate(result.to_dict())


@router.get(
    "/risk-scores/calculators",
    response_model=CalculatorListResponse,
    summary="List available risk calculators",
)
async def list_calculators() -> CalculatorListResponse:
    """List every cardiovascular risk calculator with a short description."""
    available = get_cardiology_risk_service().get_available_calculators()
    return CalculatorListResponse(
        calculators=[CalculatorInfo(name=name, description=desc) for name, desc in available.items()],
        total_count=len(available),
    )


@router.post(
    "/risk-scores/calculate",
    response_model=RiskScoreResultResponse,
    summary="Run a risk calculator",
    description="Calculate a cardiovascular risk score without storing it.",
)
async def calculate_risk_score(request: RiskScoreCalculateRequest) -> RiskScoreResultResponse:
    """Run a cardiovascular risk calculator.

    Raises:
        HTTPException: 400 if calculator unknown or parameters invalid.
    """
    service = get_cardiology_risk_service()
    try:
        result = service.calculate(request.score_type, **request.parameters)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return _to_response(result)


@router.post(
    "/risk-scores",
    response_model=RiskScoreSaveResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Calculate and store a risk score",
    description=(
        "Calculate a score and save it to the patient's history. If the save fails "
        "the result is still returned with status 200 and persisted=false."
    ),
)
def save_risk_score(
    request: RiskScoreSaveRequest,
    response: Response,
    store: Annotated[ScoreStore, Depends(get_score_store)],
) -> RiskScoreSaveResponse:
    """Calculate a risk score and persist it.

    Raises:
        HTTPException: 400 if calculator unknown or parameters invalid.
    """
    service = get_cardiology_risk_service()
    try:
        calculation = service.calculate_and_store(
            store,
            request.score_type,
            patient_id=request.patient_id,
            organization_id=request.organization_id,
            calculated_by=request.calculated_by,
            **request.parameters,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not calculation.persisted:
        response.status_code = status.HTTP_200_OK

    logger.info(
        f"Risk score {calculation.score_type.value} for patient_id={request.patient_id}: "
        f"persisted={calculation.persisted}"
    )

    return RiskScoreSaveResponse(
        score_type=calculation.score_type,
        result=_to_response(calculation.result),
        persisted=calculation.persisted,
        measurement_id=calculation.measurement_id,
        persistence_error=calculation.persistence_error,
    )


@router.get(
    "/patients/{patient_id}/risk-scores",
    response_model=RiskScoreHistoryResponse,
    summary="Get patient risk score history",
)
def get_risk_score_history(
    patient_id: str,
    store: Annotated[ScoreStore, Depends(get_score_store)],
    organization_id: Annotated[str, Query(min_length=1, description="Owning organization")],
    limit: Annotated[
        int,
        Query(ge=1, le=settings.risk_history_max_limit, description="Maximum scores to return"),
    ] = settings.risk_history_default_limit,
    score_type: Annotated[str | None, Query(description="Only return this calculator's scores")] = None,
) -> RiskScoreHistoryResponse:
    """Return stored risk scores for a patient, most recent first.

    Raises:
        HTTPException: 400 for an unknown score type, 503 if the store is unavailable.
    """
    service = get_cardiology_risk_service()
    try:
        resolved = service.resolve_score_type(score_type) if score_type else None
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        history = store.get_history(patient_id, organization_id, limit=limit, score_type=resolved)
    except ScoreStoreError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    log_data_access(
        resource_type="risk_score",
        patient_id=patient_id,
        organization_id=organization_id,
        record_count=len(history),
    )

    return RiskScoreHistoryResponse(
        patient_id=patient_id,
        organization_id=organization_id,
        scores=[StoredRiskScoreResponse.model_validate(record) for record in history],
        total=len(history),
    )


@router.post(
    "/risk-scores/comprehensive",
    response_model=ComprehensiveRiskResponse,
    summary="Comprehensive ASCVD + CAC assessment",
)
async def comprehensive_assessment(request: ComprehensiveRiskRequest) -> ComprehensiveRiskResponse:
    """Run ASCVD (when lipids and risk factors are given) and CAC interpretation together."""
    assessment = get_cardiology_risk_service().calculate_comprehensive(
        demographics=PatientDemographics(**request.demographics.model_dump()),
        lipids=LipidProfile(**request.lipids.model_dump()) if request.lipids else None,
        risk_factors=(
            CardiovascularRiskFactors(**request.risk_factors.model_dump()) if request.risk_factors else None
        ),
        cac=CACScoreInput(**request.cac.model_dump()) if request.cac else None,
    )

    return ComprehensiveRiskResponse(
        ascvd=_to_response(assessment.ascvd) if assessment.ascvd else None,
        cac=_to_response(assessment.cac) if assessment.cac else None,
        summary=assessment.summary,
    )
