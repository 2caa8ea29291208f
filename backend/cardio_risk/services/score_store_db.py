"""Database-backed risk score store.

Writes RiskScoreRecord rows through a caller-owned SQLAlchemy session.
save_score flushes to obtain the id; commit makes the rows durable and
must succeed before a score is reported as persisted.
"""

import json
import logging
from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cardio_risk.models.risk_score import RiskScoreRecord
from cardio_risk.schemas.base import RiskCategory, ScoreType
from cardio_risk.services.risk_models import RiskScoreResult
from cardio_risk.services.score_store import (
    ScoreStore,
    ScoreStoreError,
    StoredRiskScore,
    validate_limit,
)

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset on read
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class DatabaseScoreStore(ScoreStore):
    """SQLAlchemy-backed score store.

    Usage:
        store = DatabaseScoreStore(session)
        measurement_id = store.save_score(
            patient_id="P001",
            organization_id="ORG1",
            score_type=ScoreType.FRAMINGHAM,
            result=result,
            calculated_by="dr.smith",
        )
    """

    def __init__(self, session: Session) -> None:
        """Initialize the store.

        Args:
            session: SQLAlchemy database session.
        """
        self._session = session

    def save_score(
        self,
        patient_id: str,
        organization_id: str,
        score_type: ScoreType,
        result: RiskScoreResult,
        calculated_by: str,
    ) -> str:
        record = RiskScoreRecord(
            patient_id=patient_id,
            organization_id=organization_id,
            score_type=ScoreType(score_type).value,
            score_value=float(result.score),
            risk_percentage=result.risk_percentage,
            risk_category=result.risk_category.value,
            interpretation=result.interpretation,
            recommendations=json.dumps(list(result.recommendations)),
            calculated_by=calculated_by,
            calculated_at=result.calculated_at,
        )
        try:
            self._session.add(record)
            self._session.flush()  # Get the record ID
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.warning(f"Failed to save {score_type} score for patient {patient_id}: {e}")
            raise ScoreStoreError(f"Failed to save risk score: {e}") from e

        return record.id

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.warning(f"Failed to commit risk scores: {e}")
            raise ScoreStoreError(f"Failed to commit risk score: {e}") from e

    def get_history(
        self,
        patient_id: str,
        organization_id: str,
        limit: int = 10,
        score_type: ScoreType | None = None,
    ) -> list[StoredRiskScore]:
        validate_limit(limit)

        stmt = select(RiskScoreRecord).where(
            RiskScoreRecord.patient_id == patient_id,
            RiskScoreRecord.organization_id == organization_id,
        )
        if score_type is not None:
            stmt = stmt.where(RiskScoreRecord.score_type == ScoreType(score_type).value)
        stmt = stmt.order_by(RiskScoreRecord.calculated_at.desc()).limit(limit)

        try:
            records = self._session.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.warning(f"Failed to read risk score history for patient {patient_id}: {e}")
            raise ScoreStoreError(f"Failed to read risk score history: {e}") from e

        return [self._to_stored(record) for record in records]

    @staticmethod
    def _to_stored(record: RiskScoreRecord) -> StoredRiskScore:
        return StoredRiskScore(
            id=record.id,
            patient_id=record.patient_id,
            organization_id=record.organization_id,
            score_type=ScoreType(record.score_type),
            score_value=record.score_value,
            risk_percentage=record.risk_percentage,
            risk_category=RiskCategory(record.risk_category),
            interpretation=record.interpretation,
            recommendations=json.loads(record.recommendations or "[]"),
            calculated_by=record.calculated_by,
            calculated_at=_as_utc(record.calculated_at),
        )
