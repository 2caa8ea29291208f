"""Persistence port for calculated risk scores.

Calculators never touch storage. Callers hand a finished result to a
ScoreStore, which returns the measurement id it assigned.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from uuid import uuid4

from cardio_risk.schemas.base import RiskCategory, ScoreType
from cardio_risk.services.risk_models import RiskScoreResult

logger = logging.getLogger(__name__)


class ScoreStoreError(RuntimeError):
    """Raised when a score cannot be saved or read back."""


@dataclass
class StoredRiskScore:
    """A persisted risk score as read back from a store."""

    id: str
    patient_id: str
    organization_id: str
    score_type: ScoreType
    score_value: float
    risk_percentage: float
    risk_category: RiskCategory
    interpretation: str
    calculated_by: str
    calculated_at: datetime
    recommendations: list[str] = field(default_factory=list)


class ScoreStore(ABC):
    """Interface for risk score persistence.

    Saves are append-only; there is no update path. History is
    returned most recent first.

    Example usage:
        store = InMemoryScoreStore()
        measurement_id = store.save_score("P001", "ORG1", ScoreType.HEART, result, "dr.smith")
        history = store.get_history("P001", "ORG1")
    """

    @abstractmethod
    def save_score(
        self,
        patient_id: str,
        organization_id: str,
        score_type: ScoreType,
        result: RiskScoreResult,
        calculated_by: str,
    ) -> str:
        """Persist a calculated score.

        Args:
            patient_id: Patient the score belongs to.
            organization_id: Owning organization.
            score_type: Calculator that produced the result.
            result: The calculated result.
            calculated_by: User or system that requested the calculation.

        Returns:
            The generated measurement id.

        Raises:
            ScoreStoreError: If the score could not be saved.
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_history(
        self,
        patient_id: str,
        organization_id: str,
        limit: int = 10,
        score_type: ScoreType | None = None,
    ) -> list[StoredRiskScore]:
        """Return stored scores for a patient, most recent first.

        Raises:
            ValueError: If limit is not positive.
            ScoreStoreError: If the store cannot be read.
        """
        pass  # pragma: no cover

    def commit(self) -> None:
        """Make saved scores durable.

        A save only counts as persisted once commit has returned.
        Stores that write immediately need not override this.

        Raises:
            ScoreStoreError: If the pending saves could not be committed.
        """


def validate_limit(limit: int) -> None:
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")


class InMemoryScoreStore(ScoreStore):
    """List-backed store for tests, demos and local development."""

    def __init__(self) -> None:
        self._records: list[StoredRiskScore] = []
        self._lock = Lock()

    def save_score(
        self,
        patient_id: str,
        organization_id: str,
        score_type: ScoreType,
        result: RiskScoreResult,
        calculated_by: str,
    ) -> str:
        record = StoredRiskScore(
            id=str(uuid4()),
            patient_id=patient_id,
            organization_id=organization_id,
            score_type=ScoreType(score_type),
            score_value=float(result.score),
            risk_percentage=result.risk_percentage,
            risk_category=result.risk_category,
            interpretation=result.interpretation,
            recommendations=list(result.recommendations),
            calculated_by=calculated_by,
            calculated_at=result.calculated_at,
        )
        with self._lock:
            self._records.append(record)
        logger.debug(f"Stored {record.score_type.value} score {record.id} for patient {patient_id}")
        return record.id

    def get_history(
        self,
        patient_id: str,
        organization_id: str,
        limit: int = 10,
        score_type: ScoreType | None = None,
    ) -> list[StoredRiskScore]:
        validate_limit(limit)
        with self._lock:
            matches = [
                r
                for r in self._records
                if r.patient_id == patient_id
                and r.organization_id == organization_id
                and (score_type is None or r.score_type == ScoreType(score_type))
            ]
        # Stable sort keeps insertion order reversed for equal timestamps
        matches.reverse()
        matches.sort(key=lambda r: r.calculated_at, reverse=True)
        return matches[:limit]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
