"""SQLAlchemy model for persisted cardiovascular risk scores."""

from datetime import datetime

from sqlalchemy import DateTime, Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cardio_risk.core.database import Base


class RiskScoreRecord(Base):
    """One calculated risk score for a patient.

    Rows are append-only: a recalculation writes a new row rather than
    updating the previous one. Recommendations are stored as a JSON
    array of strings.
    """

    __tablename__ = "cardiology_risk_scores"

    patient_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    organization_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    # ScoreType value, e.g. "framingham"
    score_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        index=True,
    )

    score_value: Mapped[float] = mapped_column(Float, nullable=False)
    risk_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    risk_category: Mapped[str] = mapped_column(String(50), nullable=False)

    interpretation: Mapped[str] = mapped_column(Text, nullable=False, default="")
    recommendations: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    calculated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_risk_scores_patient_org_calculated", "patient_id", "organization_id", "calculated_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<RiskScoreRecord(id={self.id}, patient_id={self.patient_id}, "
            f"score_type={self.score_type}, score_value={self.score_value})>"
        )
