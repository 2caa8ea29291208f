"""SQLAlchemy ORM models for the cardiovascular risk service.

All models inherit from Base which provides:
- id: UUID primary key
- created_at: Timestamp

Models:
- RiskScoreRecord: one persisted risk score calculation
"""

from cardio_risk.core.database import Base
from cardio_risk.models.risk_score import RiskScoreRecord

__all__ = [
    "Base",
    "RiskScoreRecord",
]
