"""API routers for the cardiovascular risk service."""

from cardio_risk.api.risk_scores import router as risk_scores_router

__all__ = [
    "risk_scores_router",
]
