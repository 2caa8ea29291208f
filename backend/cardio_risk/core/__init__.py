"""Core application configuration and utilities."""

from cardio_risk.core.audit import AuditAction, AuditEvent, log_audit, log_data_access, log_score_saved
from cardio_risk.core.config import settings
from cardio_risk.core.database import Base, get_db

__all__ = [
    # Config
    "settings",
    # Database
    "Base",
    "get_db",
    # Audit
    "AuditAction",
    "AuditEvent",
    "log_audit",
    "log_data_access",
    "log_score_saved",
]
