"""Audit logging for risk score persistence and access.

Records who calculated, stored or viewed a patient's cardiovascular
risk scores. Events go to a dedicated ``audit`` logger so deployments
can route them to an append-only sink.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

# Separate audit logger for security-critical events
audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """Types of auditable actions."""

    READ = "read"
    CREATE = "create"
    ERROR = "error"


class AuditEvent(BaseModel):
    """Audit event record.

    Contains all relevant context for an auditable action.
    """

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: AuditAction = Field(..., description="Type of action performed")
    resource_type: str = Field(..., description="Type of resource accessed")
    resource_id: str | None = Field(None, description="ID of specific resource")
    patient_id: str | None = Field(None, description="Patient ID if applicable")
    organization_id: str | None = Field(None, description="Owning organization")
    user_id: str | None = Field(None, description="User who performed action")
    details: dict | None = Field(None, description="Additional context")
    success: bool = Field(True, description="Whether action succeeded")


def log_audit(
    action: AuditAction,
    resource_type: str,
    resource_id: str | None = None,
    patient_id: str | None = None,
    organization_id: str | None = None,
    user_id: str | None = None,
    details: dict | None = None,
    success: bool = True,
) -> AuditEvent:
    """Log an audit event.

    Args:
        action: Type of action being audited
        resource_type: The type of resource being accessed
        resource_id: Specific resource identifier
        patient_id: Patient ID if this is patient data
        organization_id: Organization owning the data
        user_id: User performing the action
        details: Additional context
        success: Whether the action succeeded

    Returns:
        The created AuditEvent
    """
    event = AuditEvent(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        patient_id=patient_id,
        organization_id=organization_id,
        user_id=user_id,
        details=details,
        success=success,
    )

    log_level = logging.INFO if success else logging.WARNING
    audit_logger.log(
        log_level,
        f"AUDIT: {action.value} {resource_type}"
        f"{f'/{resource_id}' if resource_id else ''}"
        f"{f' patient={patient_id}' if patient_id else ''}"
        f"{f' org={organization_id}' if organization_id else ''}"
        f" success={success}",
        extra={"audit_event": event.model_dump()},
    )

    return event


def log_score_saved(
    measurement_id: str | None,
    patient_id: str,
    organization_id: str,
    score_type: str,
    calculated_by: str,
    success: bool = True,
) -> AuditEvent:
    """Log creation (or a failed attempt) of a stored risk score."""
    return log_audit(
        action=AuditAction.CREATE if success else AuditAction.ERROR,
        resource_type="risk_score",
        resource_id=measurement_id,
        patient_id=patient_id,
        organization_id=organization_id,
        user_id=calculated_by,
        details={"score_type": score_type},
        success=success,
    )


def log_data_access(
    resource_type: str,
    patient_id: str | None = None,
    organization_id: str | None = None,
    record_count: int = 0,
) -> AuditEvent:
    """Log a read of patient data.

    Args:
        resource_type: Type of data being accessed
        patient_id: Patient the data belongs to
        organization_id: Organization owning the data
        record_count: Number of records returned

    Returns:
        The created AuditEvent
    """
    return log_audit(
        action=AuditAction.READ,
        resource_type=resource_type,
        patient_id=patient_id,
        organization_id=organization_id,
        details={"record_count": record_count},
    )
