"""
Audit Models for the Split Wizard

Every significant wizard action is logged for audit purposes:
1. Which stage transitions happened and which were blocked
2. Which structural edits were refused and why
3. What draft was finalized and whether persistence accepted it

DESIGN DECISION: Audit events are append-only and carry the wizard session
id as correlation id, so one session's history can be reconstructed.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Session lifecycle
    SESSION_STARTED = "session_started"
    SESSION_RESET = "session_reset"

    # Navigation
    STAGE_ADVANCED = "stage_advanced"
    STAGE_RETREATED = "stage_retreated"
    ADVANCE_BLOCKED = "advance_blocked"

    # Structural edits
    PARTICIPANT_REMOVAL_REFUSED = "participant_removal_refused"
    SPLIT_METHOD_CHANGED = "split_method_changed"

    # Finalization
    DRAFT_FINALIZED = "draft_finalized"
    FINALIZE_BLOCKED = "finalize_blocked"
    DRAFT_PERSISTED = "draft_persisted"
    PERSISTENCE_FAILED = "persistence_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier",
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)",
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event",
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity",
    )

    # Correlation - the wizard session
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="Wizard session the event belongs to",
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="Draft id, for finalization events",
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data",
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.stage_advanced(session_id, 1, 2)
        event = AuditEventBuilder.draft_finalized(session_id, draft_id, "split", 2)
    """

    @staticmethod
    def session_started(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            correlation_id=correlation_id,
            description="Wizard session started",
        )

    @staticmethod
    def session_reset(correlation_id: UUID, new_session_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_RESET,
            correlation_id=correlation_id,
            description="Wizard session abandoned and reset",
            details={"new_session_id": str(new_session_id)},
        )

    @staticmethod
    def stage_advanced(correlation_id: UUID, from_stage: int, to_stage: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STAGE_ADVANCED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Advanced from stage {from_stage} to {to_stage}",
            details={"from_stage": from_stage, "to_stage": to_stage},
        )

    @staticmethod
    def stage_retreated(correlation_id: UUID, from_stage: int, to_stage: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STAGE_RETREATED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Went back from stage {from_stage} to {to_stage}",
            details={"from_stage": from_stage, "to_stage": to_stage},
        )

    @staticmethod
    def advance_blocked(
        correlation_id: UUID,
        stage: int,
        advisory: str,
        message: Optional[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVANCE_BLOCKED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Advance from stage {stage} blocked: {advisory}",
            details={"stage": stage, "advisory": advisory, "message": message},
        )

    @staticmethod
    def participant_removal_refused(
        correlation_id: UUID,
        person_id: str,
        participant_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PARTICIPANT_REMOVAL_REFUSED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="Participant removal refused at the minimum participant count",
            details={"person_id": person_id, "participant_count": participant_count},
        )

    @staticmethod
    def split_method_changed(
        correlation_id: UUID,
        previous: str,
        current: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPLIT_METHOD_CHANGED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description=f"Split method changed from {previous} to {current}",
            details={"previous": previous, "current": current},
        )

    @staticmethod
    def draft_finalized(
        correlation_id: UUID,
        draft_id: UUID,
        amount: str,
        is_split: bool,
        participant_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DRAFT_FINALIZED,
            correlation_id=correlation_id,
            entity_id=draft_id,
            description=f"Draft finalized: {amount}",
            details={
                "amount": amount,
                "is_split": is_split,
                "participant_count": participant_count,
            },
        )

    @staticmethod
    def finalize_blocked(
        correlation_id: UUID,
        advisory: str,
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FINALIZE_BLOCKED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Finalize blocked with {len(issues)} issues",
            details={"advisory": advisory, "issues": issues},
        )

    @staticmethod
    def draft_persisted(correlation_id: UUID, draft_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DRAFT_PERSISTED,
            correlation_id=correlation_id,
            entity_id=draft_id,
            description="Draft handed to persistence",
        )

    @staticmethod
    def persistence_failed(
        correlation_id: UUID,
        draft_id: UUID,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            entity_id=draft_id,
            description="Persistence collaborator rejected the draft",
            error_message=error_message,
        )
