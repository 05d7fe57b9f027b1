"""
Audit Logger

DESIGN DECISION: Every significant wizard action is logged.
This provides:
1. Traceability of one wizard session (correlation id = session id)
2. Debugging capability for blocked transitions and refusals
3. A hook for the host app to keep its own audit trail

The audit logger:
- Is synchronous, like the rest of the wizard core
- Gracefully handles sink failures (a broken sink never breaks the wizard)
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from split_wizard.config import get_settings
from split_wizard.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from split_wizard.services.persistence import AuditSink


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Send the JSON lines to stderr at the given level.

    Only for hosts without their own logging setup; importing this module
    never touches the root logger.

    Args:
        level: Log level name. Defaults to settings.log_level.
    """
    level = (level or get_settings().log_level).upper()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional AuditSink supplied by the host app
    """

    def __init__(
        self,
        sink: Optional[AuditSink] = None,
    ):
        """
        Initialize audit logger.

        Args:
            sink: Where to forward events. If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger(__name__)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Forwards to the sink if available.

        Returns True if the sink accepted the event (or no sink configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._sink:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_session_started(self, session_id: UUID) -> None:
        self.log(AuditEventBuilder.session_started(session_id))

    def log_session_reset(self, session_id: UUID, new_session_id: UUID) -> None:
        self.log(AuditEventBuilder.session_reset(session_id, new_session_id))

    def log_stage_advanced(self, session_id: UUID, from_stage: int, to_stage: int) -> None:
        self.log(AuditEventBuilder.stage_advanced(session_id, from_stage, to_stage))

    def log_stage_retreated(self, session_id: UUID, from_stage: int, to_stage: int) -> None:
        self.log(AuditEventBuilder.stage_retreated(session_id, from_stage, to_stage))

    def log_advance_blocked(
        self,
        session_id: UUID,
        stage: int,
        advisory: str,
        message: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.advance_blocked(session_id, stage, advisory, message))

    def log_participant_removal_refused(
        self,
        session_id: UUID,
        person_id: str,
        participant_count: int,
    ) -> None:
        self.log(
            AuditEventBuilder.participant_removal_refused(
                session_id, person_id, participant_count
            )
        )

    def log_split_method_changed(self, session_id: UUID, previous: str, current: str) -> None:
        self.log(AuditEventBuilder.split_method_changed(session_id, previous, current))

    def log_draft_finalized(
        self,
        session_id: UUID,
        draft_id: UUID,
        amount: str,
        is_split: bool,
        participant_count: int,
    ) -> None:
        """Log a successful finalization."""
        self.log(
            AuditEventBuilder.draft_finalized(
                session_id, draft_id, amount, is_split, participant_count
            )
        )

    def log_finalize_blocked(
        self,
        session_id: UUID,
        advisory: str,
        issues: list[dict],
    ) -> None:
        self.log(AuditEventBuilder.finalize_blocked(session_id, advisory, issues))

    def log_draft_persisted(self, session_id: UUID, draft_id: UUID) -> None:
        self.log(AuditEventBuilder.draft_persisted(session_id, draft_id))

    def log_persistence_failed(
        self,
        session_id: UUID,
        draft_id: UUID,
        error_message: str,
    ) -> None:
        self.log(AuditEventBuilder.persistence_failed(session_id, draft_id, error_message))


def create_session_id() -> UUID:
    """
    Create a new wizard session id.

    Used as the correlation id for every audit event of the session.
    """
    return uuid4()
