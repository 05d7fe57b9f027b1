"""
In-memory persistence collaborators.

Handy for tests and for hosts that collect drafts before syncing them.
"""

from uuid import UUID

from split_wizard.models.audit import AuditEvent
from split_wizard.models.transaction import TransactionDraft
from split_wizard.services.persistence.interface import (
    AuditSink,
    DraftSink,
    DuplicateDraftError,
)


class InMemoryDraftSink(DraftSink):
    """Keeps submitted drafts in submission order; rejects repeated ids."""

    def __init__(self):
        self._drafts: list[TransactionDraft] = []
        self._ids: set[UUID] = set()

    def save_draft(self, draft: TransactionDraft) -> None:
        if draft.id in self._ids:
            raise DuplicateDraftError(str(draft.id))
        self._ids.add(draft.id)
        self._drafts.append(draft)

    @property
    def drafts(self) -> list[TransactionDraft]:
        return list(self._drafts)

    def __len__(self) -> int:
        return len(self._drafts)


class InMemoryAuditSink(AuditSink):
    """Append-only list of audit events."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def events_for(self, correlation_id: UUID) -> list[AuditEvent]:
        """All events of one wizard session, in order."""
        return [e for e in self.events if e.correlation_id == correlation_id]
