"""
Abstract Persistence Interface

DESIGN DECISION: The wizard never persists anything itself. It hands the
finalized draft to a collaborator behind this interface. This allows us to:
1. Plug in whatever storage/sync the host app uses
2. Use in-memory sinks for testing
3. Keep the wizard free of I/O

The interface is intentionally tiny - the wizard only ever submits.
"""

from abc import ABC, abstractmethod

from split_wizard.models.audit import AuditEvent
from split_wizard.models.transaction import TransactionDraft


class DraftSink(ABC):
    """
    Receives finalized drafts.

    Any persistence implementation (local database, sync queue, ...)
    must implement this.
    """

    @abstractmethod
    def save_draft(self, draft: TransactionDraft) -> None:
        """
        Take ownership of a finalized draft.

        Args:
            draft: The immutable draft produced by the wizard

        Raises:
            PersistenceError: If the draft cannot be accepted
        """
        pass


class AuditSink(ABC):
    """
    Receives audit events.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass


class PersistenceError(Exception):
    """Base exception for persistence collaborators."""
    pass


class DuplicateDraftError(PersistenceError):
    """The same draft id was submitted twice."""

    def __init__(self, draft_id: str):
        self.draft_id = draft_id
        super().__init__(f"Draft {draft_id} was already saved")


class TransientPersistenceError(PersistenceError):
    """A temporary failure (timeout, lost connection); the save may be retried."""
    pass
