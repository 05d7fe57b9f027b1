"""Services package."""

from split_wizard.services.directory import (
    InMemoryDirectory,
    PeopleDirectory,
)
from split_wizard.services.persistence import (
    AuditSink,
    DraftSink,
    DuplicateDraftError,
    InMemoryAuditSink,
    InMemoryDraftSink,
    PersistenceError,
    TransientPersistenceError,
)

__all__ = [
    # Directory
    "InMemoryDirectory",
    "PeopleDirectory",
    # Persistence
    "AuditSink",
    "DraftSink",
    "DuplicateDraftError",
    "InMemoryAuditSink",
    "InMemoryDraftSink",
    "PersistenceError",
    "TransientPersistenceError",
]
