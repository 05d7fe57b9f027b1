"""
Persistence Services Package

Interfaces the wizard hands its output to, plus in-memory implementations.
"""

from split_wizard.services.persistence.interface import (
    AuditSink,
    DraftSink,
    DuplicateDraftError,
    PersistenceError,
    TransientPersistenceError,
)
from split_wizard.services.persistence.in_memory import (
    InMemoryAuditSink,
    InMemoryDraftSink,
)

__all__ = [
    # Interfaces
    "AuditSink",
    "DraftSink",
    # Exceptions
    "DuplicateDraftError",
    "PersistenceError",
    "TransientPersistenceError",
    # In-memory implementation
    "InMemoryAuditSink",
    "InMemoryDraftSink",
]
