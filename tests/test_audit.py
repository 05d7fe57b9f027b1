"""Tests for the audit logger and the in-memory collaborators."""

import importlib
import logging

import pytest
from datetime import date
from uuid import uuid4

from split_wizard.audit import AuditLogger, create_session_id
from split_wizard.audit import logger as audit_logger
from split_wizard.models import (
    AuditEventBuilder,
    AuditEventType,
    Group,
    Money,
    Person,
    TransactionDraft,
)
from split_wizard.services import (
    AuditSink,
    DuplicateDraftError,
    InMemoryAuditSink,
    InMemoryDirectory,
    InMemoryDraftSink,
    PersistenceError,
)


class BrokenAuditSink(AuditSink):
    def append_event(self, event) -> bool:
        raise ConnectionError("sink offline")


class TestAuditLogger:

    def test_forwards_to_sink(self):
        sink = InMemoryAuditSink()
        logger = AuditLogger(sink=sink)
        session_id = create_session_id()

        assert logger.log(AuditEventBuilder.session_started(session_id)) is True
        logger.log_stage_advanced(session_id, 1, 2)

        assert [e.event_type for e in sink.events_for(session_id)] == [
            AuditEventType.SESSION_STARTED,
            AuditEventType.STAGE_ADVANCED,
        ]

    def test_sink_failure_does_not_raise(self):
        logger = AuditLogger(sink=BrokenAuditSink())
        assert logger.log(AuditEventBuilder.session_started(uuid4())) is False

    def test_local_only_logger(self):
        assert AuditLogger().log(AuditEventBuilder.session_started(uuid4())) is True

    def test_import_leaves_root_logger_alone(self, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        importlib.reload(audit_logger)
        assert calls == []

        audit_logger.configure_logging("debug")
        assert len(calls) == 1
        assert calls[0]["level"] == logging.DEBUG

    def test_events_for_filters_sessions(self):
        sink = InMemoryAuditSink()
        logger = AuditLogger(sink=sink)
        first, second = create_session_id(), create_session_id()

        logger.log_session_started(first)
        logger.log_session_started(second)
        logger.log_finalize_blocked(first, "stage_incomplete", [])

        assert len(sink.events_for(first)) == 2
        assert len(sink.events_for(second)) == 1


class TestDraftSink:

    def _draft(self):
        return TransactionDraft(
            amount=Money.parse("10"),
            currency_code="USD",
            name="Snacks",
            transaction_date=date(2024, 5, 1),
        )

    def test_keeps_order(self):
        sink = InMemoryDraftSink()
        first, second = self._draft(), self._draft()
        sink.save_draft(first)
        sink.save_draft(second)
        assert sink.drafts == [first, second]
        assert len(sink) == 2

    def test_duplicate_rejected(self):
        sink = InMemoryDraftSink()
        draft = self._draft()
        sink.save_draft(draft)
        with pytest.raises(DuplicateDraftError):
            sink.save_draft(draft)
        assert issubclass(DuplicateDraftError, PersistenceError)


class TestInMemoryDirectory:

    @pytest.fixture
    def directory(self):
        return InMemoryDirectory(
            people=[Person(id="a", name="Ann"), Person(id="b", name="Ben")],
            groups=[Group(id="g", name="Team", members=("a", "b"))],
        )

    def test_lookup(self, directory):
        assert directory.person("a").name == "Ann"
        assert directory.person("zzz") is None
        assert directory.group("g").members == ("a", "b")
        assert directory.group("nope") is None

    def test_lists_are_copies(self, directory):
        directory.list_people().clear()
        assert len(directory.list_people()) == 2
        assert [g.id for g in directory.list_groups()] == ["g"]
