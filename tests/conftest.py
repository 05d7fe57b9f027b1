"""
Shared fixtures for the Split Wizard tests.

No real time passes in any test: the wizard gets a ManualScheduler and the
tests advance it explicitly.
"""

import pytest

from split_wizard.audit import AuditLogger
from split_wizard.config import WizardSettings
from split_wizard.models import Group, Person, SplitMethod, TransactionCategory
from split_wizard.scheduling import ManualScheduler
from split_wizard.services import InMemoryAuditSink, InMemoryDirectory, InMemoryDraftSink
from split_wizard.wizard import WizardCoordinator


# Longer than the transition cooldown
PAST_COOLDOWN = 1.0


@pytest.fixture
def settings():
    return WizardSettings()


@pytest.fixture
def directory():
    return InMemoryDirectory(
        people=[
            Person(id="alice", name="Alice", email="alice@example.com"),
            Person(id="bob", name="Bob"),
            Person(id="carol", name="Carol"),
            Person(id="dave", name="Dave"),
        ],
        groups=[
            Group(id="flat", name="Flatmates", members=("alice", "bob", "carol")),
            Group(id="trip", name="Road trip", members=("bob", "dave")),
        ],
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def draft_sink():
    return InMemoryDraftSink()


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def wizard(directory, scheduler, draft_sink, audit_sink, settings):
    return WizardCoordinator(
        current_user_id="alice",
        directory=directory,
        draft_sink=draft_sink,
        audit_logger=AuditLogger(sink=audit_sink),
        scheduler=scheduler,
        settings=settings,
    )


@pytest.fixture
def fill_amount_stage():
    def _fill(wizard, amount="90", name="Dinner"):
        wizard.set_amount(amount)
        wizard.amount_details.set_name(name)
        wizard.amount_details.set_category(TransactionCategory.DINING)
    return _fill


@pytest.fixture
def step(scheduler):
    """Advance one stage, letting the cooldown elapse first."""
    def _step(wizard):
        scheduler.advance(PAST_COOLDOWN)
        return wizard.advance()
    return _step


@pytest.fixture
def split_wizard(wizard, fill_amount_stage, step):
    """A wizard on the split stage with alice, bob and carol splitting 90."""
    fill_amount_stage(wizard)
    assert step(wizard)
    wizard.set_split_enabled(True)
    wizard.select_group("flat")
    assert step(wizard)
    return wizard


@pytest.fixture
def split_method(split_wizard):
    """Switch the split-stage wizard to a method and return it."""
    def _switch(method: SplitMethod):
        split_wizard.set_method(method)
        return split_wizard
    return _switch
