"""
Wizard package.

The three stage states plus the coordinator that drives them.
"""

from split_wizard.wizard.errors import (
    ContractViolationError,
    InactiveSplitMethodError,
    UnknownGroupError,
    UnknownParticipantError,
    UnknownPersonError,
    WizardError,
)
from split_wizard.wizard.observable import Listener, Observable, StateChange
from split_wizard.wizard.amount_details import AmountDetailsState
from split_wizard.wizard.participants import ParticipantState
from split_wizard.wizard.split_calculation import SplitCalculationState
from split_wizard.wizard.coordinator import WizardCoordinator

__all__ = [
    # Errors
    "ContractViolationError",
    "InactiveSplitMethodError",
    "UnknownGroupError",
    "UnknownParticipantError",
    "UnknownPersonError",
    "WizardError",
    # Change notification
    "Listener",
    "Observable",
    "StateChange",
    # States
    "AmountDetailsState",
    "ParticipantState",
    "SplitCalculationState",
    "WizardCoordinator",
]
