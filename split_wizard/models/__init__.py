"""
Data Models Package

This package contains all Pydantic models used by the Split Wizard.
"""

from split_wizard.models.money import (
    Money,
    NumericInput,
    coerce_decimal,
)
from split_wizard.models.transaction import (
    ActionResult,
    AdjustmentSplitInputs,
    Advisory,
    CategoryPolicy,
    EqualSplitInputs,
    ExactAmountSplitInputs,
    FinalizeResult,
    Group,
    PercentageSplitInputs,
    Person,
    PersonId,
    ShareSplitInputs,
    SplitDetail,
    SplitInputs,
    SplitMethod,
    TransactionCategory,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    WizardStage,
    empty_inputs_for,
)
from split_wizard.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Money
    "Money",
    "NumericInput",
    "coerce_decimal",
    # Transaction models
    "ActionResult",
    "AdjustmentSplitInputs",
    "Advisory",
    "CategoryPolicy",
    "EqualSplitInputs",
    "ExactAmountSplitInputs",
    "FinalizeResult",
    "Group",
    "PercentageSplitInputs",
    "Person",
    "PersonId",
    "ShareSplitInputs",
    "SplitDetail",
    "SplitInputs",
    "SplitMethod",
    "TransactionCategory",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "WizardStage",
    "empty_inputs_for",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
