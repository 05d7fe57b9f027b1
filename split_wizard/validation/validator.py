"""
Stage Validation

DESIGN DECISION: Every stage guard has a matching validator that explains
itself. The guards (can_advance / is_balanced) answer yes/no for navigation;
the validator returns the issues behind that answer so the caller can show
them and so finalize() can report exactly what blocked it.

Errors block. Warnings never block - they surface the known rounding and
adjustment-floor gaps without silently correcting them.

IMPORTANT: Validation NEVER mutates state. It only reports.
"""

from typing import TYPE_CHECKING

from split_wizard.models.transaction import (
    SplitMethod,
    ValidationIssue,
    ValidationResult,
    WizardStage,
)

if TYPE_CHECKING:
    from split_wizard.wizard.amount_details import AmountDetailsState
    from split_wizard.wizard.participants import ParticipantState
    from split_wizard.wizard.split_calculation import SplitCalculationState


class WizardValidator:
    """
    Validates the three wizard stages.

    Stage 1: amount, name, category policy
    Stage 2: payer and participant floor (split mode only)
    Stage 3: method-specific balance (split mode only)
    """

    def validate_amount_details(self, state: "AmountDetailsState") -> ValidationResult:
        issues = []

        if state.amount.is_zero:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing" if not state.amount_text.strip() else "invalid_value",
                message="Enter an amount greater than zero",
                severity="error",
            ))

        if not state.has_name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Enter a name for this transaction",
                severity="error",
            ))

        if not state.category_satisfied:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Pick a category",
                severity="error",
            ))

        return self._result(WizardStage.AMOUNT, issues)

    def validate_participants(self, state: "ParticipantState") -> ValidationResult:
        issues = []
        if not state.split_enabled:
            return self._result(WizardStage.PARTICIPANTS, issues)

        if state.payer_id is None:
            issues.append(ValidationIssue(
                field="payer",
                issue_type="missing",
                message="Choose who paid",
                severity="error",
            ))

        if state.participant_count < state.min_participants:
            issues.append(ValidationIssue(
                field="participants",
                issue_type="below_minimum",
                message=f"A split needs at least {state.min_participants} participants",
                severity="error",
            ))

        return self._result(WizardStage.PARTICIPANTS, issues)

    def validate_split(
        self,
        split: "SplitCalculationState",
        amount_details: "AmountDetailsState",
        participants: "ParticipantState",
    ) -> ValidationResult:
        issues = []
        if not participants.split_enabled:
            return self._result(WizardStage.SPLIT, issues)

        total = amount_details.amount
        ids = participants.participant_ids

        if not split.is_balanced(total, ids):
            issues.append(ValidationIssue(
                field=split.method.value,
                issue_type="unbalanced",
                message=split.validation_message(total, ids),
                severity="error",
            ))
            return self._result(WizardStage.SPLIT, issues)

        remainder = split.rounding_remainder(total, ids)
        if remainder != 0 and split.method in (
            SplitMethod.EQUALLY,
            SplitMethod.SHARES,
            SplitMethod.PERCENTAGES,
        ):
            issues.append(ValidationIssue(
                field=split.method.value,
                issue_type="rounding_remainder",
                message=f"Rounded shares differ from the total by {remainder:.2f}",
                severity="warning",
            ))
        elif remainder < 0 and split.method == SplitMethod.ADJUSTMENTS:
            issues.append(ValidationIssue(
                field=split.method.value,
                issue_type="adjustment_floor",
                message=f"Adjusted amounts exceed the total by {-remainder:.2f}",
                severity="warning",
            ))

        return self._result(WizardStage.SPLIT, issues)

    def validate_draft(
        self,
        amount_details: "AmountDetailsState",
        participants: "ParticipantState",
        split: "SplitCalculationState",
    ) -> ValidationResult:
        """All three stages together; the finalize gate."""
        issues = []
        issues.extend(self.validate_amount_details(amount_details).issues)
        issues.extend(self.validate_participants(participants).issues)
        issues.extend(self.validate_split(split, amount_details, participants).issues)
        return self._result(None, issues)

    @staticmethod
    def _result(stage, issues: list[ValidationIssue]) -> ValidationResult:
        return ValidationResult(
            stage=stage,
            is_valid=not any(i.severity == "error" for i in issues),
            issues=issues,
        )
