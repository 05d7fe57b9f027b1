"""Tests for stage validation."""

import pytest

from split_wizard.models import CategoryPolicy, SplitMethod, TransactionCategory, WizardStage
from split_wizard.validation import WizardValidator
from split_wizard.wizard import AmountDetailsState, ParticipantState, SplitCalculationState


@pytest.fixture
def validator():
    return WizardValidator()


@pytest.fixture
def details():
    state = AmountDetailsState(category_policy=CategoryPolicy.REQUIRED)
    state.set_amount("100")
    state.set_name("Groceries")
    state.set_category(TransactionCategory.GROCERIES)
    return state


@pytest.fixture
def participants():
    state = ParticipantState(current_user_id="a", min_participants=2, split_enabled=True)
    state.select_group(["a", "b", "c"])
    return state


@pytest.fixture
def split():
    return SplitCalculationState()


class TestAmountValidation:

    def test_valid(self, validator, details):
        result = validator.validate_amount_details(details)
        assert result.is_valid
        assert result.stage == WizardStage.AMOUNT
        assert result.issues == []

    def test_typed_garbage_is_invalid_value(self, validator, details):
        details.set_amount("abc")
        result = validator.validate_amount_details(details)
        assert not result.is_valid
        assert result.issues[0].issue_type == "invalid_value"

    def test_empty_amount_is_missing(self, validator, details):
        details.set_amount("")
        result = validator.validate_amount_details(details)
        assert result.issues[0].issue_type == "missing"


class TestParticipantValidation:

    def test_below_minimum(self, validator):
        state = ParticipantState(min_participants=2, split_enabled=True)
        state.add_participant("a")
        result = validator.validate_participants(state)
        assert [i.issue_type for i in result.issues] == ["below_minimum"]

    def test_non_split_always_valid(self, validator):
        result = validator.validate_participants(ParticipantState(split_enabled=False))
        assert result.is_valid


class TestSplitValidation:

    def test_rounding_remainder_warning(self, validator, split, details, participants):
        result = validator.validate_split(split, details, participants)
        assert result.is_valid
        assert result.issues[0].issue_type == "rounding_remainder"
        assert result.issues[0].severity == "warning"

    def test_even_split_has_no_issues(self, validator, split, details, participants):
        details.set_amount("90")
        assert validator.validate_split(split, details, participants).issues == []

    def test_unbalanced_is_an_error(self, validator, split, details, participants):
        split.set_method(SplitMethod.EXACT_AMOUNTS)
        split.update_amount("a", "10")
        result = validator.validate_split(split, details, participants)
        assert not result.is_valid
        assert result.issues[0].message == "90.00 remaining"

    def test_adjustment_floor_warning(self, validator, split, details, participants):
        split.set_method(SplitMethod.ADJUSTMENTS)
        split.update_adjustment("a", "-100")
        result = validator.validate_split(split, details, participants)
        assert result.is_valid
        assert [i.issue_type for i in result.issues] == ["adjustment_floor"]

    def test_skipped_when_not_splitting(self, validator, split, details):
        participants = ParticipantState(split_enabled=False)
        assert validator.validate_split(split, details, participants).issues == []


class TestDraftValidation:

    def test_collects_every_stage(self, validator, split):
        details = AmountDetailsState(category_policy=CategoryPolicy.REQUIRED)
        participants = ParticipantState(min_participants=2, split_enabled=True)

        result = validator.validate_draft(details, participants, split)

        assert result.stage is None
        assert {i.field for i in result.issues} >= {"amount", "name", "category", "payer"}
        assert result.error_count >= 4
