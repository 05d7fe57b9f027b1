"""Tests for the participant stage."""

import pytest

from split_wizard.models import Advisory
from split_wizard.wizard import ParticipantState, UnknownParticipantError


@pytest.fixture
def participants():
    return ParticipantState(current_user_id="alice", min_participants=2, split_enabled=True)


class TestPayerAssignment:
    """Tests for automatic payer selection."""

    def test_first_added_becomes_payer(self, participants):
        participants.add_participant("bob")
        assert participants.payer_id == "bob"

    def test_current_user_preferred_among_group(self, participants):
        participants.select_group(["carol", "alice", "bob"])
        assert participants.payer_id == "alice"

    def test_lowest_id_when_current_user_absent(self, participants):
        participants.select_group(["dave", "bob"])
        assert participants.payer_id == "bob"

    def test_existing_payer_kept(self, participants):
        participants.add_participant("bob")
        participants.add_participant("alice")
        assert participants.payer_id == "bob"

    def test_select_payer_adds_participant(self, participants):
        participants.select_payer("dave")
        assert participants.payer_id == "dave"
        assert participants.is_participant("dave")

    def test_add_is_idempotent(self, participants):
        participants.add_participant("bob")
        assert participants.add_participant("bob")
        assert participants.participant_count == 1


class TestRemoval:
    """Tests for removal, payer reassignment and the floor."""

    def test_payer_reassigned_deterministically(self, participants):
        participants.select_group(["carol", "bob", "dave"])
        participants.select_payer("bob")

        result = participants.remove_participant("bob")

        assert result
        assert participants.payer_id == "carol"
        assert participants.participant_count == 2

    def test_payer_reassigned_to_current_user(self, participants):
        participants.select_group(["alice", "bob", "carol"])
        participants.select_payer("carol")
        participants.remove_participant("carol")
        assert participants.payer_id == "alice"

    def test_removal_refused_at_floor(self, participants):
        participants.select_group(["alice", "bob"])

        result = participants.remove_participant("bob")

        assert not result
        assert result.advisory == Advisory.MINIMUM_PARTICIPANTS
        assert participants.participant_ids == {"alice", "bob"}
        assert participants.payer_id == "alice"

    def test_no_floor_when_not_splitting(self):
        participants = ParticipantState(current_user_id="alice", split_enabled=False)
        participants.add_participant("alice")
        assert participants.remove_participant("alice")
        assert participants.payer_id is None
        assert participants.participant_count == 0

    def test_removing_stranger_is_a_contract_violation(self, participants):
        with pytest.raises(UnknownParticipantError):
            participants.remove_participant("zoe")

    def test_removal_clears_group(self, participants):
        participants.select_group(["alice", "bob", "carol"], group_id="flat")
        participants.remove_participant("carol")
        assert participants.active_group_id is None
        assert participants.participant_ids == {"alice", "bob"}

    def test_toggle(self, participants):
        participants.select_group(["alice", "bob"])
        assert participants.toggle_participant("carol")
        assert participants.is_participant("carol")
        assert participants.toggle_participant("carol")
        assert not participants.is_participant("carol")


class TestGroupSelection:
    """Tests for bulk-adding a group."""

    def test_group_keeps_existing_participants(self, participants):
        participants.add_participant("dave")
        participants.select_group(["alice", "bob"], group_id="flat")
        assert participants.participant_ids == {"alice", "bob", "dave"}
        assert participants.active_group_id == "flat"

    def test_group_clears_search(self, participants):
        participants.set_search_text("bo")
        participants.select_group(["bob"])
        assert participants.search_text == ""

    def test_clear_group_keeps_members(self, participants):
        participants.select_group(["alice", "bob"], group_id="flat")
        participants.clear_group()
        assert participants.active_group_id is None
        assert participants.participant_count == 2


class TestParticipantGuard:
    """Tests for can_advance and the validation message."""

    def test_non_split_always_advances(self):
        participants = ParticipantState(split_enabled=False)
        assert participants.can_advance is True
        assert participants.validation_message is None

    def test_split_needs_payer(self, participants):
        assert participants.can_advance is False
        assert participants.validation_message == "Choose who paid"

    def test_split_needs_two(self, participants):
        participants.add_participant("alice")
        assert participants.can_advance is False
        assert participants.validation_message == "Add 1 more participant to split"

    def test_split_ready(self, participants):
        participants.select_group(["alice", "bob"])
        assert participants.can_advance is True
        assert participants.validation_message is None

    def test_explicit_zero_floor_kept(self):
        participants = ParticipantState(min_participants=0, split_enabled=True)
        assert participants.min_participants == 0

        participants.add_participant("bob")
        assert participants.can_advance is True


class TestParticipantReads:

    def test_current_user_listed_first(self, participants):
        participants.select_group(["carol", "bob", "alice"])
        assert participants.ordered_participant_ids == ["alice", "bob", "carol"]
        participants.remove_participant("alice")
        assert participants.ordered_participant_ids == ["bob", "carol"]

    def test_is_current_user(self, participants):
        assert participants.is_current_user("alice")
        assert not participants.is_current_user("bob")
        assert not ParticipantState().is_current_user("alice")

    def test_reset_restores_initial_split_mode(self, participants):
        participants.select_group(["alice", "bob"])
        participants.set_split_enabled(False)
        participants.reset()
        assert participants.split_enabled is True
        assert participants.participant_count == 0
        assert participants.payer_id is None
