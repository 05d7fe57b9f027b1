"""
Stage 2 state: who paid and who shares the transaction.

INVARIANTS:
- The payer is always a participant whenever there are participants
- While split mode is on, removals never take the set below the floor
- Only ids are stored; names live in the external directory
"""

from typing import Iterable, Optional

from split_wizard.config import get_settings
from split_wizard.models.transaction import ActionResult, Advisory, PersonId
from split_wizard.wizard.errors import UnknownParticipantError
from split_wizard.wizard.observable import Observable


class ParticipantState(Observable):
    """
    Payer, participant set and the group-selection convenience.

    Args:
        current_user_id: The authenticated user. Preferred whenever a payer
            has to be picked automatically.
        min_participants: Floor enforced while split mode is on.
        split_enabled: Whether the transaction is shared at all.
    """

    _source = "participants"

    def __init__(
        self,
        current_user_id: Optional[PersonId] = None,
        min_participants: Optional[int] = None,
        split_enabled: bool = False,
    ):
        super().__init__()
        self.current_user_id = current_user_id
        self.min_participants = (
            min_participants
            if min_participants is not None
            else get_settings().min_split_participants
        )
        self._initial_split_enabled = split_enabled
        self._clear()

    def _clear(self) -> None:
        self.split_enabled: bool = self._initial_split_enabled
        self.payer_id: Optional[PersonId] = None
        self._participants: set[PersonId] = set()
        self.active_group_id: Optional[str] = None
        self.search_text: str = ""

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def participant_ids(self) -> frozenset[PersonId]:
        return frozenset(self._participants)

    @property
    def participant_count(self) -> int:
        return len(self._participants)

    @property
    def ordered_participant_ids(self) -> list[PersonId]:
        """Current user first, everyone else sorted by id."""
        others = sorted(p for p in self._participants if p != self.current_user_id)
        if self.current_user_id in self._participants:
            return [self.current_user_id] + others
        return others

    def is_participant(self, person_id: PersonId) -> bool:
        return person_id in self._participants

    def is_current_user(self, person_id: PersonId) -> bool:
        return self.current_user_id is not None and person_id == self.current_user_id

    @property
    def at_floor(self) -> bool:
        return self.split_enabled and len(self._participants) <= self.min_participants

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def set_split_enabled(self, enabled: bool) -> None:
        self.split_enabled = bool(enabled)
        self._notify("split_enabled")

    def add_participant(self, person_id: PersonId) -> ActionResult:
        if person_id in self._participants:
            return ActionResult.ok()
        self._participants.add(person_id)
        if self.payer_id is None:
            self.payer_id = self._preferred_payer([person_id])
        self._notify("participants", (person_id,))
        return ActionResult.ok()

    def remove_participant(self, person_id: PersonId) -> ActionResult:
        """
        Remove a participant, keeping the payer invariant.

        Raises:
            UnknownParticipantError: person_id is not a participant
        """
        if person_id not in self._participants:
            raise UnknownParticipantError(person_id)
        if self.at_floor:
            return ActionResult.refused(
                Advisory.MINIMUM_PARTICIPANTS,
                f"A split needs at least {self.min_participants} participants",
            )

        self._participants.discard(person_id)
        # The group no longer describes the set exactly
        self.active_group_id = None
        if self.payer_id == person_id:
            self.payer_id = self._reassigned_payer()
        self._notify("participants", (person_id,))
        return ActionResult.ok()

    def toggle_participant(self, person_id: PersonId) -> ActionResult:
        if person_id in self._participants:
            return self.remove_participant(person_id)
        return self.add_participant(person_id)

    def select_payer(self, person_id: PersonId) -> None:
        """Make person_id the payer, adding them as a participant if needed."""
        added = person_id not in self._participants
        self._participants.add(person_id)
        self.payer_id = person_id
        self._notify("payer", (person_id,) if added else ())

    def select_group(
        self,
        members: Iterable[PersonId],
        group_id: Optional[str] = None,
    ) -> None:
        """
        Bulk-add a group's members.

        Participants outside the group stay. The search text is cleared.
        """
        added = [m for m in dict.fromkeys(members) if m not in self._participants]
        self._participants.update(added)
        if self.payer_id is None and added:
            self.payer_id = self._preferred_payer(added)
        self.active_group_id = group_id
        self.search_text = ""
        self._notify("participants", tuple(added))

    def clear_group(self) -> None:
        """Forget the active group but keep its members."""
        self.active_group_id = None
        self._notify("group")

    def set_search_text(self, text: str) -> None:
        self.search_text = text or ""
        self._notify("search_text")

    def reset(self) -> None:
        self._clear()
        self._notify("reset")

    # =========================================================================
    # PAYER SELECTION
    # =========================================================================

    def _preferred_payer(self, added: list[PersonId]) -> PersonId:
        if self.current_user_id is not None and self.current_user_id in added:
            return self.current_user_id
        return min(added)

    def _reassigned_payer(self) -> Optional[PersonId]:
        if not self._participants:
            return None
        if self.current_user_id in self._participants:
            return self.current_user_id
        return min(self._participants)

    # =========================================================================
    # GUARDS
    # =========================================================================

    @property
    def can_advance(self) -> bool:
        if not self.split_enabled:
            return True
        return self.payer_id is not None and len(self._participants) >= self.min_participants

    @property
    def validation_message(self) -> Optional[str]:
        if not self.split_enabled:
            return None
        if self.payer_id is None:
            return "Choose who paid"
        missing = self.min_participants - len(self._participants)
        if missing > 0:
            plural = "s" if missing > 1 else ""
            return f"Add {missing} more participant{plural} to split"
        return None
