"""
Wizard Coordinator

This module ties the three stage states together and defines the
navigation and finalization rules of the new-transaction flow:

    Stage 1 (amount) -> Stage 2 (participants) -> Stage 3 (split)

DESIGN DECISION: The coordinator enforces the boundaries:
- No stage is entered unless the previous stage's guard holds
- No draft is produced unless every guard holds (and the split balances)
- The coordinator never persists; it hands the draft to a DraftSink
- Every transition, refusal and finalization is audited

Stage objects may be mutated directly or through the facade methods here;
either way the coordinator observes the change and re-validates.
"""

from typing import Optional

from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from split_wizard.audit import AuditLogger, create_session_id
from split_wizard.config import WizardSettings, get_settings
from split_wizard.models.money import Money
from split_wizard.models.transaction import (
    ActionResult,
    Advisory,
    CategoryPolicy,
    FinalizeResult,
    Person,
    PersonId,
    SplitDetail,
    SplitMethod,
    TransactionDraft,
    ValidationResult,
    WizardStage,
)
from split_wizard.scheduling import Clock, Debouncer, MonotonicClock, Scheduler
from split_wizard.services.directory import PeopleDirectory
from split_wizard.services.persistence import (
    DraftSink,
    PersistenceError,
    TransientPersistenceError,
)
from split_wizard.validation import WizardValidator
from split_wizard.wizard.amount_details import AmountDetailsState
from split_wizard.wizard.errors import (
    ContractViolationError,
    UnknownGroupError,
    UnknownParticipantError,
    UnknownPersonError,
)
from split_wizard.wizard.observable import Observable, StateChange
from split_wizard.wizard.participants import ParticipantState
from split_wizard.wizard.split_calculation import SplitCalculationState


class WizardCoordinator(Observable):
    """
    Owns the current stage, the transition guards and finalize().

    Args:
        current_user_id: The authenticated user, preferred as payer.
        directory: Read-only people/groups directory. When given, ids passed
            to the facade are checked against it.
        draft_sink: Receives the finalized draft.
        audit_logger: Audit trail; a local-only logger is used if None.
        scheduler: Drives the amount-input debounce and, unless clock is
            given, the transition cooldown. Without one, edits publish
            immediately and the cooldown uses the monotonic clock.
        clock: Time source for the transition cooldown.
        settings: Overrides the cached WizardSettings.
        category_policy: Overrides settings.require_category.
        split_enabled: Initial split mode.
    """

    _source = "wizard"

    def __init__(
        self,
        current_user_id: Optional[PersonId] = None,
        directory: Optional[PeopleDirectory] = None,
        draft_sink: Optional[DraftSink] = None,
        audit_logger: Optional[AuditLogger] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
        settings: Optional[WizardSettings] = None,
        category_policy: Optional[CategoryPolicy] = None,
        split_enabled: bool = False,
    ):
        super().__init__()
        settings = settings or get_settings()
        if category_policy is None:
            category_policy = (
                CategoryPolicy.REQUIRED if settings.require_category else CategoryPolicy.OPTIONAL
            )

        self._directory = directory
        self._draft_sink = draft_sink
        self._audit = audit_logger or AuditLogger()
        self._validator = WizardValidator()
        self._clock = clock or scheduler or MonotonicClock()
        self._cooldown = settings.transition_cooldown_seconds
        self._retry_attempts = settings.persistence_retry_attempts
        self._retry_wait = settings.persistence_retry_wait_seconds

        self.amount_details = AmountDetailsState(
            category_policy=category_policy,
            default_currency=settings.default_currency,
        )
        self.participants = ParticipantState(
            current_user_id=current_user_id,
            min_participants=settings.min_split_participants,
            split_enabled=split_enabled,
        )
        self.split = SplitCalculationState(
            min_shares=settings.min_shares,
            max_shares=settings.max_shares,
            amount_tolerance=settings.amount_tolerance,
            percentage_tolerance=settings.percentage_tolerance,
        )

        self._amount_debouncer = Debouncer(
            self._publish_amount,
            settings.input_debounce_seconds,
            scheduler,
        )
        self.amount_details.subscribe(self._on_amount_details_change)
        self.participants.subscribe(self._on_participants_change)
        self.split.subscribe(self._publish)

        self.stage = WizardStage.AMOUNT
        self._transition_started_at: Optional[float] = None
        self.session_id = create_session_id()
        self._audit.log_session_started(self.session_id)

    # =========================================================================
    # CHANGE PROPAGATION
    # =========================================================================

    def _on_amount_details_change(self, change: StateChange) -> None:
        if change.field == "amount":
            self._amount_debouncer.trigger()
        else:
            self._publish(change)

    def _publish_amount(self) -> None:
        self._publish(StateChange(source="amount_details", field="amount"))

    def _on_participants_change(self, change: StateChange) -> None:
        # Inputs of people who left the split are dropped, newcomers get defaults
        stale = self.split.input_ids() - self.participants.participant_ids
        if stale:
            self.split.forget(stale)
        if self.stage == WizardStage.SPLIT and self.participants.split_enabled:
            self.split.initialize_defaults(
                self.participants.participant_ids, self.amount_details.amount
            )
        self._publish(change)

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def is_transitioning(self) -> bool:
        if self._transition_started_at is None:
            return False
        return self._clock.now() - self._transition_started_at < self._cooldown

    @property
    def split_enabled(self) -> bool:
        return self.participants.split_enabled

    @property
    def calculated_splits(self) -> dict[PersonId, SplitDetail]:
        return self.split.calculated_splits(
            self.amount_details.amount, self.participants.participant_ids
        )

    @property
    def is_balanced(self) -> bool:
        return self.split.is_balanced(
            self.amount_details.amount, self.participants.participant_ids
        )

    @property
    def remaining_amount(self) -> Money:
        return self.split.remaining_amount(
            self.amount_details.amount, self.participants.participant_ids
        )

    @property
    def can_finalize(self) -> bool:
        if not (self.amount_details.can_advance and self.participants.can_advance):
            return False
        return not self.split_enabled or self.is_balanced

    @property
    def can_advance(self) -> bool:
        """Guard of the current stage (the finalize gate on the last stage)."""
        if self.stage == WizardStage.AMOUNT:
            return self.amount_details.can_advance
        if self.stage == WizardStage.PARTICIPANTS:
            return self.participants.can_advance
        return self.can_finalize

    @property
    def validation_message(self) -> Optional[str]:
        """User-facing status for the current stage."""
        if self.stage == WizardStage.AMOUNT:
            return self.amount_details.validation_message
        if self.stage == WizardStage.PARTICIPANTS:
            return self.participants.validation_message
        if not self.split_enabled:
            return None
        return self.split.validation_message(
            self.amount_details.amount, self.participants.participant_ids
        )

    def validate(self, stage: Optional[WizardStage] = None) -> ValidationResult:
        """Issues of one stage, or of the whole draft when stage is None."""
        if stage == WizardStage.AMOUNT:
            return self._validator.validate_amount_details(self.amount_details)
        if stage == WizardStage.PARTICIPANTS:
            return self._validator.validate_participants(self.participants)
        if stage == WizardStage.SPLIT:
            return self._validator.validate_split(
                self.split, self.amount_details, self.participants
            )
        return self._validator.validate_draft(
            self.amount_details, self.participants, self.split
        )

    def participant_people(self) -> list[Person]:
        """Participants resolved through the directory, in display order."""
        if self._directory is None:
            return []
        people = []
        for person_id in self.participants.ordered_participant_ids:
            person = self._directory.person(person_id)
            if person is not None:
                people.append(person)
        return people

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def _begin_transition(self, to_stage: WizardStage) -> None:
        self.stage = to_stage
        self._transition_started_at = self._clock.now()
        self._notify("stage")

    def advance(self) -> ActionResult:
        """
        Move to the next stage if the current stage's guard holds.

        Refusals leave the stage unchanged and say why.
        """
        if self.is_transitioning:
            return ActionResult.refused(Advisory.TRANSITION_IN_PROGRESS)
        if self.stage == WizardStage.SPLIT:
            return ActionResult.refused(Advisory.AT_LAST_STAGE)

        if not self.can_advance:
            message = self.validation_message
            self._audit.log_advance_blocked(
                self.session_id,
                self.stage.value,
                Advisory.STAGE_INCOMPLETE.value,
                message,
            )
            return ActionResult.refused(Advisory.STAGE_INCOMPLETE, message)

        if self.stage == WizardStage.PARTICIPANTS and self.split_enabled:
            self.split.initialize_defaults(
                self.participants.participant_ids, self.amount_details.amount
            )

        from_stage = self.stage
        self._begin_transition(WizardStage(from_stage.value + 1))
        self._audit.log_stage_advanced(self.session_id, from_stage.value, self.stage.value)
        return ActionResult.ok()

    def retreat(self) -> ActionResult:
        """Go back one stage. No guard, only the transition cooldown."""
        if self.is_transitioning:
            return ActionResult.refused(Advisory.TRANSITION_IN_PROGRESS)
        if self.stage == WizardStage.AMOUNT:
            return ActionResult.refused(Advisory.AT_FIRST_STAGE)

        from_stage = self.stage
        self._begin_transition(WizardStage(from_stage.value - 1))
        self._audit.log_stage_retreated(self.session_id, from_stage.value, self.stage.value)
        return ActionResult.ok()

    # =========================================================================
    # FACADE MUTATIONS
    # =========================================================================

    def set_amount(self, raw: str) -> None:
        self.amount_details.set_amount(raw)

    def _check_person(self, person_id: PersonId) -> None:
        if self._directory is not None and self._directory.person(person_id) is None:
            raise UnknownPersonError(person_id)

    def _check_participant(self, person_id: PersonId) -> None:
        if not self.participants.is_participant(person_id):
            raise UnknownParticipantError(person_id)

    def set_split_enabled(self, enabled: bool) -> None:
        self.participants.set_split_enabled(enabled)

    def add_participant(self, person_id: PersonId) -> ActionResult:
        self._check_person(person_id)
        return self.participants.add_participant(person_id)

    def remove_participant(self, person_id: PersonId) -> ActionResult:
        result = self.participants.remove_participant(person_id)
        if not result:
            self._audit.log_participant_removal_refused(
                self.session_id, person_id, self.participants.participant_count
            )
        return result

    def toggle_participant(self, person_id: PersonId) -> ActionResult:
        if self.participants.is_participant(person_id):
            return self.remove_participant(person_id)
        return self.add_participant(person_id)

    def select_payer(self, person_id: PersonId) -> None:
        self._check_person(person_id)
        self.participants.select_payer(person_id)

    def select_group(self, group_id: str) -> None:
        """
        Bulk-add a directory group's members.

        Raises:
            ContractViolationError: no directory configured
            UnknownGroupError: the directory does not know group_id
        """
        if self._directory is None:
            raise ContractViolationError("select_group needs a people directory")
        group = self._directory.group(group_id)
        if group is None:
            raise UnknownGroupError(group_id)
        self.participants.select_group(group.members, group_id=group.id)

    def set_method(self, method: SplitMethod) -> None:
        """Switch split method; fresh defaults are filled for every participant."""
        previous = self.split.method
        if self.split.set_method(method):
            self._audit.log_split_method_changed(
                self.session_id, previous.value, self.split.method.value
            )
        self.split.initialize_defaults(
            self.participants.participant_ids, self.amount_details.amount
        )

    def update_percentage(self, person_id: PersonId, value: object):
        self._check_participant(person_id)
        return self.split.update_percentage(person_id, value)

    def update_amount(self, person_id: PersonId, value: object):
        self._check_participant(person_id)
        return self.split.update_amount(person_id, value)

    def update_shares(self, person_id: PersonId, count: object):
        self._check_participant(person_id)
        return self.split.update_shares(person_id, count)

    def update_adjustment(self, person_id: PersonId, value: object):
        self._check_participant(person_id)
        return self.split.update_adjustment(person_id, value)

    # =========================================================================
    # FINALIZE / RESET
    # =========================================================================

    def _build_draft(self) -> TransactionDraft:
        details = self.amount_details
        split_on = self.split_enabled
        return TransactionDraft(
            type=details.transaction_type,
            amount=details.amount,
            currency_code=details.currency_code,
            name=details.name.strip(),
            notes=details.notes.strip(),
            category=details.category,
            transaction_date=details.transaction_date,
            is_split=split_on,
            payer=self.participants.payer_id if split_on else None,
            participants=sorted(self.participants.participant_ids) if split_on else [],
            method=self.split.method if split_on else None,
            splits=self.calculated_splits if split_on else None,
        )

    def _save_draft(self, draft: TransactionDraft) -> None:
        """Hand the draft to the sink, retrying transient failures only."""
        for attempt in Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._retry_wait, max=10),
            retry=retry_if_exception_type(TransientPersistenceError),
            reraise=True,
        ):
            with attempt:
                self._draft_sink.save_draft(draft)

    def finalize(self) -> FinalizeResult:
        """
        Produce the immutable TransactionDraft and hand it to the sink.

        Refused (with the blocking issues) unless stage 1 and stage 2 guards
        hold and, in split mode, the split is balanced.

        Raises:
            PersistenceError: the draft sink rejected the draft
        """
        self._amount_debouncer.flush()
        validation = self.validate()

        if not self.can_finalize:
            stages_ok = self.amount_details.can_advance and self.participants.can_advance
            advisory = Advisory.SPLIT_UNBALANCED if stages_ok else Advisory.STAGE_INCOMPLETE
            errors = [i for i in validation.issues if i.severity == "error"]
            self._audit.log_finalize_blocked(
                self.session_id,
                advisory.value,
                [i.model_dump() for i in errors],
            )
            return FinalizeResult(
                accepted=False,
                advisory=advisory,
                message=validation.first_message,
                issues=errors,
            )

        draft = self._build_draft()
        self._audit.log_draft_finalized(
            self.session_id,
            draft.id,
            str(draft.amount),
            draft.is_split,
            len(draft.participants),
        )

        if self._draft_sink is not None:
            try:
                self._save_draft(draft)
            except PersistenceError as e:
                self._audit.log_persistence_failed(self.session_id, draft.id, str(e))
                raise
            self._audit.log_draft_persisted(self.session_id, draft.id)

        return FinalizeResult(accepted=True, draft=draft, issues=validation.issues)

    def reset(self) -> None:
        """Abandon the session: every component back to its initial empty state."""
        self.amount_details.reset()
        # A pending amount edit belongs to the abandoned session
        self._amount_debouncer.cancel()
        self.participants.reset()
        self.split.reset()
        self.stage = WizardStage.AMOUNT
        self._transition_started_at = None

        previous = self.session_id
        self.session_id = create_session_id()
        self._audit.log_session_reset(previous, self.session_id)
        self._notify("reset")
