"""
Wizard exceptions.

Only caller bugs raise. Anything a user can cause through the UI is coerced,
clamped or refused with an ActionResult instead.
"""


class WizardError(Exception):
    """Base exception for the wizard core."""
    pass


class ContractViolationError(WizardError):
    """The caller broke a precondition of the wizard API."""
    pass


class UnknownParticipantError(ContractViolationError):
    """An operation named a person who is not a current participant."""

    def __init__(self, person_id: str):
        self.person_id = person_id
        super().__init__(f"{person_id!r} is not a participant of this transaction")


class UnknownPersonError(ContractViolationError):
    """The directory does not know this person id."""

    def __init__(self, person_id: str):
        self.person_id = person_id
        super().__init__(f"{person_id!r} is not in the people directory")


class UnknownGroupError(ContractViolationError):
    """The directory does not know this group id."""

    def __init__(self, group_id: str):
        self.group_id = group_id
        super().__init__(f"{group_id!r} is not in the people directory")


class InactiveSplitMethodError(ContractViolationError):
    """A split input was edited that the active method does not use."""

    def __init__(self, active_method: str, attempted: str):
        self.active_method = active_method
        self.attempted = attempted
        super().__init__(
            f"Cannot edit {attempted} while the split method is {active_method}"
        )
