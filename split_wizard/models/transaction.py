"""
Core Data Models for the Split Wizard

These models define the schemas for everything the wizard produces or reads:
- the closed vocabularies (split methods, categories, stages)
- the people directory records (Person, Group)
- the per-method split inputs and the derived per-participant breakdown
- the finalized TransactionDraft handed to persistence
- validation and action results returned to the caller

DESIGN DECISION: We use Pydantic v2. Records that leave the wizard
(SplitDetail, TransactionDraft) are frozen so nobody downstream can change
them behind the wizard's back.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from split_wizard.models.money import Money


PersonId = str


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class SplitMethod(str, Enum):
    """
    How the total is distributed among participants.

    The methods are mutually exclusive. Switching method discards every
    per-participant input entered for the previous one.
    """
    EQUALLY = "equally"
    PERCENTAGES = "percentages"
    EXACT_AMOUNTS = "exact_amounts"
    SHARES = "shares"
    ADJUSTMENTS = "adjustments"


class TransactionType(str, Enum):
    """Direction of the money."""
    EXPENSE = "expense"
    INCOME = "income"


class TransactionCategory(str, Enum):
    """Supported transaction categories."""
    FOOD = "food"
    DINING = "dining"
    GROCERIES = "groceries"
    TRANSPORTATION = "transportation"
    TRAVEL = "travel"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    BILLS = "bills"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    INCOME = "income"
    TRANSFER = "transfer"
    INVESTMENT = "investment"
    OTHER = "other"


class CategoryPolicy(str, Enum):
    """
    Whether stage 1 demands a category.

    Product variants disagree here, so it is a named policy rather than
    behavior hard-wired into the amount stage.
    """
    REQUIRED = "required"
    OPTIONAL = "optional"


class WizardStage(int, Enum):
    """The three wizard stages, in order."""
    AMOUNT = 1
    PARTICIPANTS = 2
    SPLIT = 3


class Advisory(str, Enum):
    """Why a structural operation was refused."""
    STAGE_INCOMPLETE = "stage_incomplete"
    TRANSITION_IN_PROGRESS = "transition_in_progress"
    AT_FIRST_STAGE = "at_first_stage"
    AT_LAST_STAGE = "at_last_stage"
    MINIMUM_PARTICIPANTS = "minimum_participants"
    SPLIT_UNBALANCED = "split_unbalanced"


# =============================================================================
# DIRECTORY RECORDS
# =============================================================================

class Person(BaseModel):
    """A person as exposed by the external directory."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: PersonId = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(default=None, max_length=254)


class Group(BaseModel):
    """A named set of people; selecting it bulk-adds its members."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    members: tuple[PersonId, ...] = Field(default_factory=tuple)


# =============================================================================
# SPLIT INPUTS - one variant per method
# =============================================================================

class EqualSplitInputs(BaseModel):
    """Equal split takes no per-participant input."""
    method: Literal[SplitMethod.EQUALLY] = SplitMethod.EQUALLY


class PercentageSplitInputs(BaseModel):
    method: Literal[SplitMethod.PERCENTAGES] = SplitMethod.PERCENTAGES
    percentages: dict[PersonId, Decimal] = Field(default_factory=dict)


class ExactAmountSplitInputs(BaseModel):
    method: Literal[SplitMethod.EXACT_AMOUNTS] = SplitMethod.EXACT_AMOUNTS
    amounts: dict[PersonId, Money] = Field(default_factory=dict)


class ShareSplitInputs(BaseModel):
    method: Literal[SplitMethod.SHARES] = SplitMethod.SHARES
    shares: dict[PersonId, int] = Field(default_factory=dict)


class AdjustmentSplitInputs(BaseModel):
    """Signed per-participant offsets from the equal base."""
    method: Literal[SplitMethod.ADJUSTMENTS] = SplitMethod.ADJUSTMENTS
    adjustments: dict[PersonId, Decimal] = Field(default_factory=dict)


SplitInputs = Annotated[
    Union[
        EqualSplitInputs,
        PercentageSplitInputs,
        ExactAmountSplitInputs,
        ShareSplitInputs,
        AdjustmentSplitInputs,
    ],
    Field(discriminator="method"),
]


_INPUT_TYPES: dict[SplitMethod, type] = {
    SplitMethod.EQUALLY: EqualSplitInputs,
    SplitMethod.PERCENTAGES: PercentageSplitInputs,
    SplitMethod.EXACT_AMOUNTS: ExactAmountSplitInputs,
    SplitMethod.SHARES: ShareSplitInputs,
    SplitMethod.ADJUSTMENTS: AdjustmentSplitInputs,
}


def empty_inputs_for(method: SplitMethod) -> SplitInputs:
    """Fresh, empty input record for a split method."""
    return _INPUT_TYPES[SplitMethod(method)]()


class SplitDetail(BaseModel):
    """
    The derived breakdown for one participant.

    Only the field belonging to the active method was entered by the user;
    the others are computed from it.
    """
    model_config = ConfigDict(frozen=True)

    amount: Money = Field(default_factory=Money.zero)
    percentage: Decimal = Field(default=Decimal(0))
    shares: int = Field(default=1, ge=1)
    adjustment: Decimal = Field(default=Decimal(0))


# =============================================================================
# TRANSACTION DRAFT
# =============================================================================

class TransactionDraft(BaseModel):
    """
    The finalized output of one wizard session.

    CRITICAL: Once produced, the draft belongs to the persistence
    collaborator. The wizard never mutates or stores it.

    Non-split drafts carry no payer, no participants, no method and no splits.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    type: TransactionType = TransactionType.EXPENSE
    amount: Money
    currency_code: str = Field(..., min_length=3, max_length=3)
    name: str = Field(..., min_length=1)
    notes: str = ""
    category: Optional[TransactionCategory] = None
    transaction_date: date
    is_split: bool = False
    payer: Optional[PersonId] = None
    participants: list[PersonId] = Field(default_factory=list)
    method: Optional[SplitMethod] = None
    splits: Optional[dict[PersonId, SplitDetail]] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the draft was finalized (UTC)",
    )

    def structural_dict(self) -> dict:
        """Everything except the identity and timestamp; equal for repeat finalizations."""
        return self.model_dump(exclude={"id", "created_at"})


# =============================================================================
# VALIDATION AND ACTION RESULTS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue",
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'below_minimum', 'unbalanced')",
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue",
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity",
    )


class ValidationResult(BaseModel):
    """
    Result of validating one stage (or the whole draft when stage is None).
    """

    stage: Optional[WizardStage] = None
    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_message(self) -> Optional[str]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue.message
        return None


class ActionResult(BaseModel):
    """
    Outcome of a structural operation (advance, retreat, remove, ...).

    Refusals are not errors: the state is left unchanged and the advisory
    tells the caller what to surface. Truthy iff the action was applied.
    """

    accepted: bool
    advisory: Optional[Advisory] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.accepted

    @classmethod
    def ok(cls) -> "ActionResult":
        return cls(accepted=True)

    @classmethod
    def refused(cls, advisory: Advisory, message: Optional[str] = None) -> "ActionResult":
        return cls(accepted=False, advisory=advisory, message=message)


class FinalizeResult(ActionResult):
    """ActionResult carrying the draft on success, or the blocking issues on refusal."""

    draft: Optional[TransactionDraft] = None
    issues: list[ValidationIssue] = Field(default_factory=list)
