"""
Stage 3 state: the split method, its raw inputs and the derived breakdown.

DESIGN DECISION: Raw inputs are a tagged union - one record per method,
carrying only that method's field. Switching method swaps the record, so
stale inputs of another method cannot leak into a calculation.

Derived values (calculated_splits, is_balanced, ...) are pure functions of
the current inputs plus the total and participant set passed in. Nothing
derived is cached, so there is nothing to invalidate.

KNOWN GAPS (deliberately preserved, see DESIGN.md):
- Equally/Shares round each share to cents and do not redistribute the
  remainder, so the sum can differ from the total by a few cents.
- Adjustments floor each final amount at zero, which can push the sum above
  the total when a negative adjustment exceeds the base.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional

from split_wizard.config import get_settings
from split_wizard.models.money import CENT, Money, coerce_decimal
from split_wizard.models.transaction import (
    AdjustmentSplitInputs,
    ExactAmountSplitInputs,
    PercentageSplitInputs,
    PersonId,
    ShareSplitInputs,
    SplitDetail,
    SplitInputs,
    SplitMethod,
    empty_inputs_for,
)
from split_wizard.wizard.errors import InactiveSplitMethodError
from split_wizard.wizard.observable import Observable


HUNDRED = Decimal(100)


class SplitCalculationState(Observable):
    """Chosen split method, per-participant inputs, and the split engine."""

    _source = "split"

    def __init__(
        self,
        min_shares: Optional[int] = None,
        max_shares: Optional[int] = None,
        amount_tolerance: Optional[Decimal] = None,
        percentage_tolerance: Optional[Decimal] = None,
    ):
        super().__init__()
        settings = get_settings()
        self.min_shares = min_shares if min_shares is not None else settings.min_shares
        self.max_shares = max_shares if max_shares is not None else settings.max_shares
        self.amount_tolerance = (
            amount_tolerance if amount_tolerance is not None else settings.amount_tolerance
        )
        self.percentage_tolerance = (
            percentage_tolerance
            if percentage_tolerance is not None
            else settings.percentage_tolerance
        )
        self._inputs: SplitInputs = empty_inputs_for(SplitMethod.EQUALLY)

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def method(self) -> SplitMethod:
        return self._inputs.method

    @property
    def inputs(self) -> SplitInputs:
        """A copy of the raw inputs; editing it does not touch the state."""
        return self._inputs.model_copy(deep=True)

    def _entries(self) -> Optional[dict]:
        if isinstance(self._inputs, PercentageSplitInputs):
            return self._inputs.percentages
        if isinstance(self._inputs, ExactAmountSplitInputs):
            return self._inputs.amounts
        if isinstance(self._inputs, ShareSplitInputs):
            return self._inputs.shares
        if isinstance(self._inputs, AdjustmentSplitInputs):
            return self._inputs.adjustments
        return None

    def has_input(self, person_id: PersonId) -> bool:
        entries = self._entries()
        return entries is not None and person_id in entries

    def input_ids(self) -> frozenset[PersonId]:
        """Everyone with a raw input under the active method."""
        entries = self._entries()
        return frozenset(entries) if entries is not None else frozenset()

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def set_method(self, method: SplitMethod) -> bool:
        """
        Switch split method, discarding every raw input of the previous one.

        Re-selecting the active method keeps the inputs. Returns True when the
        method actually changed. Callers fill defaults afterwards with
        initialize_defaults().
        """
        method = SplitMethod(method)
        if method == self.method:
            return False
        self._inputs = empty_inputs_for(method)
        self._notify("method")
        return True

    def _require(self, method: SplitMethod, field: str) -> None:
        if self.method != method:
            raise InactiveSplitMethodError(self.method.value, field)

    def update_percentage(self, person_id: PersonId, value: object) -> Decimal:
        """Store a percentage clamped to [0, 100]; returns the stored value."""
        self._require(SplitMethod.PERCENTAGES, "percentage")
        clamped = min(HUNDRED, max(Decimal(0), coerce_decimal(value)))
        self._inputs.percentages[person_id] = clamped
        self._notify("percentage", (person_id,))
        return clamped

    def update_amount(self, person_id: PersonId, value: object) -> Money:
        """Store an exact amount; negative or unparseable input becomes zero."""
        self._require(SplitMethod.EXACT_AMOUNTS, "amount")
        amount = Money.parse(value)
        self._inputs.amounts[person_id] = amount
        self._notify("amount", (person_id,))
        return amount

    def update_shares(self, person_id: PersonId, count: object) -> int:
        """Store a share count clamped to [min_shares, max_shares]."""
        self._require(SplitMethod.SHARES, "shares")
        # Clamp as Decimal; int() of a huge exponent never finishes
        value = coerce_decimal(count)
        shares = int(min(Decimal(self.max_shares), max(Decimal(self.min_shares), value)))
        self._inputs.shares[person_id] = shares
        self._notify("shares", (person_id,))
        return shares

    def update_adjustment(self, person_id: PersonId, value: object) -> Decimal:
        """Store a signed adjustment rounded to cents; unrepresentable input becomes zero."""
        self._require(SplitMethod.ADJUSTMENTS, "adjustment")
        try:
            adjustment = coerce_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # Too many digits for the decimal context
            adjustment = Decimal(0)
        self._inputs.adjustments[person_id] = adjustment
        self._notify("adjustment", (person_id,))
        return adjustment

    def initialize_defaults(self, participants: Iterable[PersonId], total: Money) -> None:
        """
        Fill in a starting value for every participant without one.

        CRITICAL: Existing entries are never overwritten - this runs on every
        recompute and must not fight what the user typed.
        """
        ids = sorted(set(participants))
        entries = self._entries()
        if not ids or entries is None:
            return

        n = len(ids)
        filled = []
        for person_id in ids:
            if person_id in entries:
                continue
            if self.method == SplitMethod.EXACT_AMOUNTS:
                entries[person_id] = Money.from_decimal(total.amount / n)
            elif self.method == SplitMethod.PERCENTAGES:
                entries[person_id] = HUNDRED / n
            elif self.method == SplitMethod.SHARES:
                entries[person_id] = self.min_shares
            elif self.method == SplitMethod.ADJUSTMENTS:
                entries[person_id] = Decimal(0)
            filled.append(person_id)

        if filled:
            self._notify("defaults", tuple(filled))

    def forget(self, person_ids: Iterable[PersonId]) -> None:
        """Drop the inputs of people who left the participant set."""
        entries = self._entries()
        if entries is None:
            return
        dropped = tuple(p for p in person_ids if entries.pop(p, None) is not None)
        if dropped:
            self._notify("forget", dropped)

    def reset(self) -> None:
        self._inputs = empty_inputs_for(SplitMethod.EQUALLY)
        self._notify("reset")

    # =========================================================================
    # CALCULATION
    # =========================================================================

    def total_shares(self, participants: Iterable[PersonId]) -> int:
        shares = self._inputs.shares if isinstance(self._inputs, ShareSplitInputs) else {}
        return sum(shares.get(p, self.min_shares) for p in set(participants))

    def _total_adjustments(self, ids: Iterable[PersonId]) -> Decimal:
        if not isinstance(self._inputs, AdjustmentSplitInputs):
            return Decimal(0)
        return sum((self._inputs.adjustments.get(p, Decimal(0)) for p in ids), Decimal(0))

    def calculated_splits(
        self,
        total: Money,
        participants: Iterable[PersonId],
    ) -> dict[PersonId, SplitDetail]:
        """
        Per-participant breakdown for the active method.

        Empty when there are no participants or the total is zero. Amounts
        are rounded half-up to cents individually.
        """
        ids = sorted(set(participants))
        if not ids or total.is_zero:
            return {}

        n = len(ids)
        t = total.amount
        inputs = self._inputs
        result: dict[PersonId, SplitDetail] = {}

        if isinstance(inputs, PercentageSplitInputs):
            for p in ids:
                pct = inputs.percentages.get(p, Decimal(0))
                result[p] = SplitDetail(
                    amount=Money.from_decimal(pct / HUNDRED * t),
                    percentage=pct,
                )

        elif isinstance(inputs, ExactAmountSplitInputs):
            for p in ids:
                amount = inputs.amounts.get(p, Money.zero())
                result[p] = SplitDetail(
                    amount=amount,
                    percentage=amount.amount / t * HUNDRED,
                )

        elif isinstance(inputs, ShareSplitInputs):
            total_shares = self.total_shares(ids)
            if total_shares <= 0:
                return {}
            for p in ids:
                shares = inputs.shares.get(p, self.min_shares)
                fraction = Decimal(shares) / total_shares
                result[p] = SplitDetail(
                    amount=Money.from_decimal(fraction * t),
                    percentage=fraction * HUNDRED,
                    shares=shares,
                )

        elif isinstance(inputs, AdjustmentSplitInputs):
            base = (t - self._total_adjustments(ids)) / n
            for p in ids:
                adjustment = inputs.adjustments.get(p, Decimal(0))
                final = max(Decimal(0), base + adjustment)
                result[p] = SplitDetail(
                    amount=Money.from_decimal(final),
                    percentage=final / t * HUNDRED,
                    adjustment=adjustment,
                )

        else:
            share = Money.from_decimal(t / n)
            pct = HUNDRED / n
            for p in ids:
                result[p] = SplitDetail(amount=share, percentage=pct)

        return result

    def is_balanced(self, total: Money, participants: Iterable[PersonId]) -> bool:
        ids = sorted(set(participants))
        if not ids or total.is_zero:
            return False

        inputs = self._inputs
        if isinstance(inputs, ExactAmountSplitInputs):
            entered = sum((inputs.amounts.get(p, Money.zero()) for p in ids), Money.zero())
            return abs(entered.amount - total.amount) < self.amount_tolerance
        if isinstance(inputs, PercentageSplitInputs):
            entered = sum((inputs.percentages.get(p, Decimal(0)) for p in ids), Decimal(0))
            return abs(entered - HUNDRED) < self.percentage_tolerance
        if isinstance(inputs, ShareSplitInputs):
            return self.total_shares(ids) > 0
        # Equally and Adjustments carry no sum constraint
        return True

    def allocated(self, total: Money, participants: Iterable[PersonId]) -> Money:
        """Sum of the calculated per-participant amounts."""
        splits = self.calculated_splits(total, participants)
        return sum((d.amount for d in splits.values()), Money.zero())

    def remaining_amount(self, total: Money, participants: Iterable[PersonId]) -> Money:
        """Unallocated part of the total, never negative."""
        allocated = self.allocated(total, participants)
        return Money(minor_units=max(0, total.minor_units - allocated.minor_units))

    def rounding_remainder(self, total: Money, participants: Iterable[PersonId]) -> Decimal:
        """total - allocated, signed, in major units; non-zero when cents do not divide evenly."""
        participants = list(participants)
        if not participants or total.is_zero:
            return Decimal(0)
        allocated = self.allocated(total, participants)
        return Decimal(total.minor_units - allocated.minor_units) / 100

    def validation_message(self, total: Money, participants: Iterable[PersonId]) -> str:
        """One-line status for the split stage footer."""
        ids = sorted(set(participants))
        n = len(ids)
        inputs = self._inputs

        if isinstance(inputs, ExactAmountSplitInputs):
            entered = sum((inputs.amounts.get(p, Money.zero()) for p in ids), Money.zero())
            diff = total.amount - entered.amount
            if abs(diff) < self.amount_tolerance:
                return "Amounts match total"
            if diff > 0:
                return f"{diff:.2f} remaining"
            return f"{-diff:.2f} over"

        if isinstance(inputs, PercentageSplitInputs):
            entered = sum((inputs.percentages.get(p, Decimal(0)) for p in ids), Decimal(0))
            if abs(entered - HUNDRED) < self.percentage_tolerance:
                return "Percentages add up to 100%"
            return f"Total: {entered:.0f}% / 100%"

        if isinstance(inputs, ShareSplitInputs):
            shares = self.total_shares(ids)
            return f"{shares} share{'' if shares == 1 else 's'} total"

        if isinstance(inputs, AdjustmentSplitInputs):
            adjustments = self._total_adjustments(ids)
            sign = "+" if adjustments >= 0 else "-"
            return f"Adjustments: {sign}{abs(adjustments):.2f}"

        per_person = Money.from_decimal(total.amount / n) if n else Money.zero()
        return f"Split equally: {per_person} each"
