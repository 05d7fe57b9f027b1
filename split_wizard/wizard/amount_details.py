"""
Stage 1 state: amount, name, category.

The amount is kept twice: the raw text as typed (so the field can be
redisplayed) and the parsed Money used by every calculation.
"""

from datetime import date
from typing import Optional

from split_wizard.config import get_settings
from split_wizard.models.money import Money
from split_wizard.models.transaction import (
    CategoryPolicy,
    TransactionCategory,
    TransactionType,
)
from split_wizard.wizard.observable import Observable


class AmountDetailsState(Observable):
    """
    Basic details of the transaction.

    Nothing here raises for user input: unparseable or negative amounts
    silently become zero and simply keep can_advance False.
    """

    _source = "amount_details"

    def __init__(
        self,
        category_policy: Optional[CategoryPolicy] = None,
        default_currency: Optional[str] = None,
    ):
        super().__init__()
        settings = get_settings()
        if category_policy is None:
            category_policy = (
                CategoryPolicy.REQUIRED if settings.require_category else CategoryPolicy.OPTIONAL
            )
        self.category_policy = category_policy
        self._default_currency = default_currency or settings.default_currency
        self._clear()

    def _clear(self) -> None:
        self.amount_text: str = ""
        self.amount: Money = Money.zero()
        self.name: str = ""
        self.notes: str = ""
        self.category: Optional[TransactionCategory] = None
        self.transaction_type: TransactionType = TransactionType.EXPENSE
        self.currency_code: str = self._default_currency
        self.transaction_date: date = date.today()

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def set_amount(self, raw: str) -> None:
        self.amount_text = raw if isinstance(raw, str) else str(raw)
        self.amount = Money.parse(raw)
        self._notify("amount")

    def set_name(self, name: str) -> None:
        self.name = name or ""
        self._notify("name")

    def set_category(self, category: Optional[TransactionCategory]) -> None:
        self.category = TransactionCategory(category) if category is not None else None
        self._notify("category")

    def set_notes(self, notes: str) -> None:
        self.notes = notes or ""
        self._notify("notes")

    def set_transaction_type(self, transaction_type: TransactionType) -> None:
        self.transaction_type = TransactionType(transaction_type)
        self._notify("transaction_type")

    def set_transaction_date(self, value: date) -> None:
        self.transaction_date = value
        self._notify("transaction_date")

    def set_currency(self, code: str) -> bool:
        """
        Switch the currency code.

        Returns False (and keeps the current code) for anything that is not
        three ASCII letters.
        """
        candidate = (code or "").strip().upper()
        if len(candidate) != 3 or not candidate.isascii() or not candidate.isalpha():
            return False
        self.currency_code = candidate
        self._notify("currency_code")
        return True

    def reset(self) -> None:
        self._clear()
        self._notify("reset")

    # =========================================================================
    # GUARDS
    # =========================================================================

    @property
    def has_name(self) -> bool:
        return bool(self.name.strip())

    @property
    def category_satisfied(self) -> bool:
        return self.category_policy == CategoryPolicy.OPTIONAL or self.category is not None

    @property
    def can_advance(self) -> bool:
        return not self.amount.is_zero and self.has_name and self.category_satisfied

    @property
    def validation_message(self) -> Optional[str]:
        """First unmet requirement, phrased for the user."""
        if self.amount.is_zero:
            return "Enter an amount greater than zero"
        if not self.has_name:
            return "Enter a name for this transaction"
        if not self.category_satisfied:
            return "Pick a category"
        return None
