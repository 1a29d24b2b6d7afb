"""
Submission validation for the Ledger Desk posting engine.

Each transaction type has its own shape: income and expense move money on a
single account, a transfer moves it between two. The shape is enforced here,
at the boundary, so the posting code can rely on the accounts it needs being
present.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.domain.entities import Currency, Transaction, TransactionType
from src.domain.exceptions import FieldError, ValidationException

from .settings import LedgerSettings, ledger_settings

# Numeric(15, 2) column capacity
MAX_AMOUNT = Decimal("9999999999999.99")


class Requirement(str, Enum):
    REQUIRED = "required"
    FORBIDDEN = "forbidden"


ACCOUNT_RULES: Dict[TransactionType, Dict[str, Requirement]] = {
    TransactionType.INCOME: {
        "from_account_id": Requirement.REQUIRED,
        "to_account_id": Requirement.FORBIDDEN,
    },
    TransactionType.EXPENSE: {
        "from_account_id": Requirement.REQUIRED,
        "to_account_id": Requirement.FORBIDDEN,
    },
    TransactionType.TRANSFER: {
        "from_account_id": Requirement.REQUIRED,
        "to_account_id": Requirement.REQUIRED,
    },
}

# Fields a submitter may set or change.
EDITABLE_FIELDS = frozenset(
    {
        "type",
        "amount",
        "currency",
        "conversion_rate",
        "company_id",
        "category_id",
        "client_id",
        "from_account_id",
        "to_account_id",
        "description",
    }
)

CONVERSION_INPUTS = frozenset({"amount", "currency", "conversion_rate"})


@dataclass(frozen=True)
class TransactionDraft:
    """The submitter-controlled fields of a transaction, before persistence."""

    type: TransactionType
    amount: Decimal
    currency: Currency
    company_id: Optional[UUID]
    conversion_rate: Optional[Decimal] = None
    from_account_id: Optional[UUID] = None
    to_account_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    description: Optional[str] = None

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        return cls(**{name: getattr(transaction, name) for name in EDITABLE_FIELDS})

    def merge(
        self,
        changes: Dict[str, Any],
        settings: LedgerSettings = ledger_settings,
    ) -> "TransactionDraft":
        """
        Apply a partial update.

        Switching to the base currency without naming a rate drops the
        stored rate, since a base-currency transaction carries none.
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationException(
                [FieldError(field=name, message="field cannot be changed") for name in sorted(unknown)]
            )

        merged = replace(self, **changes)
        if (
            "currency" in changes
            and "conversion_rate" not in changes
            and merged.currency == settings.base_currency
        ):
            merged = replace(merged, conversion_rate=None)
        return merged


def _excess_places(value: Decimal, places: int) -> bool:
    return value.normalize().as_tuple().exponent < -places


def validate_draft(
    draft: TransactionDraft,
    settings: LedgerSettings = ledger_settings,
) -> List[FieldError]:
    """
    Check a draft against the rules for its type and currency.

    Args:
        draft: The transaction fields to check
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        Field-level errors; empty when the draft is valid
    """
    errors: List[FieldError] = []

    if draft.company_id is None:
        errors.append(FieldError("company_id", "company_id is required"))

    amount = draft.amount
    if isinstance(amount, float):
        errors.append(FieldError("amount", "amount must be a decimal, not a float"))
    elif not amount.is_finite():
        errors.append(FieldError("amount", "amount must be a finite number"))
    elif amount <= 0:
        errors.append(FieldError("amount", "amount must be positive"))
    elif amount > MAX_AMOUNT:
        errors.append(FieldError("amount", f"amount must not exceed {MAX_AMOUNT}"))
    elif _excess_places(amount, settings.amount_places):
        errors.append(
            FieldError(
                "amount",
                f"amount must have at most {settings.amount_places} decimal places",
            )
        )

    if draft.currency not in (settings.base_currency, settings.foreign_currency):
        errors.append(
            FieldError("currency", f"currency {draft.currency.value} is not supported")
        )
    elif draft.currency == settings.foreign_currency:
        rate = draft.conversion_rate
        if rate is None:
            errors.append(
                FieldError(
                    "conversion_rate",
                    f"conversion_rate is required for {draft.currency.value} transactions",
                )
            )
        elif isinstance(rate, float) or not rate.is_finite():
            errors.append(
                FieldError("conversion_rate", "conversion_rate must be a finite decimal")
            )
        elif rate <= 0:
            errors.append(FieldError("conversion_rate", "conversion_rate must be positive"))
        elif _excess_places(rate, settings.rate_places):
            errors.append(
                FieldError(
                    "conversion_rate",
                    f"conversion_rate must have at most {settings.rate_places} decimal places",
                )
            )
    elif draft.conversion_rate is not None:
        errors.append(
            FieldError(
                "conversion_rate",
                f"conversion_rate must be omitted for {draft.currency.value} transactions",
            )
        )

    for field_name, requirement in ACCOUNT_RULES[draft.type].items():
        value = getattr(draft, field_name)
        if requirement is Requirement.REQUIRED and value is None:
            errors.append(
                FieldError(field_name, f"{field_name} is required for {draft.type.value}")
            )
        elif requirement is Requirement.FORBIDDEN and value is not None:
            errors.append(
                FieldError(field_name, f"{field_name} is not allowed for {draft.type.value}")
            )

    if (
        draft.type is TransactionType.TRANSFER
        and draft.from_account_id is not None
        and draft.from_account_id == draft.to_account_id
    ):
        errors.append(
            FieldError("to_account_id", "to_account_id must differ from from_account_id")
        )

    return errors


def ensure_valid(
    draft: TransactionDraft,
    settings: LedgerSettings = ledger_settings,
) -> None:
    """Raise ValidationException listing every problem with the draft."""
    errors = validate_draft(draft, settings)
    if errors:
        raise ValidationException(errors)
