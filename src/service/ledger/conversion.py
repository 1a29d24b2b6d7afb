"""
Currency conversion to the base currency.

Every amount that reaches a balance or a report goes through
``convert_to_base`` first. Arithmetic is done on ``Decimal`` values only;
binary floats are refused so that rounding cannot drift across many
transactions.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from src.domain.entities import Currency
from src.domain.exceptions import ValidationException

from .settings import LedgerSettings, ledger_settings


def quantize_money(
    value: Decimal,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """Round a money value to the configured places, ties away from zero."""
    return value.quantize(settings.money_quantum, rounding=ROUND_HALF_UP)


def convert_to_base(
    amount: Decimal,
    currency: Currency,
    rate: Optional[Decimal] = None,
    settings: LedgerSettings = ledger_settings,
) -> Decimal:
    """
    Compute the base-currency amount of a transaction.

    Args:
        amount: Amount as entered
        currency: Currency the amount is in
        rate: Base units per one foreign unit; ignored for the base currency
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        ``amount`` unchanged for the base currency, otherwise
        ``amount * rate`` rounded half away from zero

    Raises:
        ValidationException: If the currency is foreign and the rate is
            missing or not strictly positive
        TypeError: If a float is passed for amount or rate
    """
    if isinstance(amount, float) or isinstance(rate, float):
        raise TypeError("amount and rate must be Decimal, not float")

    if currency == settings.base_currency:
        return amount

    if rate is None:
        raise ValidationException.single(
            "conversion_rate",
            f"conversion_rate is required for {currency.value} transactions",
        )
    if rate <= 0:
        raise ValidationException.single(
            "conversion_rate", "conversion_rate must be positive"
        )

    return quantize_money(amount * rate, settings)
