"""
Ledger Settings for the Ledger Desk posting engine.

Currency and precision parameters used when validating submissions and
converting them to the base currency.

Environment variables use the LEDGER_ prefix:
    LEDGER_BASE_CURRENCY=INR
    LEDGER_FOREIGN_CURRENCY=USD
    LEDGER_AMOUNT_PLACES=2

Usage:
    from src.service.ledger.settings import ledger_settings

    base = ledger_settings.base_currency

    # Or create custom settings for testing
    custom = LedgerSettings(rate_places=6)
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.entities import Currency


class LedgerSettings(BaseSettings):
    """
    Configurable parameters for conversion and validation.

    All settings can be overridden via environment variables with LEDGER_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_currency: Currency = Field(
        default=Currency.INR,
        description="Reporting currency; balances and reports are expressed in it",
    )
    foreign_currency: Currency = Field(
        default=Currency.USD,
        description="Currency that requires a manual conversion rate",
    )
    amount_places: int = Field(
        default=2,
        ge=0,
        le=6,
        description="Decimal places allowed on amounts and kept on converted amounts",
    )
    rate_places: int = Field(
        default=4,
        ge=0,
        le=10,
        description="Decimal places allowed on conversion rates",
    )

    @model_validator(mode="after")
    def validate_currencies(self) -> "LedgerSettings":
        if self.base_currency == self.foreign_currency:
            raise ValueError("base_currency and foreign_currency must differ")
        return self

    @property
    def money_quantum(self) -> Decimal:
        """Smallest representable money step, e.g. Decimal('0.01')."""
        return Decimal(1).scaleb(-self.amount_places)


@lru_cache
def get_ledger_settings() -> LedgerSettings:
    """Get cached ledger settings instance."""
    return LedgerSettings()


ledger_settings = get_ledger_settings()
