"""Transaction-related Pydantic schemas."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.domain.entities import Currency, TransactionStatus, TransactionType

# Fields that may be omitted from a PATCH but never set to null.
NON_NULLABLE_FIELDS = ("type", "amount", "currency", "company_id")


def _strip_description(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class CreateTransactionSchema(BaseModel):
    """Schema for POST /v1/transactions request body."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "type": "income",
                    "amount": "100.00",
                    "currency": "USD",
                    "conversion_rate": "83.50",
                    "company_id": "6f1c1a3e-1d2b-4c53-9e38-6a1f9f3d2b10",
                    "from_account_id": "0b5d7c0e-93d2-4b9e-8a4f-1f0f3f8a2c11",
                    "description": "Consulting invoice #42",
                }
            ]
        },
    )

    type: TransactionType = Field(..., description="income, expense or transfer")
    amount: Decimal = Field(
        ...,
        description="Amount in the transaction currency (positive, 2 dp)",
        examples=["100.00"],
    )
    currency: Currency = Field(Currency.INR, description="Currency the amount is in")
    conversion_rate: Optional[Decimal] = Field(
        None,
        description="Base units per one foreign unit; required for USD",
        examples=["83.50"],
    )
    company_id: Optional[UUID] = Field(None, description="Company to book against")
    category_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    from_account_id: Optional[UUID] = Field(
        None,
        description="Account credited (income), debited (expense) or transferred from",
    )
    to_account_id: Optional[UUID] = Field(None, description="Transfer destination")
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: Optional[str]) -> Optional[str]:
        return _strip_description(v)


class UpdateTransactionSchema(BaseModel):
    """
    Schema for PATCH /v1/transactions/{id} request body.

    Only the fields present in the body are changed.
    """

    model_config = ConfigDict(extra="forbid")

    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    currency: Optional[Currency] = None
    conversion_rate: Optional[Decimal] = None
    company_id: Optional[UUID] = None
    category_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    from_account_id: Optional[UUID] = None
    to_account_id: Optional[UUID] = None
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator("description")
    @classmethod
    def normalize_description(cls, v: Optional[str]) -> Optional[str]:
        return _strip_description(v)

    @model_validator(mode="after")
    def reject_nulls(self) -> "UpdateTransactionSchema":
        for name in NON_NULLABLE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class TransactionResponseSchema(BaseModel):
    """Schema for a single transaction. Money is serialized as strings."""

    transaction_id: str
    type: TransactionType
    status: TransactionStatus
    amount: str = Field(..., examples=["100.00"])
    currency: Currency
    conversion_rate: Optional[str] = Field(None, examples=["83.5000"])
    converted_base_amount: str = Field(
        ...,
        description="Amount in the base currency",
        examples=["8350.00"],
    )
    company_id: str
    category_id: Optional[str] = None
    client_id: Optional[str] = None
    from_account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    owner_id: str
    description: Optional[str] = None
    created_at: str = Field(..., description="ISO 8601 timestamp")
    updated_at: str = Field(..., description="ISO 8601 timestamp")


class AccountResponseSchema(BaseModel):
    """Schema for a bank account and its posted balance."""

    account_id: str
    name: str
    owner_id: str
    initial_balance: str = Field(..., examples=["1000.00"])
    current_balance: str = Field(..., examples=["1250.00"])
