"""Report Pydantic schemas."""

from pydantic import BaseModel, Field


class ProfitLossSchema(BaseModel):
    """Schema for GET /v1/reports/profit-loss response."""

    income: str = Field(..., examples=["8350.00"])
    expense: str = Field(..., examples=["1200.00"])
    net: str = Field(..., description="income - expense", examples=["7150.00"])


class GroupReportRowSchema(BaseModel):
    """One company, client or category with activity in the period."""

    id: str
    name: str
    income: str
    expense: str
    net: str


class AccountReportRowSchema(BaseModel):
    """One bank account with activity in the period."""

    id: str
    name: str
    income: str
    expense: str
    transfer_in: str
    transfer_out: str
    net: str = Field(
        ...,
        description="income - expense + transfer_in - transfer_out",
    )
