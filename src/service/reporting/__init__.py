"""
Reporting Module: pure rollups and exports over approved transactions
"""

from .models import ProfitLoss, GroupTotals, AccountTotals
from .aggregator import (
    summarize,
    group_totals,
    by_company,
    by_client,
    by_category,
    by_bank_account,
)
from .csv_export import CSV_HEADER, render_transactions_csv

__all__ = [
    "ProfitLoss",
    "GroupTotals",
    "AccountTotals",
    "summarize",
    "group_totals",
    "by_company",
    "by_client",
    "by_category",
    "by_bank_account",
    "CSV_HEADER",
    "render_transactions_csv",
]
