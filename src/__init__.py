"""
Ledger Desk - Transaction Approval & Posting Service

A FastAPI-based bookkeeping service that handles submission, approval and
rejection of income, expense and transfer transactions, posts approved
transactions to bank-account balances, and reports on posted activity.
"""

__version__ = "0.1.0"
