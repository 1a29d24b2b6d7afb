"""
Ledger Module: conversion, validation and posting rules for Ledger Desk
"""

from .settings import LedgerSettings, ledger_settings
from .conversion import convert_to_base, quantize_money
from .validation import (
    ACCOUNT_RULES,
    CONVERSION_INPUTS,
    EDITABLE_FIELDS,
    TransactionDraft,
    validate_draft,
    ensure_valid,
)
from .posting import PostingLeg, posting_legs, apply_leg

__all__ = [
    # Settings
    "LedgerSettings",
    "ledger_settings",
    # Conversion
    "convert_to_base",
    "quantize_money",
    # Validation
    "ACCOUNT_RULES",
    "CONVERSION_INPUTS",
    "EDITABLE_FIELDS",
    "TransactionDraft",
    "validate_draft",
    "ensure_valid",
    # Posting
    "PostingLeg",
    "posting_legs",
    "apply_leg",
]
