"""Declarative field-alias tables describing where each form keeps its values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .documents import DocumentType

Aliases = Tuple[str, ...]

# Canonical amount keys (FieldKey) used across schemas, matching and mapping.
WAGES = "wages"
FEDERAL_WITHHOLDING = "federal_withholding"
SOCIAL_SECURITY_WAGES = "social_security_wages"
MEDICARE_WAGES = "medicare_wages"
STATE_WAGES = "state_wages"
STATE_WITHHOLDING = "state_withholding"
INTEREST_INCOME = "interest_income"
EARLY_WITHDRAWAL_PENALTY = "early_withdrawal_penalty"
TAX_EXEMPT_INTEREST = "tax_exempt_interest"
ORDINARY_DIVIDENDS = "ordinary_dividends"
QUALIFIED_DIVIDENDS = "qualified_dividends"
CAPITAL_GAIN_DISTRIBUTIONS = "capital_gain_distributions"
RENTS = "rents"
ROYALTIES = "royalties"
OTHER_INCOME = "other_income"
NONEMPLOYEE_COMPENSATION = "nonemployee_compensation"
INCOME_AMOUNT = "income_amount"

COMMON_FEDERAL_WITHHOLDING: Aliases = (
    "federalTaxWithheld",
    "FederalIncomeTaxWithheld",
    "federal_tax_withheld",
    "federal_income_tax_withheld",
    "federalWithholding",
)


@dataclass(frozen=True)
class AddressParts:
    street: Aliases = ()
    city: Aliases = ()
    state: Aliases = ()
    zip: Aliases = ()


@dataclass(frozen=True)
class FormSchema:
    """Where a form keeps its issuer, recipient and amount fields.

    Each alias is either a flat key (matched ignoring case and punctuation)
    or a dotted path into nested objects (``Employee.Name``).
    """

    document_type: DocumentType
    issuer_name: Aliases = ()
    issuer_tax_id: Aliases = ()
    issuer_address: Aliases = ()
    recipient_name: Aliases = ()
    recipient_tax_id: Aliases = ()
    recipient_address: Aliases = ()
    recipient_address_parts: AddressParts = field(default_factory=AddressParts)
    spouse_name: Aliases = ("spouseName", "Spouse.Name")
    amounts: Dict[str, Aliases] = field(default_factory=dict)
    # Amounts that are informational only; normalized but never mapped to a line.
    informational: Tuple[str, ...] = ()
