"""Field aliases for Form 1099-INT (Interest Income)."""

from __future__ import annotations

from .base import (
    COMMON_FEDERAL_WITHHOLDING,
    EARLY_WITHDRAWAL_PENALTY,
    FEDERAL_WITHHOLDING,
    INTEREST_INCOME,
    TAX_EXEMPT_INTEREST,
    FormSchema,
)
from .documents import DocumentType
from .payer import PAYER_FIELDS

SCHEMA = FormSchema(
    document_type=DocumentType.INT_1099,
    **PAYER_FIELDS,
    amounts={
        INTEREST_INCOME: ("interestIncome", "InterestIncome", "box_1_interest_income", "box1"),
        EARLY_WITHDRAWAL_PENALTY: ("earlyWithdrawalPenalty", "box_2_early_withdrawal_penalty", "box2"),
        TAX_EXEMPT_INTEREST: ("taxExemptInterest", "box_8_tax_exempt_interest", "box8"),
        FEDERAL_WITHHOLDING: COMMON_FEDERAL_WITHHOLDING + ("box_4_federal_income_tax_withheld", "box4"),
    },
    informational=(EARLY_WITHDRAWAL_PENALTY,),
)
