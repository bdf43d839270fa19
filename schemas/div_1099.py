"""Field aliases for Form 1099-DIV (Dividends and Distributions)."""

from __future__ import annotations

from .base import (
    CAPITAL_GAIN_DISTRIBUTIONS,
    COMMON_FEDERAL_WITHHOLDING,
    FEDERAL_WITHHOLDING,
    ORDINARY_DIVIDENDS,
    QUALIFIED_DIVIDENDS,
    FormSchema,
)
from .documents import DocumentType
from .payer import PAYER_FIELDS

SCHEMA = FormSchema(
    document_type=DocumentType.DIV_1099,
    **PAYER_FIELDS,
    amounts={
        ORDINARY_DIVIDENDS: ("ordinaryDividends", "totalOrdinaryDividends", "box_1a_total_ordinary_dividends", "box1a"),
        QUALIFIED_DIVIDENDS: ("qualifiedDividends", "box_1b_qualified_dividends", "box1b"),
        CAPITAL_GAIN_DISTRIBUTIONS: (
            "totalCapitalGain",
            "capitalGainDistributions",
            "box_2a_total_capital_gain_distributions",
            "box2a",
        ),
        FEDERAL_WITHHOLDING: COMMON_FEDERAL_WITHHOLDING + ("box_4_federal_income_tax_withheld", "box4"),
    },
)
