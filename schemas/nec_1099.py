"""Field aliases for Form 1099-NEC (Nonemployee Compensation)."""

from __future__ import annotations

from .base import COMMON_FEDERAL_WITHHOLDING, FEDERAL_WITHHOLDING, NONEMPLOYEE_COMPENSATION, FormSchema
from .documents import DocumentType
from .payer import PAYER_FIELDS

SCHEMA = FormSchema(
    document_type=DocumentType.NEC_1099,
    **PAYER_FIELDS,
    amounts={
        NONEMPLOYEE_COMPENSATION: (
            "nonemployeeCompensation",
            "NonemployeeCompensation",
            "box_1_nonemployee_compensation",
            "box1",
        ),
        FEDERAL_WITHHOLDING: COMMON_FEDERAL_WITHHOLDING + ("box_4_federal_income_tax_withheld", "box4"),
    },
)
