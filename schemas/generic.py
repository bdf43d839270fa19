"""Fallback aliases for document types without a dedicated schema."""

from __future__ import annotations

from .base import COMMON_FEDERAL_WITHHOLDING, FEDERAL_WITHHOLDING, INCOME_AMOUNT, FormSchema
from .documents import DocumentType
from .payer import PAYER_FIELDS

SCHEMA = FormSchema(
    document_type=DocumentType.GENERIC,
    **PAYER_FIELDS,
    amounts={
        INCOME_AMOUNT: ("incomeAmount", "amount", "totalAmount"),
        FEDERAL_WITHHOLDING: COMMON_FEDERAL_WITHHOLDING + ("taxWithheld",),
    },
)
