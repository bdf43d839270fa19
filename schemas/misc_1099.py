"""Field aliases for Form 1099-MISC (Miscellaneous Information)."""

from __future__ import annotations

from .base import (
    COMMON_FEDERAL_WITHHOLDING,
    FEDERAL_WITHHOLDING,
    OTHER_INCOME,
    RENTS,
    ROYALTIES,
    FormSchema,
)
from .documents import DocumentType
from .payer import PAYER_FIELDS

SCHEMA = FormSchema(
    document_type=DocumentType.MISC_1099,
    **PAYER_FIELDS,
    amounts={
        RENTS: ("rents", "box_1_rents", "box1"),
        ROYALTIES: ("royalties", "box_2_royalties", "box2"),
        OTHER_INCOME: ("otherIncome", "box_3_other_income", "box3"),
        FEDERAL_WITHHOLDING: COMMON_FEDERAL_WITHHOLDING + ("box_4_federal_income_tax_withheld", "box4"),
    },
)
