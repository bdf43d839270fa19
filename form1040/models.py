from __future__ import annotations

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class MappingRow(BaseModel):
    source_field: str
    source_value: str
    target_line: str
    target_value: str
    description: str


class MappingValidation(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class IncomeEntry(BaseModel):
    income_type: str
    source: str
    amount: Decimal
    line: str
    document_id: Optional[str] = None


class TaxSummary(BaseModel):
    tax_year: int
    filing_status: str
    gross_income: Decimal
    adjusted_gross_income: Decimal
    deduction: Decimal
    taxable_income: Decimal
    tax: Decimal
    total_payments: Decimal
    refund: Decimal
    amount_owed: Decimal
    effective_rate: Decimal
    marginal_rate: Decimal


class DeductionComparison(BaseModel):
    standard_deduction: Decimal
    itemized_deduction: Decimal
    standard_tax: Decimal
    itemized_tax: Decimal
    recommended_method: Literal["standard", "itemized"]
    tax_savings: Decimal
    effective_standard_rate: Decimal
    effective_itemized_rate: Decimal


__all__ = ["DeductionComparison", "IncomeEntry", "MappingRow", "MappingValidation", "TaxSummary"]
