"""Form 1040 line-set: mapping of accepted documents and derived-line computation."""

from .compute import bracket_tax, compare_deductions, marginal_rate, recompute, standard_deduction, summarize
from .context import TaxYearContext, get_context_for_year, load_tax_year_config, supported_tax_years
from .lines import (
    DERIVED_LINES,
    INCOME_LINES,
    PAYMENT_LINES,
    FilingStatus,
    LineIdentity,
    TaxLineSet,
    empty_line_set,
    round_money,
)
from .mapper import (
    LINE_TABLES,
    document_lines,
    fold,
    income_entries,
    mapping_summary,
    replay,
    validate_for_mapping,
)
from .models import DeductionComparison, IncomeEntry, MappingRow, MappingValidation, TaxSummary

__all__ = [
    "DERIVED_LINES",
    "INCOME_LINES",
    "LINE_TABLES",
    "PAYMENT_LINES",
    "DeductionComparison",
    "FilingStatus",
    "IncomeEntry",
    "LineIdentity",
    "MappingRow",
    "MappingValidation",
    "TaxLineSet",
    "TaxSummary",
    "TaxYearContext",
    "bracket_tax",
    "compare_deductions",
    "document_lines",
    "empty_line_set",
    "fold",
    "get_context_for_year",
    "income_entries",
    "load_tax_year_config",
    "mapping_summary",
    "marginal_rate",
    "recompute",
    "replay",
    "round_money",
    "standard_deduction",
    "summarize",
    "supported_tax_years",
    "validate_for_mapping",
]
