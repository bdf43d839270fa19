"""Recompute the derived Form 1040 lines from the input lines of a line-set."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, Optional

from .context import Bracket, TaxYearContext, get_context_for_year
from .lines import INCOME_LINES, PAYMENT_LINES, ZERO, FilingStatus, TaxLineSet, round_money
from .models import DeductionComparison, TaxSummary

logger = logging.getLogger(__name__)

RATE_PLACES = Decimal("0.0001")


def bracket_tax(taxable_income: Decimal, brackets: Iterable[Bracket]) -> Decimal:
    """Cumulative marginal tax over ascending ``(upper_bound, rate)`` brackets."""
    tax = ZERO
    lower = ZERO
    for upper, rate in brackets:
        if taxable_income <= lower:
            break
        top = taxable_income if upper is None else min(taxable_income, upper)
        tax += (top - lower) * rate
        if upper is None:
            break
        lower = upper
    return tax


def marginal_rate(taxable_income: Decimal, brackets: Iterable[Bracket]) -> Decimal:
    """Rate of the highest bracket that ``taxable_income`` reaches (0 when nothing is taxable)."""
    rate_reached = ZERO
    lower = ZERO
    for upper, rate in brackets:
        if taxable_income <= lower:
            break
        rate_reached = rate
        if upper is None:
            break
        lower = upper
    return rate_reached


def standard_deduction(filing_status: FilingStatus, context: TaxYearContext) -> Decimal:
    return context.standard_deduction(FilingStatus.coerce(filing_status))


def _context(line_set: TaxLineSet, context: Optional[TaxYearContext]) -> TaxYearContext:
    if context is None:
        return get_context_for_year(line_set.tax_year)
    if context.tax_year != line_set.tax_year:
        logger.warning(
            "Line-set is for tax year %s but tables for %s were supplied", line_set.tax_year, context.tax_year
        )
    return context


def _derive(line_set: TaxLineSet, context: TaxYearContext) -> Dict[str, Decimal]:
    """Full-precision derived values keyed by line id."""
    get = line_set.get
    line9 = sum((get(line) for line in INCOME_LINES), ZERO)
    line11 = line9 - get("line10")
    if line_set.itemized_deductions is not None:
        line12 = line_set.itemized_deductions
    else:
        line12 = standard_deduction(line_set.filing_status, context)
    line14 = line12 + get("line13")
    line15 = max(ZERO, line11 - line12 - get("line13"))
    line16 = bracket_tax(line15, context.brackets_for(line_set.filing_status))
    line24 = line16 + get("line17") + get("line23")
    line32 = sum((get(line) for line in PAYMENT_LINES), ZERO)
    if line32 > line24:
        line33 = line32 - line24
        line37 = ZERO
    else:
        line33 = ZERO
        line37 = line24 - line32
    return {
        "line9": line9,
        "line11": line11,
        "line12": line12,
        "line14": line14,
        "line15": line15,
        "line16": line16,
        "line24": line24,
        "line32": line32,
        "line33": line33,
        "line34": line33,
        "line37": line37,
    }


def recompute(line_set: TaxLineSet, context: Optional[TaxYearContext] = None) -> TaxLineSet:
    """Return a copy of ``line_set`` whose derived lines match its input lines.

    Only input lines are read, so applying it twice gives the same result.
    """
    if not isinstance(line_set, TaxLineSet):
        raise TypeError(f"recompute() expects a TaxLineSet, got {type(line_set).__name__}")
    tables = _context(line_set, context)
    derived = {line: round_money(value) for line, value in _derive(line_set, tables).items()}
    lines = line_set.input_lines()
    lines.update(derived)
    logger.debug(
        "Recomputed %s %s: taxable=%s tax=%s refund=%s owed=%s",
        line_set.tax_year,
        line_set.filing_status.value,
        derived["line15"],
        derived["line24"],
        derived["line33"],
        derived["line37"],
    )
    return replace(line_set, lines=lines)


def summarize(line_set: TaxLineSet, context: Optional[TaxYearContext] = None) -> TaxSummary:
    tables = _context(line_set, context)
    derived = _derive(line_set, tables)
    gross = derived["line9"]
    tax = derived["line24"]
    effective = (tax / gross).quantize(RATE_PLACES) if gross > 0 else ZERO
    return TaxSummary(
        tax_year=line_set.tax_year,
        filing_status=line_set.filing_status.value,
        gross_income=round_money(gross),
        adjusted_gross_income=round_money(derived["line11"]),
        deduction=round_money(derived["line12"]),
        taxable_income=round_money(derived["line15"]),
        tax=round_money(tax),
        total_payments=round_money(derived["line32"]),
        refund=round_money(derived["line33"]),
        amount_owed=round_money(derived["line37"]),
        effective_rate=effective,
        marginal_rate=marginal_rate(derived["line15"], tables.brackets_for(line_set.filing_status)),
    )


def compare_deductions(line_set: TaxLineSet, context: Optional[TaxYearContext] = None) -> DeductionComparison:
    """Tax under the standard deduction and under ``itemized_deductions``, side by side.

    Line 12 itself is not changed; the caller decides which deduction to file.
    Ties recommend the standard deduction.
    """
    if not isinstance(line_set, TaxLineSet):
        raise TypeError(f"compare_deductions() expects a TaxLineSet, got {type(line_set).__name__}")
    tables = _context(line_set, context)
    brackets = tables.brackets_for(line_set.filing_status)
    agi = _derive(line_set, tables)["line11"]
    qbi = line_set.get("line13")

    standard = standard_deduction(line_set.filing_status, tables)
    itemized = line_set.itemized_deductions if line_set.itemized_deductions is not None else ZERO
    standard_tax = bracket_tax(max(ZERO, agi - standard - qbi), brackets)
    itemized_tax = bracket_tax(max(ZERO, agi - itemized - qbi), brackets)

    def rate(tax: Decimal) -> Decimal:
        return (tax / agi).quantize(RATE_PLACES) if agi > 0 else ZERO

    return DeductionComparison(
        standard_deduction=round_money(standard),
        itemized_deduction=round_money(itemized),
        standard_tax=round_money(standard_tax),
        itemized_tax=round_money(itemized_tax),
        recommended_method="itemized" if itemized_tax < standard_tax else "standard",
        tax_savings=round_money(abs(standard_tax - itemized_tax)),
        effective_standard_rate=rate(standard_tax),
        effective_itemized_rate=rate(itemized_tax),
    )
