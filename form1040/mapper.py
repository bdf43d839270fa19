"""Fold normalized documents into the accumulating Form 1040 line-set."""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from intake.text_fallback import scan_amount
from intake.values import ZERO, format_tax_id, split_name
from schemas import DocumentType, NormalizedDocument, schema_for
from schemas.base import (
    CAPITAL_GAIN_DISTRIBUTIONS,
    EARLY_WITHDRAWAL_PENALTY,
    FEDERAL_WITHHOLDING,
    INCOME_AMOUNT,
    INTEREST_INCOME,
    MEDICARE_WAGES,
    NONEMPLOYEE_COMPENSATION,
    ORDINARY_DIVIDENDS,
    OTHER_INCOME,
    QUALIFIED_DIVIDENDS,
    RENTS,
    ROYALTIES,
    SOCIAL_SECURITY_WAGES,
    STATE_WAGES,
    STATE_WITHHOLDING,
    TAX_EXEMPT_INTEREST,
    WAGES,
)

from .lines import DERIVED_LINES, LINE_DESCRIPTIONS, LineIdentity, TaxLineSet, empty_line_set, is_line_id
from .models import IncomeEntry, MappingRow, MappingValidation

logger = logging.getLogger(__name__)

LINE_TABLES: Dict[DocumentType, Dict[str, str]] = {
    DocumentType.W2: {
        WAGES: "line1",
        FEDERAL_WITHHOLDING: "line25a",
    },
    DocumentType.INT_1099: {
        INTEREST_INCOME: "line2b",
        TAX_EXEMPT_INTEREST: "line2a",
        FEDERAL_WITHHOLDING: "line25a",
    },
    DocumentType.DIV_1099: {
        ORDINARY_DIVIDENDS: "line3b",
        QUALIFIED_DIVIDENDS: "line3a",
        CAPITAL_GAIN_DISTRIBUTIONS: "line7",
        FEDERAL_WITHHOLDING: "line25a",
    },
    DocumentType.MISC_1099: {
        RENTS: "line8",
        ROYALTIES: "line8",
        OTHER_INCOME: "line8",
        FEDERAL_WITHHOLDING: "line25a",
    },
    DocumentType.NEC_1099: {
        NONEMPLOYEE_COMPENSATION: "line8",
        FEDERAL_WITHHOLDING: "line25a",
    },
    DocumentType.GENERIC: {
        INCOME_AMOUNT: "line8",
        FEDERAL_WITHHOLDING: "line25a",
    },
}

FIELD_LABELS: Dict[str, str] = {
    WAGES: "Box 1 - Wages, tips, other compensation",
    FEDERAL_WITHHOLDING: "Federal income tax withheld",
    SOCIAL_SECURITY_WAGES: "Box 3 - Social security wages",
    MEDICARE_WAGES: "Box 5 - Medicare wages and tips",
    STATE_WAGES: "Box 16 - State wages",
    STATE_WITHHOLDING: "Box 17 - State income tax",
    INTEREST_INCOME: "Box 1 - Interest income",
    EARLY_WITHDRAWAL_PENALTY: "Box 2 - Early withdrawal penalty",
    TAX_EXEMPT_INTEREST: "Box 8 - Tax-exempt interest",
    ORDINARY_DIVIDENDS: "Box 1a - Total ordinary dividends",
    QUALIFIED_DIVIDENDS: "Box 1b - Qualified dividends",
    CAPITAL_GAIN_DISTRIBUTIONS: "Box 2a - Total capital gain distributions",
    RENTS: "Box 1 - Rents",
    ROYALTIES: "Box 2 - Royalties",
    OTHER_INCOME: "Box 3 - Other income",
    NONEMPLOYEE_COMPENSATION: "Box 1 - Nonemployee compensation",
    INCOME_AMOUNT: "Income amount",
}

# Income rows offered for acceptance; qualified dividends are a subset of line 3b.
INCOME_TYPES: Dict[str, str] = {
    WAGES: "W2_WAGES",
    INTEREST_INCOME: "INTEREST",
    TAX_EXEMPT_INTEREST: "TAX_EXEMPT_INTEREST",
    ORDINARY_DIVIDENDS: "DIVIDENDS",
    CAPITAL_GAIN_DISTRIBUTIONS: "CAPITAL_GAINS",
    RENTS: "RENTS",
    ROYALTIES: "ROYALTIES",
    OTHER_INCOME: "OTHER_INCOME",
    NONEMPLOYEE_COMPENSATION: "NONEMPLOYEE_COMPENSATION",
    INCOME_AMOUNT: "OTHER_INCOME",
}


def line_table(document_type: DocumentType) -> Dict[str, str]:
    return LINE_TABLES.get(document_type, LINE_TABLES[DocumentType.GENERIC])


def _display_line(line: str) -> str:
    return f"Line {line[4:]}"


def resolve_amount(document: NormalizedDocument, key: str) -> Decimal:
    """Structured amount for ``key``; falls back to an OCR box-label scan when zero."""
    value = document.amount(key)
    if value == 0 and document.raw_text:
        value = scan_amount(document.raw_text, document.document_type, key)
    return value


def document_lines(document: NormalizedDocument) -> Dict[str, Decimal]:
    """Line contributions of a single document."""
    contributions: Dict[str, Decimal] = {}
    for key, line in line_table(document.document_type).items():
        value = resolve_amount(document, key)
        if value == 0:
            continue
        contributions[line] = contributions.get(line, ZERO) + value
    if document.document_type is DocumentType.GENERIC:
        for key, value in document.amounts.items():
            if not is_line_id(key) or value == 0:
                continue
            if key in DERIVED_LINES:
                logger.warning("Ignoring derived %s supplied by document %s", key, document.document_id)
                continue
            contributions[key] = contributions.get(key, ZERO) + value
    return contributions


def _document_identity(document: NormalizedDocument) -> Dict[str, str]:
    party = document.identity
    names = split_name(party.name)
    values = {
        "first_name": names.first,
        "middle_initial": names.middle[:1],
        "last_name": names.last,
        "tax_id": party.tax_id,
        "address_street": party.address_street,
        "address_city": party.address_city,
        "address_state": party.address_state,
        "address_zip": party.address_zip,
    }
    return {name: value for name, value in values.items() if value}


def _merge_identity(identity: LineIdentity, document: NormalizedDocument) -> LineIdentity:
    incoming = _document_identity(document)
    if not incoming:
        return identity

    rank = document.document_type.identity_rank
    updates: Dict[str, str] = {}
    ranks = dict(identity.ranks)
    for name, value in incoming.items():
        if identity.get(name) and identity.rank(name) >= rank:
            continue
        updates[name] = value
        ranks[name] = rank
    if updates:
        logger.info(
            "Identity fields %s filled from %s document %s",
            sorted(updates),
            document.document_type.value,
            document.document_id,
        )

    label = document.document_type.provenance_label
    provenance = identity.provenance if label in identity.provenance else identity.provenance + (label,)
    return replace(identity, ranks=ranks, provenance=provenance, **updates)


def fold(line_set: TaxLineSet, document: NormalizedDocument) -> TaxLineSet:
    """Return a new line-set with ``document`` folded in.

    Monetary lines accumulate by addition. Derived lines are dropped from the
    result; ``recompute`` restores them from the inputs.
    """
    if not isinstance(line_set, TaxLineSet):
        raise TypeError(f"fold() expects a TaxLineSet, got {type(line_set).__name__}")
    if not isinstance(document, NormalizedDocument):
        raise TypeError(f"fold() expects a NormalizedDocument, got {type(document).__name__}")

    lines = line_set.input_lines()
    for line, value in document_lines(document).items():
        lines[line] = lines.get(line, ZERO) + value
        logger.info("Mapped %s from %s %s into %s", value, document.document_type.value, document.document_id, line)

    return replace(line_set, lines=lines, identity=_merge_identity(line_set.identity, document))


def replay(documents: Iterable[NormalizedDocument], base: Optional[TaxLineSet] = None) -> TaxLineSet:
    """Fold an ordered list of accepted documents, starting from ``base`` (or empty)."""
    line_set = base if base is not None else empty_line_set()
    for document in documents:
        line_set = fold(line_set, document)
    return line_set


def mapping_summary(document: NormalizedDocument) -> List[MappingRow]:
    """Rows describing where each field of ``document`` lands on the 1040."""
    label = document.document_type.provenance_label
    party = document.identity
    rows: List[MappingRow] = []
    if party.name:
        rows.append(MappingRow(
            source_field="Recipient Name",
            source_value=party.name,
            target_line="Header",
            target_value=party.name,
            description=f"Taxpayer name from {label}",
        ))
    if party.tax_id:
        rows.append(MappingRow(
            source_field="Recipient Tax ID",
            source_value=party.tax_id,
            target_line="Header",
            target_value=format_tax_id(party.tax_id),
            description=f"Taxpayer SSN from {label}",
        ))
    if party.has_address:
        address = ", ".join(
            part
            for part in (party.address_street, party.address_city, f"{party.address_state} {party.address_zip}".strip())
            if part
        )
        rows.append(MappingRow(
            source_field="Recipient Address",
            source_value=address,
            target_line="Header",
            target_value=address,
            description=f"Taxpayer address from {label}",
        ))

    table = line_table(document.document_type)
    for key, line in table.items():
        value = resolve_amount(document, key)
        if value == 0:
            continue
        rows.append(MappingRow(
            source_field=FIELD_LABELS.get(key, key),
            source_value=str(document.amounts.get(key, value)),
            target_line=_display_line(line),
            target_value=str(value),
            description=LINE_DESCRIPTIONS.get(line, line),
        ))

    for key in schema_for(document.document_type).informational:
        if not document.has_amount(key):
            continue
        rows.append(MappingRow(
            source_field=FIELD_LABELS.get(key, key),
            source_value=str(document.amount(key)),
            target_line="Informational",
            target_value=str(document.amount(key)),
            description="Not transferred to Form 1040",
        ))
    return rows


def validate_for_mapping(document: NormalizedDocument) -> MappingValidation:
    errors: List[str] = []
    warnings: List[str] = []
    party = document.identity
    withheld = resolve_amount(document, FEDERAL_WITHHOLDING)

    if document.document_type is DocumentType.W2:
        if resolve_amount(document, WAGES) == 0:
            errors.append("W2 wages (Box 1) is required but not found")
        if not party.tax_id:
            errors.append("Employee SSN is required but not found")
        if not party.name:
            errors.append("Employee name is required but not found")
        if withheld == 0:
            warnings.append("Federal tax withheld (Box 2) not found - no withholdings will be applied")
        if not document.issuer.name:
            warnings.append("Employer name not found - may be needed for verification")
        if not document.issuer.tax_id:
            warnings.append("Employer EIN not found - may be needed for verification")
        if not party.has_address:
            warnings.append("Employee address not found - address fields may not be auto-populated")
    else:
        income_keys = [key for key in line_table(document.document_type) if key != FEDERAL_WITHHOLDING]
        has_income = any(resolve_amount(document, key) != 0 for key in income_keys)
        if document.document_type is DocumentType.GENERIC:
            has_income = has_income or any(is_line_id(key) for key in document.amounts)
        if not has_income:
            errors.append(f"No income data found in {document.document_type.value} document")
        if not party.name:
            warnings.append("Recipient name not found - personal info may not be auto-populated")
        if not party.tax_id:
            warnings.append("Recipient TIN not found - SSN field may not be auto-populated")
        if not party.has_address:
            warnings.append("Recipient address not found - address fields may not be auto-populated")
        if not document.issuer.name:
            warnings.append("Payer name not found - may be needed for verification")
        if not document.issuer.tax_id:
            warnings.append("Payer TIN not found - may be needed for verification")
        if withheld == 0:
            warnings.append("Federal tax withheld not found - no withholdings will be applied")

    return MappingValidation(is_valid=not errors, errors=errors, warnings=warnings)


def income_entries(document: NormalizedDocument) -> List[IncomeEntry]:
    """Per-document income rows for display; never summed into a line-set."""
    source = document.issuer.name or document.document_type.value
    entries: List[IncomeEntry] = []
    for key, line in line_table(document.document_type).items():
        income_type = INCOME_TYPES.get(key)
        if income_type is None:
            continue
        value = resolve_amount(document, key)
        if value <= 0:
            continue
        entries.append(IncomeEntry(
            income_type=income_type,
            source=source,
            amount=value,
            line=line,
            document_id=document.document_id,
        ))
    return entries
