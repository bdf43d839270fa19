"""Best-effort box-label scans over the OCR full text of a document."""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Dict, Tuple

from schemas import DocumentType
from schemas.base import (
    CAPITAL_GAIN_DISTRIBUTIONS,
    FEDERAL_WITHHOLDING,
    INTEREST_INCOME,
    NONEMPLOYEE_COMPENSATION,
    ORDINARY_DIVIDENDS,
    OTHER_INCOME,
    QUALIFIED_DIVIDENDS,
    RENTS,
    ROYALTIES,
    TAX_EXEMPT_INTEREST,
    WAGES,
)

from .values import ZERO, parse_amount

logger = logging.getLogger(__name__)

# Thousands-separated, with cents, or at least three digits: keeps bare box
# numbers ("2 Federal income tax withheld") from being read as amounts.
_MONEY = r"\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+\.\d{1,2}|\d{3,}"

_FEDERAL_WITHHOLDING_1099 = ("Federal income tax withheld", "Box 4")

BOX_LABELS: Dict[DocumentType, Dict[str, Tuple[str, ...]]] = {
    DocumentType.W2: {
        WAGES: ("Wages, tips, other compensation", "Wages, tips, other comp", "Wages and tips", "Box 1"),
        FEDERAL_WITHHOLDING: ("Federal income tax withheld", "Box 2"),
    },
    DocumentType.INT_1099: {
        INTEREST_INCOME: ("Interest income", "Box 1"),
        TAX_EXEMPT_INTEREST: ("Tax-exempt interest", "Box 8"),
        FEDERAL_WITHHOLDING: _FEDERAL_WITHHOLDING_1099,
    },
    DocumentType.DIV_1099: {
        ORDINARY_DIVIDENDS: ("Total ordinary dividends", "Box 1a"),
        QUALIFIED_DIVIDENDS: ("Qualified dividends", "Box 1b"),
        CAPITAL_GAIN_DISTRIBUTIONS: ("Total capital gain distr", "Box 2a"),
        FEDERAL_WITHHOLDING: _FEDERAL_WITHHOLDING_1099,
    },
    DocumentType.MISC_1099: {
        RENTS: ("Rents", "Box 1"),
        ROYALTIES: ("Royalties", "Box 2"),
        OTHER_INCOME: ("Other income", "Box 3"),
        FEDERAL_WITHHOLDING: _FEDERAL_WITHHOLDING_1099,
    },
    DocumentType.NEC_1099: {
        NONEMPLOYEE_COMPENSATION: ("Nonemployee compensation", "Box 1"),
        FEDERAL_WITHHOLDING: _FEDERAL_WITHHOLDING_1099,
    },
}


def extract_box_value(text: str, label: str) -> Decimal:
    """Return the first money amount following ``label`` (case-insensitive), or 0.

    The amount must sit on the label's own line; columnar layouts put the
    values of several boxes on the next row, where they cannot be told apart.
    A box number between the label and the amount also ends the scan.
    """
    pattern = rf"{re.escape(label)}(?![0-9a-z])[^\d\n]{{0,40}}?\$?[ \t]*({_MONEY})"
    match = re.search(pattern, text, flags=re.IGNORECASE)
    if not match:
        return ZERO
    return parse_amount(match.group(1))


def scan_amount(text: str, document_type: DocumentType, key: str) -> Decimal:
    """Try each known label for ``key`` until one yields a positive amount."""
    if not text:
        return ZERO
    for label in BOX_LABELS.get(document_type, {}).get(key, ()):
        value = extract_box_value(text, label)
        if value > 0:
            logger.info("OCR fallback found %s=%s via label %r", key, value, label)
            return value
    return ZERO
