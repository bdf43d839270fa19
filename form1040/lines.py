"""Form 1040 line identifiers and the accumulating line-set record."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from intake.values import parse_amount

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0")

# Lines summed into line 9 (total income).
INCOME_LINES: Tuple[str, ...] = ("line1", "line2b", "line3b", "line4b", "line5b", "line6b", "line7", "line8")
# Lines summed into line 32 (total payments).
PAYMENT_LINES: Tuple[str, ...] = ("line25a", "line25b", "line25c", "line25d")

DERIVED_LINES = frozenset(
    {"line9", "line11", "line12", "line14", "line15", "line16", "line24", "line32", "line33", "line34", "line37"}
)

LINE_DESCRIPTIONS: Dict[str, str] = {
    "line1": "Wages, salaries, tips",
    "line2a": "Tax-exempt interest",
    "line2b": "Taxable interest",
    "line3a": "Qualified dividends",
    "line3b": "Ordinary dividends",
    "line4b": "IRA distributions, taxable amount",
    "line5b": "Pensions and annuities, taxable amount",
    "line6b": "Social security benefits, taxable amount",
    "line7": "Capital gain or (loss)",
    "line8": "Other income from Schedule 1",
    "line9": "Total income",
    "line10": "Adjustments to income",
    "line11": "Adjusted gross income",
    "line12": "Standard deduction or itemized deductions",
    "line13": "Qualified business income deduction",
    "line14": "Total deductions",
    "line15": "Taxable income",
    "line16": "Tax",
    "line17": "Amount from Schedule 2, line 3",
    "line23": "Other taxes, including self-employment tax",
    "line24": "Total tax",
    "line25a": "Federal income tax withheld from Forms W-2",
    "line25b": "Federal income tax withheld from Forms 1099",
    "line25c": "Federal income tax withheld from other forms",
    "line25d": "Total federal income tax withheld",
    "line32": "Total payments",
    "line33": "Amount overpaid",
    "line34": "Amount to be refunded",
    "line37": "Amount you owe",
}

_LINE_RE = re.compile(r"line\d{1,2}[a-d]?")


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def is_line_id(name: str) -> bool:
    return bool(_LINE_RE.fullmatch(name))


class FilingStatus(str, Enum):
    SINGLE = "SINGLE"
    MARRIED_FILING_JOINTLY = "MARRIED_FILING_JOINTLY"
    MARRIED_FILING_SEPARATELY = "MARRIED_FILING_SEPARATELY"
    HEAD_OF_HOUSEHOLD = "HEAD_OF_HOUSEHOLD"
    QUALIFYING_SURVIVING_SPOUSE = "QUALIFYING_SURVIVING_SPOUSE"

    @classmethod
    def coerce(cls, value: Any) -> "FilingStatus":
        """Accept enum values, loose spellings and the usual abbreviations; default SINGLE."""
        if isinstance(value, FilingStatus):
            return value
        token = re.sub(r"[^A-Z]", "", str(value or "").upper())
        status = _STATUS_TOKENS.get(token)
        if status is None:
            logger.warning("Unknown filing status %r; defaulting to SINGLE", value)
            return cls.SINGLE
        return status


_STATUS_TOKENS: Dict[str, FilingStatus] = {
    "SINGLE": FilingStatus.SINGLE,
    "S": FilingStatus.SINGLE,
    "MARRIEDFILINGJOINTLY": FilingStatus.MARRIED_FILING_JOINTLY,
    "MFJ": FilingStatus.MARRIED_FILING_JOINTLY,
    "MARRIEDFILINGSEPARATELY": FilingStatus.MARRIED_FILING_SEPARATELY,
    "MFS": FilingStatus.MARRIED_FILING_SEPARATELY,
    "HEADOFHOUSEHOLD": FilingStatus.HEAD_OF_HOUSEHOLD,
    "HOH": FilingStatus.HEAD_OF_HOUSEHOLD,
    "QUALIFYINGSURVIVINGSPOUSE": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
    "QUALIFYINGWIDOWER": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
    "QSS": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
    "QW": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
}


IDENTITY_FIELDS: Tuple[str, ...] = (
    "first_name",
    "middle_initial",
    "last_name",
    "tax_id",
    "address_street",
    "address_city",
    "address_state",
    "address_zip",
)


@dataclass(frozen=True)
class LineIdentity:
    """Taxpayer header block with per-field source authority and provenance."""

    first_name: str = ""
    middle_initial: str = ""
    last_name: str = ""
    tax_id: str = ""
    address_street: str = ""
    address_city: str = ""
    address_state: str = ""
    address_zip: str = ""
    ranks: Mapping[str, int] = field(default_factory=dict)
    provenance: Tuple[str, ...] = ()

    def get(self, name: str) -> str:
        return getattr(self, name)

    def rank(self, name: str) -> int:
        return self.ranks.get(name, -1)

    @property
    def provenance_display(self) -> str:
        return ", ".join(self.provenance)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {name: self.get(name) for name in IDENTITY_FIELDS}
        data["provenance"] = list(self.provenance)
        data["provenance_display"] = self.provenance_display
        return data


@dataclass(frozen=True)
class TaxLineSet:
    """Sparse map of line id -> money plus the taxpayer identity.

    Instances are treated as values: ``fold`` and ``recompute`` return new
    line-sets and never mutate their input.
    """

    lines: Mapping[str, Decimal] = field(default_factory=dict)
    identity: LineIdentity = field(default_factory=LineIdentity)
    filing_status: FilingStatus = FilingStatus.SINGLE
    tax_year: int = 2024
    itemized_deductions: Optional[Decimal] = None

    def get(self, line: str) -> Decimal:
        return self.lines.get(line, ZERO)

    def with_lines(self, updates: Mapping[str, Decimal]) -> "TaxLineSet":
        merged = dict(self.lines)
        merged.update(updates)
        return replace(self, lines=merged)

    def set_input(self, line: str, value: Any) -> "TaxLineSet":
        """Set a non-derived input line (adjustments, other taxes, estimated payments...)."""
        if not is_line_id(line):
            raise ValueError(f"Not a Form 1040 line id: {line!r}")
        if line in DERIVED_LINES:
            raise ValueError(f"{line} is derived and cannot be set directly")
        return self.with_lines({line: parse_amount(value)})

    def input_lines(self) -> Dict[str, Decimal]:
        return {line: value for line, value in self.lines.items() if line not in DERIVED_LINES}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tax_year": self.tax_year,
            "filing_status": self.filing_status.value,
            "itemized_deductions": None if self.itemized_deductions is None else str(self.itemized_deductions),
            "identity": self.identity.to_dict(),
            "lines": {line: str(self.lines[line]) for line in sorted(self.lines, key=_line_sort_key)},
        }


def _line_sort_key(line: str) -> Tuple[int, str]:
    digits = "".join(ch for ch in line[4:] if ch.isdigit())
    return int(digits or 0), line


def empty_line_set(
    filing_status: Any = FilingStatus.SINGLE,
    tax_year: int = 2024,
    itemized_deductions: Optional[Any] = None,
) -> TaxLineSet:
    return TaxLineSet(
        filing_status=FilingStatus.coerce(filing_status),
        tax_year=int(tax_year),
        itemized_deductions=None if itemized_deductions is None else parse_amount(itemized_deductions),
    )
