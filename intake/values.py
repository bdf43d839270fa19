"""Value-level normalization: amounts, tax ids, addresses and names.

Every function here is total: malformed input degrades to an empty string or
``Decimal("0")`` instead of raising.
"""

from __future__ import annotations

import logging
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, NamedTuple

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

# Amounts at or above 10**16 are OCR noise, not money.
_MAX_AMOUNT_EXPONENT = 15

_MAX_UNWRAP_DEPTH = 16
_AMOUNT_STRIP_RE = re.compile(r"[^\d.\-]")
_NON_DIGIT_RE = re.compile(r"\D")
_WHITESPACE_RE = re.compile(r"\s+")
_ZIP = r"\d{5}(?:-\d{4})?"
_STATE_ZIP_RE = re.compile(rf"^([A-Z]{{2}})\s*({_ZIP})$")
_STATE_SPACE_ZIP_RE = re.compile(rf"^([A-Z]{{2}})\s+({_ZIP})$")
_SPACE_DELIMITED_RE = re.compile(rf"^(.+?)\s+([A-Za-z\s]+?)\s+([A-Z]{{2}})\s+({_ZIP})$")
_TRAILING_STATE_ZIP_RE = re.compile(rf"\s+([A-Z]{{2}})\s+({_ZIP})$")


def unwrap_field_value(value: Any) -> Any:
    """Resolve ``{"value": ...}`` / ``{"content": ...}`` wrappers to the scalar inside.

    Mappings without either key resolve to None.
    """
    for _ in range(_MAX_UNWRAP_DEPTH):
        if not isinstance(value, Mapping):
            return value
        if value.get("value") is not None:
            value = value["value"]
        elif value.get("content") is not None:
            value = value["content"]
        else:
            return None
    return None


def is_blank(value: Any) -> bool:
    value = unwrap_field_value(value)
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value: Any) -> Decimal:
    """Parse a money value, stripping currency symbols and thousands separators.

    Empty or unparseable input yields ``Decimal("0")``. A leading ``-`` or
    accounting parentheses mark a negative amount.
    """
    value = unwrap_field_value(value)
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return _bounded(value, value) if value.is_finite() else ZERO
    if isinstance(value, int):
        return _bounded(Decimal(value), value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return ZERO
        return _bounded(Decimal(str(value)), value)

    text = str(value).strip()
    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()
    cleaned = _AMOUNT_STRIP_RE.sub("", text)
    if cleaned.startswith("-"):
        negative = True
    cleaned = cleaned.replace("-", "")
    if not cleaned:
        return ZERO
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        logger.warning("Failed to parse amount %r; defaulting to 0", value)
        return ZERO
    if amount == 0:
        return ZERO
    return _bounded(-amount if negative else amount, value)


def _bounded(amount: Decimal, raw: Any) -> Decimal:
    if amount and amount.adjusted() > _MAX_AMOUNT_EXPONENT:
        logger.warning("Amount %r is out of range; defaulting to 0", raw)
        return ZERO
    return amount


def normalize_tax_id(value: Any) -> str:
    """Strip an SSN / EIN / TIN down to its digits."""
    value = unwrap_field_value(value)
    if value is None:
        return ""
    return _NON_DIGIT_RE.sub("", str(value))


def format_tax_id(value: Any) -> str:
    """Display form ``XXX-XX-XXXX``; anything but exactly nine digits is returned as digits."""
    digits = normalize_tax_id(value)
    if len(digits) == 9:
        return f"{digits[:3]}-{digits[3:5]}-{digits[5:]}"
    return digits


def clean_text(value: Any) -> str:
    value = unwrap_field_value(value)
    if value is None or isinstance(value, Mapping):
        return ""
    return _WHITESPACE_RE.sub(" ", str(value)).strip()


class ParsedAddress(NamedTuple):
    street: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""


def parse_address(value: Any) -> ParsedAddress:
    """Split a one-line address into street, city, state and ZIP.

    Shapes tried in order: ``street, city, ST ZIP``; ``street city, ST ZIP``;
    ``street city ST ZIP``; any trailing ``ST ZIP`` with the last word before it
    taken as the city. When nothing matches the whole string is the street.
    """
    address = clean_text(value)
    if not address:
        return ParsedAddress()

    parts = [part.strip() for part in address.split(",")]
    if len(parts) >= 3:
        match = _STATE_ZIP_RE.match(parts[-1])
        if match:
            return ParsedAddress(", ".join(parts[:-2]), parts[-2], match.group(1), match.group(2))

    if len(parts) == 2:
        match = _STATE_SPACE_ZIP_RE.match(parts[1])
        words = parts[0].split()
        if match and len(words) >= 2:
            return ParsedAddress(" ".join(words[:-1]), words[-1], match.group(1), match.group(2))

    match = _SPACE_DELIMITED_RE.match(address)
    if match:
        return ParsedAddress(match.group(1).strip(), match.group(2).strip(), match.group(3), match.group(4))

    match = _TRAILING_STATE_ZIP_RE.search(address)
    if match:
        words = address[: match.start()].replace(",", " ").split()
        if words:
            return ParsedAddress(" ".join(words[:-1]), words[-1], match.group(1), match.group(2))

    logger.warning("Could not parse address %r; using it as street only", address)
    return ParsedAddress(street=address)


class NameParts(NamedTuple):
    first: str = ""
    middle: str = ""
    last: str = ""


def split_name(value: Any) -> NameParts:
    """First token is the first name, last token the last name; single tokens have no last name."""
    tokens = clean_text(value).split()
    if not tokens:
        return NameParts()
    if len(tokens) == 1:
        return NameParts(first=tokens[0])
    return NameParts(tokens[0], " ".join(tokens[1:-1]), tokens[-1])
