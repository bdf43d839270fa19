"""Context loader for tax-year-specific standard deductions and brackets."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .lines import FilingStatus

CONFIG_PATH = Path(__file__).resolve().parent / "tax_years.yaml"

DEFAULT_TAX_YEAR = 2024

Bracket = Tuple[Optional[Decimal], Decimal]


@dataclass(frozen=True)
class TaxYearContext:
    tax_year: int
    standard_deductions: Dict[FilingStatus, Decimal]
    brackets: Dict[FilingStatus, Tuple[Bracket, ...]]

    def standard_deduction(self, status: FilingStatus) -> Decimal:
        return self.standard_deductions[status]

    def brackets_for(self, status: FilingStatus) -> Tuple[Bracket, ...]:
        return self.brackets[status]


def _decimal(year: int, where: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Config for tax year {year} has a non-numeric value at {where}: {value!r}") from exc


def _validate_year_entry(year: int, data: Dict[str, Any]) -> None:
    """Validate that a single tax year entry contains required keys."""
    if not isinstance(data, dict):
        raise ValueError(f"Config for tax year {year} must be a mapping.")
    deductions = data.get("standard_deduction") or {}
    brackets = data.get("brackets") or {}
    missing = []
    for status in FilingStatus:
        if status.value not in deductions:
            missing.append(f"standard_deduction.{status.value}")
        if status.value not in brackets:
            missing.append(f"brackets.{status.value}")
    if missing:
        missing_keys = ", ".join(missing)
        raise ValueError(f"Config for tax year {year} missing required keys: {missing_keys}")


def _parse_brackets(year: int, status: FilingStatus, raw: Any) -> Tuple[Bracket, ...]:
    if not isinstance(raw, list) or not raw:
        raise ValueError(f"Config for tax year {year} needs a bracket list for {status.value}")
    parsed: List[Bracket] = []
    previous = Decimal("0")
    for index, entry in enumerate(raw):
        where = f"brackets.{status.value}[{index}]"
        if not isinstance(entry, dict) or "rate" not in entry or "up_to" not in entry:
            raise ValueError(f"Config for tax year {year} missing up_to/rate at {where}")
        upper = entry["up_to"]
        rate = _decimal(year, f"{where}.rate", entry["rate"])
        if upper is None:
            if index != len(raw) - 1:
                raise ValueError(f"Config for tax year {year}: only the last bracket may be open ({where})")
            parsed.append((None, rate))
            continue
        upper_value = _decimal(year, f"{where}.up_to", upper)
        if upper_value <= previous:
            raise ValueError(f"Config for tax year {year}: brackets must ascend ({where})")
        previous = upper_value
        parsed.append((upper_value, rate))
    if parsed[-1][0] is not None:
        raise ValueError(f"Config for tax year {year}: last bracket for {status.value} must be open")
    return tuple(parsed)


def _build_context(year: int, data: Dict[str, Any]) -> TaxYearContext:
    deductions = {
        status: _decimal(year, f"standard_deduction.{status.value}", data["standard_deduction"][status.value])
        for status in FilingStatus
    }
    brackets = {status: _parse_brackets(year, status, data["brackets"][status.value]) for status in FilingStatus}
    return TaxYearContext(tax_year=year, standard_deductions=deductions, brackets=brackets)


@lru_cache(maxsize=1)
def load_tax_year_config() -> Dict[int, TaxYearContext]:
    """
    Load tax-year configuration from form1040/tax_years.yaml.

    Returns a dict mapping tax_year (int) -> TaxYearContext.
    """
    if not CONFIG_PATH.exists():
        raise FileNotFoundError(f"Tax year config not found at {CONFIG_PATH}")
    with CONFIG_PATH.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}

    config: Dict[int, TaxYearContext] = {}
    for raw_year, data in raw.items():
        try:
            year_int = int(raw_year)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid tax year key: {raw_year}") from exc
        _validate_year_entry(year_int, data or {})
        config[year_int] = _build_context(year_int, data)
    return config


def get_context_for_year(tax_year: int) -> TaxYearContext:
    """
    Return the deduction and bracket tables for the given tax year.

    If the tax_year is not defined, raise a ValueError with a clear message.
    """
    config = load_tax_year_config()
    if tax_year not in config:
        raise ValueError(f"Unsupported tax year: {tax_year}")
    return config[tax_year]


def supported_tax_years() -> List[int]:
    return sorted(load_tax_year_config())
