from decimal import Decimal

import pytest

from form1040 import FilingStatus
from form1040.context import get_context_for_year, load_tax_year_config, supported_tax_years


def test_get_context_for_year_known_year():
    ctx = get_context_for_year(2024)
    assert ctx.tax_year == 2024
    assert ctx.standard_deduction(FilingStatus.SINGLE) == Decimal("14600")
    for status in FilingStatus:
        brackets = ctx.brackets_for(status)
        assert brackets[0][1] == Decimal("0.10")
        assert brackets[-1] == (None, Decimal("0.37"))
        uppers = [upper for upper, _ in brackets[:-1]]
        assert uppers == sorted(uppers)


def test_qualifying_surviving_spouse_matches_joint_tables():
    ctx = get_context_for_year(2024)
    assert ctx.brackets_for(FilingStatus.QUALIFYING_SURVIVING_SPOUSE) == ctx.brackets_for(
        FilingStatus.MARRIED_FILING_JOINTLY
    )


def test_get_context_for_year_unknown_year_raises():
    with pytest.raises(ValueError) as excinfo:
        get_context_for_year(1999)
    assert "1999" in str(excinfo.value)


def test_load_tax_year_config_caches():
    first = load_tax_year_config()
    second = load_tax_year_config()
    assert first is second


def test_supported_tax_years():
    assert supported_tax_years() == [2023, 2024]
