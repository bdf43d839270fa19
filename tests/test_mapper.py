import logging
from decimal import Decimal

import pytest

from form1040 import (
    empty_line_set,
    fold,
    income_entries,
    mapping_summary,
    recompute,
    replay,
    validate_for_mapping,
)
from intake import normalize


def w2_doc(doc_id="w2-1", **overrides):
    fields = {
        "employerName": "Acme Corp",
        "employerEIN": "12-3456789",
        "employeeName": "John Q Smith",
        "employeeSSN": "123-45-6789",
        "employeeAddress": "123 Main St, Springfield, IL 62701",
        "wages": "65,000.00",
        "federalTaxWithheld": "9,500.00",
    }
    fields.update(overrides)
    return normalize(fields, "W2", document_id=doc_id)


def int_doc(doc_id="int-1", **overrides):
    fields = {
        "payerName": "First Bank",
        "payerTIN": "98-7654321",
        "recipientName": "Jonathan Smithers",
        "recipientTIN": "999-88-7777",
        "recipientAddress": "9 Elm St, Dayton, OH 45402",
        "interestIncome": "1,250.55",
        "taxExemptInterest": "80.00",
        "federalTaxWithheld": "100.00",
    }
    fields.update(overrides)
    return normalize(fields, "FORM_1099_INT", document_id=doc_id)


def test_fold_w2_maps_wages_and_withholding():
    line_set = fold(empty_line_set(), w2_doc())

    assert line_set.get("line1") == Decimal("65000.00")
    assert line_set.get("line25a") == Decimal("9500.00")
    assert line_set.identity.first_name == "John"
    assert line_set.identity.middle_initial == "Q"
    assert line_set.identity.last_name == "Smith"
    assert line_set.identity.tax_id == "123456789"
    assert line_set.identity.address_city == "Springfield"
    assert line_set.identity.provenance == ("W2",)


def test_fold_accumulates_and_never_overwrites():
    line_set = replay([w2_doc("a"), w2_doc("b", wages="10,000", federalTaxWithheld="500")])
    assert line_set.get("line1") == Decimal("75000.00")
    assert line_set.get("line25a") == Decimal("10000.00")


def test_fold_order_does_not_change_lines():
    a = w2_doc("a")
    b = w2_doc("b", wages="12,345.67", federalTaxWithheld="1,000.01")
    forward = recompute(replay([a, b]))
    backward = recompute(replay([b, a]))
    assert forward.lines == backward.lines


def test_fold_does_not_mutate_input():
    start = empty_line_set()
    fold(start, w2_doc())
    assert dict(start.lines) == {}
    assert start.identity.provenance == ()


def test_1099_after_w2_keeps_w2_identity_and_records_provenance():
    line_set = replay([w2_doc(), int_doc()])

    assert line_set.identity.first_name == "John"
    assert line_set.identity.last_name == "Smith"
    assert line_set.identity.tax_id == "123456789"
    assert line_set.identity.provenance == ("W2", "1099")
    assert line_set.identity.provenance_display == "W2, 1099"


def test_w2_after_1099_takes_over_identity():
    line_set = replay([int_doc(), w2_doc()])

    assert line_set.identity.first_name == "John"
    assert line_set.identity.address_city == "Springfield"
    assert line_set.identity.provenance == ("1099", "W2")


def test_1099_fills_identity_gaps_left_by_w2():
    line_set = replay([w2_doc(employeeAddress=""), int_doc()])
    assert line_set.identity.first_name == "John"
    assert line_set.identity.address_city == "Dayton"


def test_1099_int_lines():
    line_set = fold(empty_line_set(), int_doc())
    assert line_set.get("line2b") == Decimal("1250.55")
    assert line_set.get("line2a") == Decimal("80.00")
    assert line_set.get("line25a") == Decimal("100.00")


def test_1099_div_misc_nec_lines():
    div = normalize(
        {"ordinaryDividends": "500", "qualifiedDividends": "300", "totalCapitalGain": "40"},
        "1099-DIV",
    )
    misc = normalize({"rents": "1,000", "royalties": "200", "otherIncome": "50"}, "1099-MISC")
    nec = normalize({"nonemployeeCompensation": "2,500"}, "1099-NEC")

    line_set = replay([div, misc, nec])
    assert line_set.get("line3b") == Decimal("500")
    assert line_set.get("line3a") == Decimal("300")
    assert line_set.get("line7") == Decimal("40")
    assert line_set.get("line8") == Decimal("3750")


def test_ocr_fallback_fills_missing_wages(caplog):
    doc = normalize(
        {
            "employeeName": "John Smith",
            "fullText": "1 Wages, tips, other compensation 52,000.00 2 Federal income tax withheld 6,100.00",
        },
        "W2",
    )
    with caplog.at_level(logging.INFO, logger="intake.text_fallback"):
        line_set = fold(empty_line_set(), doc)

    assert line_set.get("line1") == Decimal("52000.00")
    assert line_set.get("line25a") == Decimal("6100.00")
    assert "OCR fallback" in caplog.text


def test_ocr_fallback_ignores_amounts_on_the_next_row():
    doc = normalize(
        {
            "employeeName": "John Smith",
            "federalTaxWithheld": "0.00",
            "fullText": "1 Wages, tips, other compensation 2 Federal income tax withheld\n65000.00 0.00",
        },
        "W2",
    )
    line_set = fold(empty_line_set(), doc)

    assert line_set.get("line1") == Decimal("0")
    assert line_set.get("line25a") == Decimal("0")


def test_generic_document_passes_line_keys_through():
    doc = normalize({"amount": "300", "line4b": "1,000", "line9": "99999"}, "K-1")
    line_set = fold(empty_line_set(), doc)
    assert line_set.get("line8") == Decimal("300")
    assert line_set.get("line4b") == Decimal("1000")
    assert "line9" not in line_set.lines
    assert line_set.identity.provenance == ()


def test_fold_rejects_unnormalized_documents():
    with pytest.raises(TypeError):
        fold(empty_line_set(), {"wages": "1"})
    with pytest.raises(TypeError):
        fold({}, w2_doc())


def test_fold_drops_stale_derived_lines():
    computed = recompute(fold(empty_line_set(), w2_doc()))
    assert computed.get("line9") == Decimal("65000.00")
    folded = fold(computed, w2_doc("b", wages="1,000"))
    assert "line9" not in folded.lines
    assert recompute(folded).get("line9") == Decimal("66000.00")


def test_mapping_summary_rows():
    rows = mapping_summary(w2_doc(socialSecurityWages="66,000"))
    by_target = {}
    for row in rows:
        by_target.setdefault(row.target_line, []).append(row)

    assert len(by_target["Header"]) == 3
    assert any(row.target_value == "123-45-6789" for row in by_target["Header"])
    assert by_target["Line 1"][0].target_value == "65000.00"
    assert by_target["Line 25a"][0].description == "Federal income tax withheld from Forms W-2"
    assert by_target["Informational"][0].source_field == "Box 3 - Social security wages"


def test_validate_for_mapping_w2():
    assert validate_for_mapping(w2_doc()).is_valid is True

    result = validate_for_mapping(w2_doc(wages="", employeeSSN="", federalTaxWithheld=""))
    assert result.is_valid is False
    assert "W2 wages (Box 1) is required but not found" in result.errors
    assert "Employee SSN is required but not found" in result.errors
    assert any("Federal tax withheld" in warning for warning in result.warnings)


def test_validate_for_mapping_1099():
    assert validate_for_mapping(int_doc()).is_valid is True

    result = validate_for_mapping(int_doc(interestIncome="", taxExemptInterest="", recipientTIN=""))
    assert result.is_valid is False
    assert result.errors == ["No income data found in INT_1099 document"]
    assert any("Recipient TIN" in warning for warning in result.warnings)


def test_income_entries_are_per_document_rows():
    div = normalize(
        {"payerName": "Big Fund", "ordinaryDividends": "500", "qualifiedDividends": "300", "totalCapitalGain": "40"},
        "1099-DIV",
        document_id="div-1",
    )
    entries = income_entries(div)
    assert [(e.income_type, e.line, e.amount) for e in entries] == [
        ("DIVIDENDS", "line3b", Decimal("500")),
        ("CAPITAL_GAINS", "line7", Decimal("40")),
    ]
    assert all(e.source == "Big Fund" and e.document_id == "div-1" for e in entries)
