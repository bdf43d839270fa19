from decimal import Decimal

import pytest

from engine import IntakeEngine, IntakeEngineError
from form1040 import empty_line_set
from matching import TaxpayerProfile

W2_FIELDS = {
    "employerName": "Acme Corp",
    "employerEIN": "12-3456789",
    "employeeName": "John Smith",
    "employeeSSN": "123-45-6789",
    "employeeAddress": "123 Main St, Springfield, IL 62701",
    "wages": "$65,000.00",
    "federalTaxWithheld": "$9,500.00",
}

INT_FIELDS = {
    "payerName": "First Bank",
    "payerTIN": "98-7654321",
    "recipientName": "John Smith",
    "recipientTIN": "123-45-6789",
    "interestIncome": "1,250.55",
}


def test_ingest_accepts_and_recomputes():
    engine = IntakeEngine()
    result = engine.ingest(W2_FIELDS, "W2", [], profile=TaxpayerProfile("John", "Smith"), document_id="w2-1")

    assert result.accepted is True
    assert result.duplicate.is_duplicate is False
    assert result.identity.is_valid is True
    assert result.line_set.get("line1") == Decimal("65000.00")
    assert result.line_set.get("line12") == Decimal("14600.00")
    assert result.line_set.get("line33") == Decimal("3359.00")
    assert result.line_set.identity.provenance == ("W2",)


def test_ingest_holds_duplicates_and_keeps_lines():
    engine = IntakeEngine()
    first = engine.ingest(W2_FIELDS, "W2", [], document_id="w2-1")
    second = engine.ingest(
        W2_FIELDS,
        "W2",
        [first.document],
        line_set=first.line_set,
        document_id="w2-2",
    )

    assert second.accepted is False
    assert second.duplicate.is_duplicate is True
    assert second.duplicate.best_match.document_id == "w2-1"
    assert second.line_set == first.line_set


def test_ingest_holds_documents_for_someone_else():
    engine = IntakeEngine()
    result = engine.ingest(W2_FIELDS, "W2", [], profile={"firstName": "Alice", "lastName": "Jones"})

    assert result.accepted is False
    assert result.identity.safe_to_continue is False
    assert result.line_set.get("line1") == Decimal("0")


def test_rebuild_matches_incremental_ingest():
    engine = IntakeEngine()
    accepted = []
    line_set = empty_line_set()
    for doc_id, fields, doc_type in (("w2-1", W2_FIELDS, "W2"), ("int-1", INT_FIELDS, "FORM_1099_INT")):
        result = engine.ingest(fields, doc_type, accepted, line_set=line_set, document_id=doc_id)
        assert result.accepted is True
        accepted.append(result.document)
        line_set = result.line_set

    rebuilt = engine.rebuild(accepted)
    assert rebuilt == line_set
    assert rebuilt.get("line9") == Decimal("66250.55")
    assert rebuilt.identity.provenance_display == "W2, 1099"


def test_rebuild_keeps_manual_inputs_from_base():
    engine = IntakeEngine()
    document = engine.normalize(W2_FIELDS, "W2", "w2-1")
    base = empty_line_set("MFJ").set_input("line10", "1000")

    rebuilt = engine.rebuild([document], base=base)
    assert rebuilt.get("line11") == Decimal("64000.00")
    assert rebuilt.get("line12") == Decimal("29200.00")


def test_engine_rejects_unnormalized_inputs():
    engine = IntakeEngine()
    document = engine.normalize(W2_FIELDS, "W2")

    with pytest.raises(IntakeEngineError):
        engine.ingest(W2_FIELDS, "W2", [W2_FIELDS])
    with pytest.raises(IntakeEngineError):
        engine.check_duplicates(W2_FIELDS, [])
    with pytest.raises(IntakeEngineError):
        engine.validate_identity(TaxpayerProfile("John", "Smith"), W2_FIELDS)
    with pytest.raises(IntakeEngineError):
        engine.validate_identity("John Smith", document)
    with pytest.raises(IntakeEngineError):
        engine.rebuild([document], base={"line1": 1})


def test_result_to_dict_is_json_ready():
    result = IntakeEngine().ingest(W2_FIELDS, "W2", [], document_id="w2-1")
    data = result.to_dict()
    assert data["accepted"] is True
    assert data["document"]["amounts"]["wages"] == "65000.00"
    assert data["duplicate"]["is_duplicate"] is False
    assert data["identity"] is None


def test_out_of_range_amounts_do_not_break_ingest_or_rebuild():
    engine = IntakeEngine()
    result = engine.ingest(
        {"employeeName": "John Smith", "wages": "1234567890123456789012345678", "federalTaxWithheld": "100"},
        "W2",
        [],
        document_id="w2-1",
    )
    assert result.accepted is True
    assert result.line_set.get("line1") == Decimal("0")
    assert result.line_set.get("line33") == Decimal("100.00")

    document = engine.normalize({"employeeName": "John Smith", "wages": 1e300}, "W2", "w2-2")
    rebuilt = engine.rebuild([result.document, document])
    assert rebuilt.get("line9") == Decimal("0.00")
