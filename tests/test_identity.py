import pytest

from intake import normalize
from matching import ExtractedNames, TaxpayerProfile, extract_names, validate_document, validate_names


def test_matching_names_are_valid():
    result = validate_names(TaxpayerProfile("John", "Smith"), ExtractedNames(primary_name="JOHN SMITH"))
    assert result.is_valid is True
    assert result.safe_to_continue is True
    assert result.confidence == 1.0
    assert result.mismatches == []


def test_nickname_is_not_a_mismatch():
    result = validate_names(TaxpayerProfile("Robert", "Smith"), ExtractedNames(primary_name="Bob Smith"))
    assert result.mismatches == []


def test_low_severity_mismatch_with_suggestion():
    result = validate_names(TaxpayerProfile("Jon", "Smith"), ExtractedNames(primary_name="John Smith"))

    assert [m.field for m in result.mismatches] == ["first_name"]
    assert result.mismatches[0].severity == "low"
    assert result.is_valid is True
    assert result.confidence == pytest.approx(0.9)
    assert result.suggestions == ['Did you mean "John" instead of "Jon"?']


def test_medium_severity_mismatch():
    result = validate_names(TaxpayerProfile("John", "Smith"), ExtractedNames(primary_name="John Smyte"))

    assert result.mismatches[0].field == "last_name"
    assert result.mismatches[0].severity == "medium"
    assert result.is_valid is False
    assert result.confidence == pytest.approx(0.8)
    assert len(result.suggestions) == 1


def test_high_severity_mismatch_blocks_and_has_no_suggestion():
    result = validate_names(TaxpayerProfile("Alice", "Smith"), ExtractedNames(primary_name="Bob Smith"))

    assert result.mismatches[0].severity == "high"
    assert result.is_valid is False
    assert result.safe_to_continue is False
    assert result.confidence == pytest.approx(0.6)
    assert result.suggestions == []


def test_confidence_floor_with_many_high_mismatches():
    profile = TaxpayerProfile("Alice", "Jones", spouse_first_name="Carl", spouse_last_name="Jones")
    extracted = ExtractedNames(primary_name="Bob Smith", spouse_name="Xena Wu")
    result = validate_names(profile, extracted)
    assert sum(1 for m in result.mismatches if m.severity == "high") == 4
    assert result.confidence == pytest.approx(0.1)


def test_single_token_document_name_has_empty_last_name():
    result = validate_names(TaxpayerProfile("Cher", "Smith"), ExtractedNames(primary_name="Cher"))
    assert [m.field for m in result.mismatches] == ["last_name"]
    assert result.mismatches[0].document_value == ""
    assert result.mismatches[0].severity == "high"


def test_spouse_checked_only_when_profile_has_spouse():
    extracted = ExtractedNames(primary_name="John Smith", spouse_name="Maria Smith")

    without_spouse = validate_names(TaxpayerProfile("John", "Smith"), extracted)
    assert without_spouse.mismatches == []

    with_spouse = validate_names(TaxpayerProfile("John", "Smith", "Mary", "Smith"), extracted)
    assert [m.field for m in with_spouse.mismatches] == ["spouse_first_name"]
    assert with_spouse.mismatches[0].severity == "medium"


def test_no_primary_name_means_nothing_to_compare():
    result = validate_names(TaxpayerProfile("John", "Smith"), ExtractedNames())
    assert result.is_valid is True
    assert result.confidence == 1.0


def test_extract_names_and_validate_document():
    doc = normalize({"employeeName": "John Smith", "spouseName": "Mary Smith"}, "W2")
    names = extract_names(doc)
    assert names == ExtractedNames(primary_name="John Smith", spouse_name="Mary Smith")

    result = validate_document(TaxpayerProfile("John", "Smith", "Mary", "Smith"), doc)
    assert result.is_valid is True

    with pytest.raises(TypeError):
        validate_document(TaxpayerProfile("John", "Smith"), {"employeeName": "John Smith"})


def test_profile_from_dict_accepts_camel_case():
    profile = TaxpayerProfile.from_dict({"firstName": "John", "lastName": "Smith", "spouseFirstName": "Mary"})
    assert profile == TaxpayerProfile("John", "Smith", spouse_first_name="Mary")
    assert profile.has_spouse is True
