import json

import pytest

from intake.cli import main

W2_RECORD = {
    "document_id": "w2-1",
    "document_type": "W2",
    "fields": {
        "employerName": "Acme Corp",
        "employerEIN": "12-3456789",
        "employeeName": "John Smith",
        "employeeSSN": "123-45-6789",
        "wages": "65,000.00",
        "federalTaxWithheld": "9,500.00",
    },
}


def _write_jsonl(path, records):
    lines = [json.dumps(record) if not isinstance(record, str) else record for record in records]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def test_cli_replays_records_and_writes_line_set(tmp_path):
    input_path = tmp_path / "docs.jsonl"
    output_path = tmp_path / "out" / "return.json"
    duplicate = dict(W2_RECORD, document_id="w2-dup")
    interest = {
        "document_id": "int-1",
        "document_type": "1099-INT",
        "fields": {"payerName": "First Bank", "recipientName": "John Smith", "interestIncome": "100.00"},
    }
    _write_jsonl(input_path, [W2_RECORD, "{not json", duplicate, interest])

    profile_path = tmp_path / "profile.json"
    profile_path.write_text(json.dumps({"first_name": "John", "last_name": "Smith"}), encoding="utf-8")

    main(["--input", str(input_path), "--output", str(output_path), "--profile", str(profile_path)])

    output = json.loads(output_path.read_text(encoding="utf-8"))
    assert output["accepted_documents"] == ["w2-1", "int-1"]
    assert [record["accepted"] for record in output["records"]] == [True, False, True]
    assert output["records"][1]["duplicate"]["is_duplicate"] is True
    assert output["line_set"]["lines"]["line1"] == "65000.00"
    assert output["line_set"]["lines"]["line9"] == "65100.00"
    assert output["line_set"]["identity"]["provenance"] == ["W2", "1099"]
    assert output["summary"]["filing_status"] == "SINGLE"


def test_cli_prints_to_stdout_and_honours_filing_status(tmp_path, capsys):
    input_path = tmp_path / "docs.jsonl"
    _write_jsonl(input_path, [W2_RECORD])

    main(["--input", str(input_path), "--filing-status", "MFJ", "--tax-year", "2023"])

    output = json.loads(capsys.readouterr().out)
    assert output["line_set"]["filing_status"] == "MARRIED_FILING_JOINTLY"
    assert output["line_set"]["tax_year"] == 2023
    assert output["line_set"]["lines"]["line12"] == "27700.00"


def test_cli_missing_input_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(tmp_path / "missing.jsonl")])
    assert excinfo.value.code == 1


def test_cli_unsupported_tax_year_exits(tmp_path):
    input_path = tmp_path / "docs.jsonl"
    _write_jsonl(input_path, [W2_RECORD])
    with pytest.raises(SystemExit) as excinfo:
        main(["--input", str(input_path), "--tax-year", "1999"])
    assert excinfo.value.code == 1
