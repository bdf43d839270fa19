"""CLI for replaying a JSONL file of extractions through the intake pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from engine import IntakeEngine
from form1040 import FilingStatus, empty_line_set, get_context_for_year, summarize
from matching import TaxpayerProfile
from schemas import NormalizedDocument

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Replay extracted tax documents into a Form 1040 line-set.")
    parser.add_argument("--input", required=True, help="Input extractions JSONL path.")
    parser.add_argument("--profile", help="Taxpayer profile JSON path (first_name, last_name, spouse...).")
    parser.add_argument(
        "--filing-status",
        default=FilingStatus.SINGLE.value,
        help="Filing status (SINGLE, MFJ, MFS, HOH, QSS or the full name).",
    )
    parser.add_argument("--tax-year", type=int, default=2024, help="Tax year of the return.")
    parser.add_argument("--output", help="Output JSON path; stdout when omitted.")
    return parser.parse_args(argv)


def _raw_payload(record: Mapping[str, Any]) -> Dict[str, Any]:
    fields = record.get("fields")
    if fields is None:
        fields = record.get("extractedData", {})
    return {
        "extractedData": fields,
        "fullText": record.get("full_text") or record.get("fullText"),
        "correctedDocumentType": record.get("corrected_document_type") or record.get("correctedDocumentType"),
    }


def _load_profile(path: Optional[str]) -> Optional[TaxpayerProfile]:
    if not path:
        return None
    with Path(path).open("r", encoding="utf-8") as handle:
        return TaxpayerProfile.from_dict(json.load(handle))


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    args = parse_args(argv)
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        sys.exit(1)
    try:
        context = get_context_for_year(args.tax_year)
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)

    engine = IntakeEngine(tax_context=context)
    profile = _load_profile(args.profile)
    line_set = engine.rebuild([], base=empty_line_set(args.filing_status, args.tax_year))
    accepted: List[NormalizedDocument] = []
    records: List[Dict[str, Any]] = []

    with input_path.open("r", encoding="utf-8") as infile:
        for number, line in enumerate(infile, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except ValueError as exc:
                logger.warning("Skipping malformed line %s: %s", number, exc)
                continue
            if not isinstance(record, dict):
                logger.warning("Skipping line %s: expected a JSON object", number)
                continue

            document_id = record.get("document_id")
            result = engine.ingest(
                _raw_payload(record),
                record.get("document_type"),
                accepted,
                line_set=line_set,
                profile=profile,
                document_id=str(document_id) if document_id is not None else f"line-{number}",
            )
            if result.accepted:
                accepted.append(result.document)
            line_set = result.line_set
            records.append(result.to_dict())

    output = {
        "accepted_documents": [document.document_id for document in accepted],
        "records": records,
        "line_set": line_set.to_dict(),
        "summary": summarize(line_set, context).model_dump(mode="json"),
    }
    text = json.dumps(output, indent=2, ensure_ascii=False)
    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
        print(f"Accepted {len(accepted)} of {len(records)} documents; wrote {output_path}")
    else:
        print(text)


if __name__ == "__main__":
    main()
