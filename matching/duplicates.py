"""Weighted similarity scoring of a new document against previously accepted ones."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from schemas import DocumentType, NormalizedDocument
from schemas.base import (
    CAPITAL_GAIN_DISTRIBUTIONS,
    FEDERAL_WITHHOLDING,
    INCOME_AMOUNT,
    INTEREST_INCOME,
    NONEMPLOYEE_COMPENSATION,
    ORDINARY_DIVIDENDS,
    OTHER_INCOME,
    QUALIFIED_DIVIDENDS,
    RENTS,
    ROYALTIES,
    WAGES,
)

from .config import DEFAULT_CONFIG, MatchingConfig
from .models import DuplicateCandidate, DuplicateVerdict, MatchCriteria
from .similarity import amount_similarity, ids_equal, normalize_string, string_similarity

logger = logging.getLogger(__name__)

ISSUER = "issuer"
RECIPIENT = "recipient"
AMOUNT = "amount"

NAME = "name"
TAX_ID = "tax_id"


@dataclass(frozen=True)
class WeightedField:
    name: str
    role: str
    kind: str
    weight: float
    amount_key: str = ""


@dataclass(frozen=True)
class SimilarityResult:
    overall_score: float
    matched_field_names: Tuple[str, ...] = ()


def _payer_fields() -> Tuple[WeightedField, ...]:
    return (
        WeightedField("payer_name", ISSUER, NAME, 25),
        WeightedField("payer_tin", ISSUER, TAX_ID, 25),
        WeightedField("recipient_name", RECIPIENT, NAME, 20),
        WeightedField("recipient_tin", RECIPIENT, TAX_ID, 30),
    )


def _amount(key: str, weight: float) -> WeightedField:
    return WeightedField(key, AMOUNT, AMOUNT, weight, amount_key=key)


FIELD_TABLES: Dict[DocumentType, Tuple[WeightedField, ...]] = {
    DocumentType.W2: (
        WeightedField("employer_name", ISSUER, NAME, 25),
        WeightedField("employer_ein", ISSUER, TAX_ID, 25),
        WeightedField("employee_name", RECIPIENT, NAME, 20),
        WeightedField("employee_ssn", RECIPIENT, TAX_ID, 30),
        _amount(WAGES, 15),
        _amount(FEDERAL_WITHHOLDING, 10),
    ),
    DocumentType.INT_1099: _payer_fields() + (
        _amount(INTEREST_INCOME, 20),
        _amount(FEDERAL_WITHHOLDING, 10),
    ),
    DocumentType.DIV_1099: _payer_fields() + (
        _amount(ORDINARY_DIVIDENDS, 10),
        _amount(QUALIFIED_DIVIDENDS, 5),
        _amount(CAPITAL_GAIN_DISTRIBUTIONS, 5),
        _amount(FEDERAL_WITHHOLDING, 10),
    ),
    DocumentType.MISC_1099: _payer_fields() + (
        _amount(RENTS, 7),
        _amount(ROYALTIES, 7),
        _amount(OTHER_INCOME, 6),
        _amount(FEDERAL_WITHHOLDING, 10),
    ),
    DocumentType.NEC_1099: _payer_fields() + (
        _amount(NONEMPLOYEE_COMPENSATION, 20),
        _amount(FEDERAL_WITHHOLDING, 10),
    ),
    DocumentType.GENERIC: (
        WeightedField("payer_name", ISSUER, NAME, 20),
        WeightedField("recipient_name", RECIPIENT, NAME, 20),
        _amount(INCOME_AMOUNT, 15),
        _amount(FEDERAL_WITHHOLDING, 15),
    ),
}


def _field_value(document: NormalizedDocument, entry: WeightedField) -> Any:
    if entry.role == AMOUNT:
        return document.amounts.get(entry.amount_key)
    party = document.issuer if entry.role == ISSUER else document.recipient
    return party.name if entry.kind == NAME else party.tax_id


def _present(entry: WeightedField, value: Any) -> bool:
    if entry.kind == NAME:
        return bool(normalize_string(value))
    if entry.kind == TAX_ID:
        return bool(value)
    return value is not None


def _matches(entry: WeightedField, left: Any, right: Any, config: MatchingConfig) -> bool:
    if entry.kind == NAME:
        threshold = config.issuer_name_similarity if entry.role == ISSUER else config.name_similarity
        return string_similarity(left, right, config) >= threshold
    if entry.kind == TAX_ID:
        return ids_equal(left, right)
    return amount_similarity(left, right, config)


def score_pair(
    new_doc: NormalizedDocument,
    existing: NormalizedDocument,
    config: MatchingConfig = DEFAULT_CONFIG,
) -> SimilarityResult:
    """Weighted score normalized by the weight of fields present on both sides."""
    table = FIELD_TABLES.get(new_doc.document_type, FIELD_TABLES[DocumentType.GENERIC])
    total = 0.0
    possible = 0.0
    matched: List[str] = []
    for entry in table:
        left = _field_value(new_doc, entry)
        right = _field_value(existing, entry)
        if not (_present(entry, left) and _present(entry, right)):
            continue
        possible += entry.weight
        if _matches(entry, left, right, config):
            total += entry.weight
            matched.append(entry.name)
    overall = total / possible if possible else 0.0
    return SimilarityResult(overall_score=overall, matched_field_names=tuple(matched))


def _criteria(document_type: DocumentType, matched: Iterable[str]) -> MatchCriteria:
    table = FIELD_TABLES.get(document_type, FIELD_TABLES[DocumentType.GENERIC])
    matched_names = set(matched)
    hits = [entry for entry in table if entry.name in matched_names]
    return MatchCriteria(
        document_type_match=True,
        issuer_match=any(entry.role == ISSUER for entry in hits),
        recipient_match=any(entry.role == RECIPIENT for entry in hits),
        amount_match=any(entry.role == AMOUNT for entry in hits),
        name_match=any(entry.kind == NAME for entry in hits),
    )


class DuplicateDetector:
    """Classify a newly normalized document against the accepted documents of a return."""

    def __init__(self, config: Optional[MatchingConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def detect(
        self,
        new_doc: NormalizedDocument,
        candidates: Iterable[NormalizedDocument],
    ) -> DuplicateVerdict:
        if not isinstance(new_doc, NormalizedDocument):
            raise TypeError(f"detect() expects a NormalizedDocument, got {type(new_doc).__name__}")
        candidates = list(candidates)
        for candidate in candidates:
            if not isinstance(candidate, NormalizedDocument):
                raise TypeError(f"candidates must be NormalizedDocument, got {type(candidate).__name__}")

        try:
            return self._detect(new_doc, candidates)
        except Exception:
            logger.exception("Duplicate detection failed; treating %s as new", new_doc.document_id)
            return DuplicateVerdict()

    def _detect(self, new_doc: NormalizedDocument, candidates: List[NormalizedDocument]) -> DuplicateVerdict:
        scored: List[Tuple[SimilarityResult, NormalizedDocument]] = []
        for candidate in candidates:
            if candidate.document_type is not new_doc.document_type:
                continue
            result = score_pair(new_doc, candidate, self.config)
            logger.debug(
                "Similarity %s vs %s: %.3f %s",
                new_doc.document_id,
                candidate.document_id,
                result.overall_score,
                list(result.matched_field_names),
            )
            scored.append((result, candidate))

        if not scored:
            return DuplicateVerdict()

        scored.sort(key=lambda item: item[0].overall_score, reverse=True)
        best, _ = scored[0]
        is_duplicate = best.overall_score >= self.config.duplicate_threshold
        if is_duplicate:
            logger.info(
                "Document %s looks like a duplicate of %s (score %.3f)",
                new_doc.document_id,
                scored[0][1].document_id,
                best.overall_score,
            )
        return DuplicateVerdict(
            is_duplicate=is_duplicate,
            confidence=best.overall_score,
            candidates=[
                DuplicateCandidate(
                    document_id=candidate.document_id,
                    matched_field_names=list(result.matched_field_names),
                    score=result.overall_score,
                )
                for result, candidate in scored
            ],
            criteria=_criteria(new_doc.document_type, best.matched_field_names),
        )


def detect_duplicates(
    new_doc: NormalizedDocument,
    candidates: Iterable[NormalizedDocument],
    config: Optional[MatchingConfig] = None,
) -> DuplicateVerdict:
    return DuplicateDetector(config).detect(new_doc, candidates)
