"""Compare the taxpayer profile against the names recovered from a document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from intake.values import clean_text, split_name
from schemas import NormalizedDocument

from .config import DEFAULT_CONFIG, MatchingConfig
from .models import IdentityMismatch, IdentityValidationResult, Severity
from .similarity import string_similarity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxpayerProfile:
    first_name: str
    last_name: str
    spouse_first_name: Optional[str] = None
    spouse_last_name: Optional[str] = None

    @property
    def has_spouse(self) -> bool:
        return bool(self.spouse_first_name or self.spouse_last_name)

    @classmethod
    def from_dict(cls, data: dict) -> "TaxpayerProfile":
        def pick(*keys: str) -> Optional[str]:
            for key in keys:
                if data.get(key):
                    return str(data[key])
            return None

        return cls(
            first_name=pick("first_name", "firstName") or "",
            last_name=pick("last_name", "lastName") or "",
            spouse_first_name=pick("spouse_first_name", "spouseFirstName"),
            spouse_last_name=pick("spouse_last_name", "spouseLastName"),
        )


@dataclass(frozen=True)
class ExtractedNames:
    primary_name: Optional[str] = None
    spouse_name: Optional[str] = None


def extract_names(document: NormalizedDocument) -> ExtractedNames:
    """Employee / recipient name and spouse name carried by a normalized document."""
    return ExtractedNames(
        primary_name=document.recipient.name or None,
        spouse_name=document.spouse_name or None,
    )


def _severity(similarity: float, config: MatchingConfig) -> Severity:
    if similarity < config.high_threshold:
        return "high"
    if similarity < config.medium_threshold:
        return "medium"
    return "low"


def _compare(
    field: str,
    profile_value: str,
    document_value: str,
    config: MatchingConfig,
    mismatches: List[IdentityMismatch],
    suggestions: List[str],
) -> None:
    similarity = string_similarity(profile_value, document_value, config)
    if similarity >= config.mismatch_threshold:
        return
    mismatches.append(
        IdentityMismatch(
            field=field,
            profile_value=profile_value,
            document_value=document_value,
            similarity=similarity,
            severity=_severity(similarity, config),
        )
    )
    if similarity > config.suggestion_floor:
        suggestions.append(f'Did you mean "{document_value}" instead of "{profile_value}"?')


def _confidence(mismatches: List[IdentityMismatch]) -> float:
    high = sum(1 for m in mismatches if m.severity == "high")
    medium = sum(1 for m in mismatches if m.severity == "medium")
    if high:
        return max(0.1, 1.0 - 0.4 * high - 0.2 * medium)
    if medium:
        return max(0.6, 1.0 - 0.2 * medium)
    if mismatches:
        return max(0.8, 1.0 - 0.1 * len(mismatches))
    return 1.0


def validate_names(
    profile: TaxpayerProfile,
    extracted: ExtractedNames,
    config: Optional[MatchingConfig] = None,
) -> IdentityValidationResult:
    config = config or DEFAULT_CONFIG
    mismatches: List[IdentityMismatch] = []
    suggestions: List[str] = []

    if extracted.primary_name:
        doc = split_name(extracted.primary_name)
        _compare("first_name", clean_text(profile.first_name), doc.first, config, mismatches, suggestions)
        _compare("last_name", clean_text(profile.last_name), doc.last, config, mismatches, suggestions)

    if profile.has_spouse and extracted.spouse_name:
        doc = split_name(extracted.spouse_name)
        _compare("spouse_first_name", clean_text(profile.spouse_first_name), doc.first, config, mismatches, suggestions)
        _compare("spouse_last_name", clean_text(profile.spouse_last_name), doc.last, config, mismatches, suggestions)

    result = IdentityValidationResult(
        is_valid=all(m.severity == "low" for m in mismatches),
        confidence=_confidence(mismatches),
        mismatches=mismatches,
        suggestions=suggestions,
    )
    if mismatches:
        logger.info(
            "Identity check found %s mismatch(es): %s",
            len(mismatches),
            ", ".join(f"{m.field}={m.severity}" for m in mismatches),
        )
    return result


def validate_document(
    profile: TaxpayerProfile,
    document: NormalizedDocument,
    config: Optional[MatchingConfig] = None,
) -> IdentityValidationResult:
    if not isinstance(document, NormalizedDocument):
        raise TypeError(f"validate_document() expects a NormalizedDocument, got {type(document).__name__}")
    return validate_names(profile, extract_names(document), config)
