from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Severity = Literal["low", "medium", "high"]


class MatchCriteria(BaseModel):
    document_type_match: bool = False
    issuer_match: bool = False
    recipient_match: bool = False
    amount_match: bool = False
    name_match: bool = False


class DuplicateCandidate(BaseModel):
    document_id: Optional[str] = None
    matched_field_names: List[str] = Field(default_factory=list)
    score: float


class DuplicateVerdict(BaseModel):
    is_duplicate: bool = False
    confidence: float = 0.0
    candidates: List[DuplicateCandidate] = Field(default_factory=list)
    criteria: MatchCriteria = Field(default_factory=MatchCriteria)

    @property
    def best_match(self) -> Optional[DuplicateCandidate]:
        return self.candidates[0] if self.candidates else None


class IdentityMismatch(BaseModel):
    field: str
    profile_value: str
    document_value: str
    similarity: float
    severity: Severity


class IdentityValidationResult(BaseModel):
    is_valid: bool
    confidence: float
    mismatches: List[IdentityMismatch] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    @property
    def safe_to_continue(self) -> bool:
        return self.is_valid


__all__ = [
    "DuplicateCandidate",
    "DuplicateVerdict",
    "IdentityMismatch",
    "IdentityValidationResult",
    "MatchCriteria",
    "Severity",
]
