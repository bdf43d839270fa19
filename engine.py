"""Document intake pipeline: normalize, gate on duplicates and identity, fold, recompute."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from form1040 import TaxLineSet, TaxYearContext, empty_line_set, fold, recompute, replay
from intake import normalize
from matching import (
    DuplicateDetector,
    DuplicateVerdict,
    IdentityValidationResult,
    MatchingConfig,
    TaxpayerProfile,
    validate_document,
)
from schemas import NormalizedDocument

logger = logging.getLogger(__name__)

ProfileLike = Union[TaxpayerProfile, Mapping[str, Any]]


class IntakeEngineError(Exception):
    """Raised when the intake pipeline is called with arguments it cannot use."""


@dataclass(frozen=True)
class IntakeResult:
    document: NormalizedDocument
    duplicate: DuplicateVerdict
    identity: Optional[IdentityValidationResult]
    accepted: bool
    line_set: TaxLineSet

    def to_dict(self) -> Dict[str, Any]:
        return {
            "document": self.document.to_document_dict(),
            "duplicate": self.duplicate.model_dump(mode="json"),
            "identity": self.identity.model_dump(mode="json") if self.identity is not None else None,
            "accepted": self.accepted,
        }


def _as_profile(profile: ProfileLike) -> TaxpayerProfile:
    if isinstance(profile, TaxpayerProfile):
        return profile
    if isinstance(profile, Mapping):
        return TaxpayerProfile.from_dict(dict(profile))
    raise IntakeEngineError(f"profile must be a TaxpayerProfile or mapping, got {type(profile).__name__}")


def _as_documents(documents: Iterable[NormalizedDocument]) -> List[NormalizedDocument]:
    resolved = list(documents)
    for document in resolved:
        if not isinstance(document, NormalizedDocument):
            raise IntakeEngineError(
                f"accepted documents must be normalized first, got {type(document).__name__}"
            )
    return resolved


class IntakeEngine:
    """Run extracted documents through the intake pipeline for one tax return."""

    def __init__(
        self,
        config: Optional[MatchingConfig] = None,
        tax_context: Optional[TaxYearContext] = None,
    ) -> None:
        self.config = config
        self.tax_context = tax_context
        self.detector = DuplicateDetector(config)

    def normalize(self, raw: Any, document_type: Any, document_id: Optional[str] = None) -> NormalizedDocument:
        return normalize(raw, document_type, document_id=document_id)

    def check_duplicates(
        self,
        document: NormalizedDocument,
        accepted: Iterable[NormalizedDocument],
    ) -> DuplicateVerdict:
        if not isinstance(document, NormalizedDocument):
            raise IntakeEngineError(f"document must be normalized first, got {type(document).__name__}")
        return self.detector.detect(document, _as_documents(accepted))

    def validate_identity(self, profile: ProfileLike, document: NormalizedDocument) -> IdentityValidationResult:
        if not isinstance(document, NormalizedDocument):
            raise IntakeEngineError(f"document must be normalized first, got {type(document).__name__}")
        return validate_document(_as_profile(profile), document, self.config)

    def ingest(
        self,
        raw: Any,
        document_type: Any,
        accepted: Iterable[NormalizedDocument],
        line_set: Optional[TaxLineSet] = None,
        profile: Optional[ProfileLike] = None,
        document_id: Optional[str] = None,
    ) -> IntakeResult:
        """Normalize ``raw`` and fold it into ``line_set`` when it passes both gates.

        Rejected documents leave the input lines untouched; the returned
        line-set is recomputed either way.
        """
        accepted_docs = _as_documents(accepted)
        if line_set is not None and not isinstance(line_set, TaxLineSet):
            raise IntakeEngineError(f"line_set must be a TaxLineSet, got {type(line_set).__name__}")
        line_set = line_set if line_set is not None else empty_line_set()

        document = self.normalize(raw, document_type, document_id)
        duplicate = self.detector.detect(document, accepted_docs)
        identity = self.validate_identity(profile, document) if profile is not None else None

        is_accepted = not duplicate.is_duplicate and (identity is None or identity.safe_to_continue)
        if is_accepted:
            line_set = fold(line_set, document)
            logger.info("Accepted %s document %s", document.document_type.value, document.document_id)
        else:
            logger.warning(
                "Held %s document %s for review (duplicate=%s, identity_ok=%s)",
                document.document_type.value,
                document.document_id,
                duplicate.is_duplicate,
                None if identity is None else identity.safe_to_continue,
            )

        return IntakeResult(
            document=document,
            duplicate=duplicate,
            identity=identity,
            accepted=is_accepted,
            line_set=recompute(line_set, self.tax_context),
        )

    def rebuild(self, accepted: Iterable[NormalizedDocument], base: Optional[TaxLineSet] = None) -> TaxLineSet:
        """Rebuild the line-set from the ordered list of accepted documents."""
        if base is not None and not isinstance(base, TaxLineSet):
            raise IntakeEngineError(f"base must be a TaxLineSet, got {type(base).__name__}")
        return recompute(replay(_as_documents(accepted), base), self.tax_context)


__all__ = ["IntakeEngine", "IntakeEngineError", "IntakeResult"]
