"""Similarity kernel, duplicate detection and identity validation."""

from .config import DEFAULT_CONFIG, MatchingConfig, load_matching_config
from .duplicates import DuplicateDetector, SimilarityResult, detect_duplicates, score_pair
from .identity import ExtractedNames, TaxpayerProfile, extract_names, validate_document, validate_names
from .models import (
    DuplicateCandidate,
    DuplicateVerdict,
    IdentityMismatch,
    IdentityValidationResult,
    MatchCriteria,
)
from .similarity import amount_similarity, ids_equal, normalize_string, string_similarity

__all__ = [
    "DEFAULT_CONFIG",
    "DuplicateCandidate",
    "DuplicateDetector",
    "DuplicateVerdict",
    "ExtractedNames",
    "IdentityMismatch",
    "IdentityValidationResult",
    "MatchCriteria",
    "MatchingConfig",
    "SimilarityResult",
    "TaxpayerProfile",
    "amount_similarity",
    "detect_duplicates",
    "extract_names",
    "ids_equal",
    "load_matching_config",
    "normalize_string",
    "score_pair",
    "string_similarity",
    "validate_document",
    "validate_names",
]
