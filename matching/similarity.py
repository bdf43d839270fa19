"""String and number comparators used by duplicate detection and identity checks."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Dict, FrozenSet

from rapidfuzz.distance import Levenshtein

from intake.values import normalize_tax_id, parse_amount

from .config import DEFAULT_CONFIG, MatchingConfig

_STRIP_RE = re.compile(r"[^a-z0-9\s]")
_SPACE_RE = re.compile(r"\s+")

NICKNAMES: Dict[str, FrozenSet[str]] = {
    "robert": frozenset({"bob", "rob", "bobby"}),
    "william": frozenset({"bill", "will", "billy"}),
    "richard": frozenset({"rick", "dick", "rich"}),
    "michael": frozenset({"mike", "mick"}),
    "elizabeth": frozenset({"liz", "beth", "betty"}),
    "katherine": frozenset({"kate", "kathy", "katie"}),
    "jennifer": frozenset({"jen", "jenny"}),
    "christopher": frozenset({"chris"}),
    "matthew": frozenset({"matt"}),
    "benjamin": frozenset({"ben"}),
    "joseph": frozenset({"joe", "joey"}),
    "daniel": frozenset({"dan", "danny"}),
    "anthony": frozenset({"tony"}),
    "patricia": frozenset({"pat", "patty"}),
    "susan": frozenset({"sue", "susie"}),
    "margaret": frozenset({"maggie", "meg", "peggy"}),
}


def normalize_string(value: Any) -> str:
    """Lowercase, drop punctuation, collapse whitespace."""
    if value is None:
        return ""
    text = _STRIP_RE.sub("", str(value).lower())
    return _SPACE_RE.sub(" ", text).strip()


def is_nickname_pair(a: str, b: str) -> bool:
    for canonical, nicknames in NICKNAMES.items():
        if (a == canonical and b in nicknames) or (b == canonical and a in nicknames):
            return True
        if a in nicknames and b in nicknames:
            return True
    return False


def string_similarity(a: Any, b: Any, config: MatchingConfig = DEFAULT_CONFIG) -> float:
    """Similarity in [0, 1]: exact (normalized) match, nickname pair, else normalized Levenshtein."""
    left = normalize_string(a)
    right = normalize_string(b)
    if not left and not right:
        return 1.0
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0
    if is_nickname_pair(left, right):
        return config.nickname_similarity
    return float(Levenshtein.normalized_similarity(left, right))


def amount_similarity(a: Any, b: Any, config: MatchingConfig = DEFAULT_CONFIG) -> bool:
    """True when both amounts are zero, or both non-zero and within the relative threshold."""
    left = parse_amount(a)
    right = parse_amount(b)
    if left == 0 and right == 0:
        return True
    if left == 0 or right == 0:
        return False
    largest = max(abs(left), abs(right))
    similarity = Decimal(1) - abs(left - right) / largest
    return similarity >= Decimal(str(config.amount_similarity))


def ids_equal(a: Any, b: Any) -> bool:
    """Digit-only equality; False when either side has no digits."""
    left = normalize_tax_id(a)
    right = normalize_tax_id(b)
    if not left or not right:
        return False
    return left == right
