"""Normalization of raw extractions into canonical documents."""

from .normalizer import get_first, normalize, resolve_document_type
from .text_fallback import extract_box_value, scan_amount
from .values import (
    ParsedAddress,
    clean_text,
    format_tax_id,
    normalize_tax_id,
    parse_address,
    parse_amount,
    split_name,
    unwrap_field_value,
)

__all__ = [
    "ParsedAddress",
    "clean_text",
    "extract_box_value",
    "format_tax_id",
    "get_first",
    "normalize",
    "normalize_tax_id",
    "parse_address",
    "parse_amount",
    "resolve_document_type",
    "scan_amount",
    "split_name",
    "unwrap_field_value",
]
