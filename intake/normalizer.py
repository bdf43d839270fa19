"""Turn a raw extraction into a :class:`NormalizedDocument`."""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from schemas import DocumentType, NormalizedDocument, Party, RawExtraction, schema_for
from schemas.base import Aliases, AddressParts

from .values import clean_text, is_blank, normalize_tax_id, parse_address, parse_amount, unwrap_field_value

logger = logging.getLogger(__name__)

_KEY_TOKEN_RE = re.compile(r"[^a-z0-9]")
_LINE_KEY_RE = re.compile(r"(?:form1040)?line(\d{1,2}[a-d]?)")


def _key_token(key: Any) -> str:
    return _KEY_TOKEN_RE.sub("", str(key).lower())


def _index(fields: Mapping[str, Any]) -> Dict[str, Any]:
    index: Dict[str, Any] = {}
    for key, value in fields.items():
        index.setdefault(_key_token(key), value)
    return index


def _get_nested(fields: Mapping[str, Any], path: str) -> Any:
    current: Any = fields
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        wanted = _key_token(part)
        current = next((v for k, v in current.items() if _key_token(k) == wanted), None)
    return current


def get_first(fields: Mapping[str, Any], aliases: Aliases, index: Optional[Dict[str, Any]] = None) -> Any:
    """Return the first non-blank value found under any alias."""
    index = index if index is not None else _index(fields)
    for alias in aliases:
        value = index.get(_key_token(alias))
        if is_blank(value) and "." in alias:
            value = _get_nested(fields, alias)
        if not is_blank(value):
            return unwrap_field_value(value)
    return None


def _party(
    fields: Mapping[str, Any],
    index: Dict[str, Any],
    name: Aliases,
    tax_id: Aliases,
    address: Aliases,
    parts: Optional[AddressParts] = None,
) -> Party:
    street = city = state = zip_code = ""
    if parts is not None:
        street = clean_text(get_first(fields, parts.street, index))
        city = clean_text(get_first(fields, parts.city, index))
        state = clean_text(get_first(fields, parts.state, index))
        zip_code = clean_text(get_first(fields, parts.zip, index))
    if not (street or city or state or zip_code):
        street, city, state, zip_code = parse_address(get_first(fields, address, index))
    return Party(
        name=clean_text(get_first(fields, name, index)),
        tax_id=normalize_tax_id(get_first(fields, tax_id, index)),
        address_street=street,
        address_city=city,
        address_state=state,
        address_zip=zip_code,
    )


def _passthrough_lines(fields: Mapping[str, Any]) -> Dict[str, Decimal]:
    """Keys already named after a 1040 line ("line8", "Line 2b") map onto themselves."""
    amounts: Dict[str, Decimal] = {}
    for key, value in fields.items():
        match = _LINE_KEY_RE.fullmatch(_key_token(key))
        if match and not is_blank(value):
            amounts.setdefault(f"line{match.group(1)}", parse_amount(value))
    return amounts


def resolve_document_type(extraction: RawExtraction, document_type: Any) -> DocumentType:
    resolved = DocumentType.coerce(document_type)
    if extraction.corrected_document_type:
        corrected = DocumentType.coerce(extraction.corrected_document_type)
        if corrected is not DocumentType.GENERIC and corrected is not resolved:
            logger.info("Extractor corrected document type %s -> %s", resolved.value, corrected.value)
            resolved = corrected
    if resolved is DocumentType.GENERIC:
        logger.warning("No dedicated schema for document type %r; using generic mapping", document_type)
    return resolved


def normalize(raw: Any, document_type: Any, document_id: Optional[str] = None) -> NormalizedDocument:
    """Normalize a raw extraction (``RawExtraction`` or plain mapping) for ``document_type``.

    Fields that cannot be resolved are left out of ``amounts``; blank identity
    fields become empty strings. Never raises on malformed input.
    """
    extraction = RawExtraction.from_payload(raw)
    resolved = resolve_document_type(extraction, document_type)
    schema = schema_for(resolved)
    fields = extraction.fields
    index = _index(fields)

    issuer = _party(fields, index, schema.issuer_name, schema.issuer_tax_id, schema.issuer_address)
    recipient = _party(
        fields,
        index,
        schema.recipient_name,
        schema.recipient_tax_id,
        schema.recipient_address,
        schema.recipient_address_parts,
    )

    amounts: Dict[str, Decimal] = {}
    for key, aliases in schema.amounts.items():
        value = get_first(fields, aliases, index)
        if value is None:
            continue
        amounts[key] = parse_amount(value)
    if resolved is DocumentType.GENERIC:
        for key, value in _passthrough_lines(fields).items():
            amounts.setdefault(key, value)

    if document_id is None:
        raw_id = get_first(fields, ("documentId", "document_id", "doc_id"), index)
        document_id = str(raw_id) if raw_id is not None else None

    document = NormalizedDocument(
        document_type=resolved,
        issuer=issuer,
        recipient=recipient,
        amounts=amounts,
        raw_text=extraction.full_text or "",
        spouse_name=clean_text(get_first(fields, schema.spouse_name, index)),
        document_id=document_id,
    )
    logger.debug("Normalized %s document %s: %s", resolved.value, document_id, sorted(amounts))
    return document
