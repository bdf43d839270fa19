"""Core document types shared by the intake, matching and form1040 packages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class DocumentType(str, Enum):
    W2 = "W2"
    INT_1099 = "INT_1099"
    DIV_1099 = "DIV_1099"
    MISC_1099 = "MISC_1099"
    NEC_1099 = "NEC_1099"
    GENERIC = "GENERIC"

    @property
    def provenance_label(self) -> str:
        """Label recorded in the line-set provenance ("W2", "1099", "GENERIC")."""
        if self is DocumentType.W2:
            return "W2"
        if self is DocumentType.GENERIC:
            return "GENERIC"
        return "1099"

    @property
    def identity_rank(self) -> int:
        """How authoritative the document is for the taxpayer's personal identity."""
        if self is DocumentType.W2:
            return 2
        if self is DocumentType.GENERIC:
            return 0
        return 1

    @classmethod
    def coerce(cls, value: Any) -> "DocumentType":
        """Resolve loose spellings ("W-2", "FORM_1099_INT", "1099-div") to a member.

        Anything unrecognised becomes GENERIC.
        """
        if isinstance(value, DocumentType):
            return value
        token = re.sub(r"[^A-Z0-9]", "", str(value or "").upper())
        token = token.replace("FORM", "")
        return _TYPE_TOKENS.get(token, cls.GENERIC)


_TYPE_TOKENS: Dict[str, DocumentType] = {
    "W2": DocumentType.W2,
    "INT1099": DocumentType.INT_1099,
    "1099INT": DocumentType.INT_1099,
    "DIV1099": DocumentType.DIV_1099,
    "1099DIV": DocumentType.DIV_1099,
    "MISC1099": DocumentType.MISC_1099,
    "1099MISC": DocumentType.MISC_1099,
    "NEC1099": DocumentType.NEC_1099,
    "1099NEC": DocumentType.NEC_1099,
    "GENERIC": DocumentType.GENERIC,
}


@dataclass(frozen=True)
class Party:
    """A name / tax id / address block for an issuer or a recipient."""

    name: str = ""
    tax_id: str = ""
    address_street: str = ""
    address_city: str = ""
    address_state: str = ""
    address_zip: str = ""

    @property
    def has_address(self) -> bool:
        return any((self.address_street, self.address_city, self.address_state, self.address_zip))

    @property
    def is_empty(self) -> bool:
        return not (self.name or self.tax_id or self.has_address)


@dataclass(frozen=True)
class RawExtraction:
    """Field map and optional OCR text as produced by the external extractor."""

    fields: Mapping[str, Any] = field(default_factory=dict)
    full_text: Optional[str] = None
    corrected_document_type: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "RawExtraction":
        """Build from a loose payload, unwrapping a nested ``extractedData`` map."""
        if isinstance(payload, RawExtraction):
            return payload
        if not isinstance(payload, Mapping):
            return cls()
        data: Mapping[str, Any] = payload
        nested = payload.get("extractedData")
        if isinstance(nested, Mapping):
            data = nested
        full_text = data.get("fullText") or data.get("full_text") or payload.get("fullText") or payload.get("full_text")
        corrected = data.get("correctedDocumentType") or payload.get("correctedDocumentType")
        return cls(
            fields=dict(data),
            full_text=full_text if isinstance(full_text, str) else None,
            corrected_document_type=str(corrected) if corrected else None,
        )


@dataclass(frozen=True)
class NormalizedDocument:
    """Canonical view of one extracted document. Never mutated after creation."""

    document_type: DocumentType
    issuer: Party = field(default_factory=Party)
    recipient: Party = field(default_factory=Party)
    amounts: Mapping[str, Decimal] = field(default_factory=dict)
    raw_text: str = ""
    spouse_name: str = ""
    document_id: Optional[str] = None

    @property
    def identity(self) -> Party:
        """The taxpayer identity carried by the document (employee / recipient)."""
        return self.recipient

    def amount(self, key: str) -> Decimal:
        return self.amounts.get(key, Decimal("0"))

    def has_amount(self, key: str) -> bool:
        return key in self.amounts

    def to_document_dict(self) -> Dict[str, Any]:
        """Plain-dict layout for logging and JSON export."""
        return {
            "document_id": self.document_id,
            "document_type": self.document_type.value,
            "issuer": _party_dict(self.issuer),
            "recipient": _party_dict(self.recipient),
            "spouse_name": self.spouse_name,
            "amounts": {key: str(value) for key, value in self.amounts.items()},
        }


def _party_dict(party: Party) -> Dict[str, str]:
    return {
        "name": party.name,
        "tax_id": party.tax_id,
        "address_street": party.address_street,
        "address_city": party.address_city,
        "address_state": party.address_state,
        "address_zip": party.address_zip,
    }
