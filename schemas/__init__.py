"""Document data model and per-form field-alias tables."""

from typing import Dict

from . import div_1099, generic, int_1099, misc_1099, nec_1099, w2
from .base import FormSchema
from .documents import DocumentType, NormalizedDocument, Party, RawExtraction

SCHEMAS: Dict[DocumentType, FormSchema] = {
    DocumentType.W2: w2.SCHEMA,
    DocumentType.INT_1099: int_1099.SCHEMA,
    DocumentType.DIV_1099: div_1099.SCHEMA,
    DocumentType.MISC_1099: misc_1099.SCHEMA,
    DocumentType.NEC_1099: nec_1099.SCHEMA,
    DocumentType.GENERIC: generic.SCHEMA,
}


def schema_for(document_type: DocumentType) -> FormSchema:
    return SCHEMAS.get(document_type, generic.SCHEMA)


__all__ = [
    "DocumentType",
    "FormSchema",
    "NormalizedDocument",
    "Party",
    "RawExtraction",
    "SCHEMAS",
    "schema_for",
]
