"""Payer / recipient aliases shared by every 1099 variant."""

from __future__ import annotations

from .base import AddressParts

PAYER_FIELDS = dict(
    issuer_name=("payerName", "Payer.Name", "PayerName"),
    issuer_tax_id=("payerTIN", "Payer.TIN", "PayerTIN", "payer_tin"),
    issuer_address=("payerAddress", "Payer.Address"),
    recipient_name=("recipientName", "Recipient.Name", "RecipientName"),
    recipient_tax_id=("recipientTIN", "Recipient.TIN", "RecipientTIN", "recipient_tin"),
    recipient_address=("recipientAddress", "Recipient.Address"),
    recipient_address_parts=AddressParts(
        street=("recipientAddressStreet",),
        city=("recipientCity",),
        state=("recipientState",),
        zip=("recipientZipCode", "recipientZip"),
    ),
)
