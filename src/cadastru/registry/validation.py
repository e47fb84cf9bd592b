"""Field and cross-field validation of contract submissions."""

from __future__ import annotations

import re
from typing import Any

from cadastru.registry.models import ContractDraft, HolderType


class ContractValidationError(ValueError):
    """Raised when a contract submission fails validation."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        summary = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items())
        super().__init__(f"Invalid contract: {summary}")


def validate_required(value: Any) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return "Câmp obligatoriu."
    return None


def validate_email(value: str) -> str | None:
    if not value.strip():
        return None
    if not re.fullmatch(r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}", value.strip()):
        return "Adresă de email invalidă."
    return None


def validate_phone(value: str) -> str | None:
    if not value.strip():
        return None
    digits = re.sub(r"[\s\-\(\)\+]", "", value)
    if not digits.isdigit() or len(digits) < 10:
        return "Număr de telefon invalid (minim 10 cifre)."
    return None


def validate_positive(value: float) -> str | None:
    if value <= 0:
        return "Valoarea trebuie să fie pozitivă."
    return None


def validate_cnp_cui(value: str, holder_type: HolderType) -> str | None:
    """CNP is 13 digits; CUI is 2-10 digits, optionally prefixed with RO."""
    value = value.strip().upper()
    if holder_type == HolderType.PF:
        if not re.fullmatch(r"\d{13}", value):
            return "CNP-ul trebuie să aibă 13 cifre."
    elif not re.fullmatch(r"(RO)?\d{2,10}", value):
        return "CUI invalid."
    return None


def validate_contract(draft: ContractDraft) -> dict[str, list[str]]:
    """Validate a contract draft.

    Returns:
        Dict mapping field paths to error messages. Empty dict means valid.
    """
    errors: dict[str, list[str]] = {}

    def check(field: str, err: str | None) -> None:
        if err:
            errors.setdefault(field, []).append(err)

    parcel, holder, terms = draft.parcel, draft.holder, draft.terms

    for field, value in (
        ("parcel.cf_number", parcel.cf_number),
        ("parcel.cadastral_number", parcel.cadastral_number),
        ("holder.name", holder.name),
        ("holder.address", holder.address),
        ("terms.number", terms.number),
    ):
        check(field, validate_required(value))

    check("holder.cnp_cui", validate_required(holder.cnp_cui)
          or validate_cnp_cui(holder.cnp_cui, holder.holder_type))
    check("holder.email", validate_email(holder.email))
    check("holder.phone", validate_phone(holder.phone))

    check("parcel.area", validate_positive(parcel.area))
    check("terms.contracted_area", validate_positive(terms.contracted_area))
    check("terms.price", validate_positive(terms.price))

    if terms.expires_on <= terms.signed_on:
        check("terms.expires_on", "Data expirării trebuie să fie după data încheierii.")
    if parcel.area > 0 and terms.contracted_area > parcel.area:
        check("terms.contracted_area", "Suprafața contractată depășește suprafața parcelei.")

    return errors
