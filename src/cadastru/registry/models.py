"""Models for the agricultural land-contract registry."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field


class ContractType(StrEnum):
    """Legal form of the land-use contract."""

    ARENDA = "Arendă"
    CONCESIUNE = "Concesiune"
    INCHIRIERE = "Inchiriere"


class LandUse(StrEnum):
    """Agricultural usage category of the parcel."""

    ARABIL = "Arabil"
    PASUNE = "Pasune"
    FANETE = "Fanete"
    VIE = "Vie"
    LIVADA = "Livada"


class HolderType(StrEnum):
    """Natural person (PF) or legal entity (PJ)."""

    PF = "PF"
    PJ = "PJ"


class PaymentPeriod(StrEnum):
    ANUAL = "anual"
    SEMESTRIAL = "semestrial"
    TRIMESTRIAL = "trimestrial"
    LUNAR = "lunar"


class AssignmentMode(StrEnum):
    """How the parcel was assigned to the holder."""

    DIRECTA = "Directa"
    LICITATIE = "Licitatie"


class ParcelData(BaseModel):
    """Section A: the parcel under contract."""

    cf_number: str
    cadastral_number: str
    area: float
    land_use: LandUse = LandUse.ARABIL
    location: str = ""


class Holder(BaseModel):
    """Section C: the contract holder."""

    holder_type: HolderType = HolderType.PF
    name: str
    cnp_cui: str
    address: str
    phone: str = ""
    email: str = ""


class ContractTerms(BaseModel):
    """Section D: the contract itself."""

    number: str
    signed_on: date
    expires_on: date
    contracted_area: float
    price: float
    payment_period: PaymentPeriod = PaymentPeriod.ANUAL
    assignment_mode: AssignmentMode = AssignmentMode.DIRECTA
    hcl_number: str = ""
    hcl_date: date | None = None


class ContractDraft(BaseModel):
    """Contract data as submitted, before validation and storage."""

    parcel: ParcelData
    contract_type: ContractType = ContractType.ARENDA
    holder: Holder
    terms: ContractTerms


class Contract(ContractDraft):
    """A registered contract."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    uat_id: str
    document_path: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_active(self, on: date | None = None) -> bool:
        on = on or date.today()
        return self.terms.signed_on <= on <= self.terms.expires_on
