"""Urbanism certificate models."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class CertificateStatus(StrEnum):
    DRAFT = "draft"
    ISSUED = "issued"


class PropertyRegime(StrEnum):
    INTRAVILAN = "Intravilan"
    EXTRAVILAN = "Extravilan"


class Applicant(BaseModel):
    """Section 1: who requests the certificate."""

    name: str = ""
    cnp_cui: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""


class PropertyInfo(BaseModel):
    """Section 2: identification of the property."""

    address: str = ""
    cadastral_number: str = ""
    area: float = 0.0
    uat: str = ""


class LegalRegime(BaseModel):
    """Section 4: legal regime of the property.

    ``property_regime`` is free text because GIS layers may carry values
    other than the two standard ones.
    """

    owner: str = ""
    usage_category: str = ""
    property_regime: str = PropertyRegime.INTRAVILAN.value


class RequiredDocuments(BaseModel):
    """Section 7: documents the applicant must attach."""

    plan_cadastral: bool = True
    plan_situatie: bool = True
    extras_cf: bool = True
    studiu_geotehnic: bool = False
    memoriu_tehnic: bool = False
    alte_documente: str = ""


class UrbanismCertificate(BaseModel):
    """A certificate de urbanism, as a draft or once issued."""

    number: str
    issue_date: date
    applicant: Applicant = Field(default_factory=Applicant)
    property: PropertyInfo = Field(default_factory=PropertyInfo)
    purpose: str = ""
    legal_regime: LegalRegime = Field(default_factory=LegalRegime)
    technical_regime: str = ""
    restrictions: str = ""
    required_documents: RequiredDocuments = Field(default_factory=RequiredDocuments)
    observations: str = ""
    gis_fields: list[str] = Field(default_factory=list)
    status: CertificateStatus = CertificateStatus.DRAFT
    uat_id: str | None = None
    created_at: datetime | None = None
