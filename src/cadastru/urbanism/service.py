"""Drafting, GIS prefill and issuance of urbanism certificates."""

from __future__ import annotations

import logging
import random
from datetime import date, datetime, timezone

from cadastru.core.config import UrbanismConfig
from cadastru.gis.models import LookupResult
from cadastru.urbanism.models import CertificateStatus, UrbanismCertificate

logger = logging.getLogger(__name__)

# Resolved GIS fields by the certificate section they fill.
_PROPERTY_FIELDS = frozenset({"area", "address"})
_LEGAL_FIELDS = frozenset({"owner", "usage_category", "property_regime"})

_NUMBER_ATTEMPTS = 20


def generate_certificate_number(
    today: date | None = None,
    rng: random.Random | None = None,
) -> str:
    """Return a certificate number of the form ``NNNN/YYYY``."""
    today = today or date.today()
    rng = rng or random.Random()
    return f"{rng.randrange(10_000):04d}/{today.year}"


class CertificateStore:
    """In-memory store for issued certificates."""

    def __init__(self) -> None:
        self._certificates: list[UrbanismCertificate] = []

    def save(self, certificate: UrbanismCertificate) -> UrbanismCertificate:
        self._certificates.append(certificate)
        return certificate

    def list_for_uat(self, uat_id: str) -> list[UrbanismCertificate]:
        return [c for c in self._certificates if c.uat_id == uat_id]

    def numbers(self) -> set[str]:
        return {c.number for c in self._certificates}


class UrbanismService:
    """Builds certificate drafts, fills them from GIS and issues them."""

    def __init__(
        self,
        store: CertificateStore | None = None,
        config: UrbanismConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store or CertificateStore()
        self._config = config or UrbanismConfig()
        self._rng = rng or random.Random()

    @property
    def store(self) -> CertificateStore:
        return self._store

    def new_draft(self, uat_name: str = "", initial_cf: str = "") -> UrbanismCertificate:
        today = date.today()
        taken = self._store.numbers()
        number = generate_certificate_number(today, self._rng)
        for _ in range(_NUMBER_ATTEMPTS):
            if number not in taken:
                break
            number = generate_certificate_number(today, self._rng)
        draft = UrbanismCertificate(
            number=number,
            issue_date=today,
            technical_regime=self._config.technical_regime,
            restrictions=self._config.restrictions,
        )
        draft.property.uat = uat_name
        draft.property.cadastral_number = initial_cf.strip()
        return draft

    def prefill(self, draft: UrbanismCertificate, lookup: LookupResult) -> UrbanismCertificate:
        """Return a copy of ``draft`` completed with the GIS lookup result.

        Only fields the lookup resolved are written; everything else keeps
        what the draft already holds.
        """
        updated = draft.model_copy(deep=True)
        if lookup.fields is None:
            return updated

        resolved = lookup.fields.merge_into({})
        property_update = {k: v for k, v in resolved.items() if k in _PROPERTY_FIELDS}
        legal_update = {k: v for k, v in resolved.items() if k in _LEGAL_FIELDS}

        updated.property = updated.property.model_copy(update=property_update)
        updated.legal_regime = updated.legal_regime.model_copy(update=legal_update)
        updated.gis_fields = lookup.fields.found()
        return updated

    def issue(self, draft: UrbanismCertificate, uat_id: str) -> UrbanismCertificate:
        """Validate and store a certificate, marking it issued.

        Raises:
            ValueError: A mandatory field is empty, the draft was already
                issued or its number is taken by another certificate.
        """
        if draft.status == CertificateStatus.ISSUED:
            raise ValueError(f"Certificate {draft.number} is already issued")

        missing = [
            label
            for label, value in (
                ("applicant.name", draft.applicant.name),
                ("property.cadastral_number", draft.property.cadastral_number),
                ("purpose", draft.purpose),
            )
            if not value.strip()
        ]
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")
        if draft.number in self._store.numbers():
            raise ValueError(f"Certificate number {draft.number} is already in use")

        certificate = draft.model_copy(
            update={
                "status": CertificateStatus.ISSUED,
                "uat_id": uat_id,
                "created_at": datetime.now(timezone.utc),
            }
        )
        self._store.save(certificate)
        logger.info(
            "Issued urbanism certificate %s for CF %s in UAT %s",
            certificate.number,
            certificate.property.cadastral_number,
            uat_id,
        )
        return certificate

    def list_for_uat(self, uat_id: str) -> list[UrbanismCertificate]:
        return self._store.list_for_uat(uat_id)
