"""Contract registration workflow."""

from __future__ import annotations

import logging
import uuid

from cadastru.registry.documents import DocumentStorage
from cadastru.registry.models import Contract, ContractDraft
from cadastru.registry.store import ContractStore
from cadastru.registry.validation import ContractValidationError, validate_contract

logger = logging.getLogger(__name__)


class ContractService:
    """Validates contract submissions, stores the scan and registers them."""

    def __init__(
        self,
        store: ContractStore | None = None,
        documents: DocumentStorage | None = None,
    ) -> None:
        self._store = store or ContractStore()
        self._documents = documents or DocumentStorage()

    @property
    def store(self) -> ContractStore:
        return self._store

    def create(self, uat_id: str, draft: ContractDraft, document: bytes) -> Contract:
        """Register a contract together with its scanned PDF.

        Raises:
            ContractValidationError: The submitted data is invalid.
            ValueError: The document is missing or not an acceptable PDF, or
                ``uat_id`` cannot name a document directory.
        """
        errors = validate_contract(draft)
        if errors:
            raise ContractValidationError(errors)
        self._documents.check(document)
        self._documents.directory_for(uat_id)

        contract_id = str(uuid.uuid4())
        path = self._documents.save(uat_id, contract_id, document)
        contract = Contract(
            **draft.model_dump(),
            id=contract_id,
            uat_id=uat_id,
            document_path=str(path),
        )
        self._store.save(contract)
        logger.info(
            "Registered contract %s (%s) for CF %s in UAT %s",
            contract.terms.number,
            contract.contract_type.value,
            contract.parcel.cf_number,
            uat_id,
        )
        return contract

    def get(self, uat_id: str, contract_id: str) -> Contract:
        contract = self._store.get(contract_id)
        if contract is None or contract.uat_id != uat_id:
            raise KeyError(contract_id)
        return contract

    def check_exists(self, uat_id: str, cf: str) -> bool:
        return self._store.exists_for_cf(uat_id, cf)

    def search(self, uat_id: str, term: str = "") -> list[Contract]:
        return self._store.search(uat_id, term)
