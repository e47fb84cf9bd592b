"""Agricultural land-contract registry.

Stores lease, concession and rental contracts for UAT-owned parcels,
together with their scanned documents.
"""

from cadastru.registry.documents import DocumentStorage
from cadastru.registry.models import Contract, ContractDraft, ContractType
from cadastru.registry.service import ContractService
from cadastru.registry.store import ContractStore
from cadastru.registry.validation import ContractValidationError

__all__ = [
    "Contract",
    "ContractDraft",
    "ContractService",
    "ContractStore",
    "ContractType",
    "ContractValidationError",
    "DocumentStorage",
]
