"""In-memory store for registered contracts."""

from __future__ import annotations

from cadastru.registry.models import Contract


def _fold(value: str) -> str:
    return value.strip().casefold()


class ContractStore:
    """In-memory dict store for contracts, scoped by UAT."""

    def __init__(self) -> None:
        self._contracts: dict[str, Contract] = {}

    def save(self, contract: Contract) -> Contract:
        self._contracts[contract.id] = contract
        return contract

    def get(self, contract_id: str) -> Contract | None:
        return self._contracts.get(contract_id)

    def list_for_uat(self, uat_id: str) -> list[Contract]:
        return [c for c in self._contracts.values() if c.uat_id == uat_id]

    def find_by_cf(self, uat_id: str, cf: str) -> list[Contract]:
        cf = _fold(cf)
        return [
            c for c in self.list_for_uat(uat_id)
            if _fold(c.parcel.cf_number) == cf
        ]

    def exists_for_cf(self, uat_id: str, cf: str) -> bool:
        if not cf.strip():
            return False
        return bool(self.find_by_cf(uat_id, cf))

    def search(self, uat_id: str, term: str) -> list[Contract]:
        """Contracts whose CF, cadastral number, holder or number contains ``term``."""
        term = _fold(term)
        contracts = self.list_for_uat(uat_id)
        if not term:
            return contracts
        return [
            c for c in contracts
            if any(
                term in _fold(value)
                for value in (
                    c.parcel.cf_number,
                    c.parcel.cadastral_number,
                    c.holder.name,
                    c.terms.number,
                )
            )
        ]

    @property
    def count(self) -> int:
        return len(self._contracts)
