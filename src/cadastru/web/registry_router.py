"""Agricultural registry API router."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from fastapi import APIRouter, HTTPException, Request

from cadastru.registry.models import Contract, ContractDraft
from cadastru.registry.validation import ContractValidationError

router = APIRouter()


class ContractCreateRequest(ContractDraft):
    """Contract data plus the scanned PDF, base64 encoded."""

    document_base64: str = ""


def _get_contract_service(request: Request):
    service = getattr(request.app.state, "contract_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Contract registry not available")
    return service


def _contract_response(contract: Contract) -> dict[str, Any]:
    data = contract.model_dump(mode="json", exclude={"document_path"})
    data["active"] = contract.is_active()
    return data


@router.post("/api/uats/{uat_id}/contracts")
async def api_create_contract(
    uat_id: str, body: ContractCreateRequest, request: Request
) -> dict[str, Any]:
    service = _get_contract_service(request)
    try:
        document = base64.b64decode(body.document_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="document_base64 is not valid base64")

    draft = ContractDraft.model_validate(body.model_dump(exclude={"document_base64"}))
    try:
        contract = service.create(uat_id, draft, document)
    except ContractValidationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "errors": e.errors})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _contract_response(contract)


@router.get("/api/uats/{uat_id}/contracts")
async def api_list_contracts(
    uat_id: str, request: Request, q: str = ""
) -> list[dict[str, Any]]:
    """List contracts of a UAT, optionally filtered by a search term."""
    service = _get_contract_service(request)
    return [_contract_response(c) for c in service.search(uat_id, q)]


@router.get("/api/uats/{uat_id}/contracts/exists")
async def api_contract_exists(uat_id: str, request: Request, cf: str = "") -> dict[str, Any]:
    service = _get_contract_service(request)
    return {"cf": cf, "exists": service.check_exists(uat_id, cf)}


@router.get("/api/uats/{uat_id}/contracts/{contract_id}")
async def api_get_contract(uat_id: str, contract_id: str, request: Request) -> dict[str, Any]:
    service = _get_contract_service(request)
    try:
        contract = service.get(uat_id, contract_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Contract {contract_id!r} not found")
    return _contract_response(contract)
