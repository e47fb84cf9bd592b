"""Urbanism certificate API router."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from cadastru.urbanism.models import UrbanismCertificate

router = APIRouter()


class DraftRequest(BaseModel):
    cf: str = ""
    uat_name: str = ""


def _get_urbanism_service(request: Request):
    service = getattr(request.app.state, "urbanism_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Urbanism service not available")
    return service


@router.post("/api/uats/{uat_id}/certificates/draft")
async def api_new_draft(uat_id: str, body: DraftRequest, request: Request) -> dict[str, Any]:
    """Start a certificate; when a CF is given, prefill it from the UAT map."""
    service = _get_urbanism_service(request)
    draft = service.new_draft(uat_name=body.uat_name, initial_cf=body.cf)

    lookup = None
    gis = getattr(request.app.state, "gis_service", None)
    if body.cf.strip() and gis is not None and gis.get_layers(uat_id):
        lookup = gis.lookup(uat_id, body.cf)
        draft = service.prefill(draft, lookup)

    return {
        "certificate": draft.model_dump(mode="json"),
        "lookup": lookup.model_dump(mode="json") if lookup else None,
    }


@router.post("/api/uats/{uat_id}/certificates")
async def api_issue_certificate(
    uat_id: str, body: UrbanismCertificate, request: Request
) -> dict[str, Any]:
    service = _get_urbanism_service(request)
    try:
        certificate = service.issue(body, uat_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return certificate.model_dump(mode="json")


@router.get("/api/uats/{uat_id}/certificates")
async def api_list_certificates(uat_id: str, request: Request) -> list[dict[str, Any]]:
    service = _get_urbanism_service(request)
    return [c.model_dump(mode="json") for c in service.list_for_uat(uat_id)]
