"""GIS API router: map layers, map search and CF lookup."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from cadastru.gis.layers import cf_number, feature_bounds, feature_summary, layer_from_geojson

router = APIRouter()


# --- Request models ---


class LayerPayload(BaseModel):
    """One parsed shapefile layer, as GeoJSON."""

    name: str
    geojson: dict[str, Any]
    color: str | None = None


class LayersUploadRequest(BaseModel):
    layers: list[LayerPayload] = Field(default_factory=list)


# --- Helpers ---


def _get_gis_service(request: Request):
    service = getattr(request.app.state, "gis_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="GIS service not available")
    return service


def _require_cf(cf: str) -> str:
    if not cf.strip():
        raise HTTPException(status_code=400, detail="cf query parameter is required")
    return cf


# --- Layers ---


@router.put("/api/uats/{uat_id}/layers")
async def api_load_layers(
    uat_id: str, body: LayersUploadRequest, request: Request
) -> dict[str, Any]:
    """Replace the map layers assigned to a UAT."""
    gis = _get_gis_service(request)
    default_color = request.app.state.settings.gis.default_layer_color
    try:
        layers = [
            layer_from_geojson(p.name, p.geojson, p.color or default_color)
            for p in body.layers
        ]
        gis.load_layers(uat_id, layers)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    bounds = gis.bounds(uat_id)
    return {
        "uat_id": uat_id,
        "layers": [
            {"name": layer.name, "color": layer.color, "features": len(layer.features)}
            for layer in layers
        ],
        "bounds": bounds.model_dump() if bounds else None,
    }


@router.delete("/api/uats/{uat_id}/layers")
async def api_clear_layers(uat_id: str, request: Request) -> dict[str, Any]:
    gis = _get_gis_service(request)
    if not gis.clear_layers(uat_id):
        raise HTTPException(status_code=404, detail=f"No map loaded for UAT {uat_id!r}")
    return {"uat_id": uat_id, "removed": True}


@router.get("/api/uats/{uat_id}/layers")
async def api_list_layers(uat_id: str, request: Request) -> list[dict[str, Any]]:
    gis = _get_gis_service(request)
    return [
        {"name": layer.name, "color": layer.color, "features": len(layer.features)}
        for layer in gis.get_layers(uat_id)
    ]


@router.get("/api/uats/{uat_id}/layers/groups")
async def api_layer_groups(uat_id: str, request: Request) -> list[dict[str, Any]]:
    """Layers grouped by name prefix for the layer panel."""
    gis = _get_gis_service(request)
    return [
        {"name": group.name, "layers": [layer.name for layer in group.layers]}
        for group in gis.list_groups(uat_id)
    ]


@router.get("/api/uats/{uat_id}/layers/keys")
async def api_layer_keys(uat_id: str, request: Request) -> dict[str, Any]:
    gis = _get_gis_service(request)
    return {"keys": gis.available_keys(uat_id)}


@router.get("/api/uats/{uat_id}/layers/bounds")
async def api_layer_bounds(uat_id: str, request: Request) -> dict[str, Any]:
    gis = _get_gis_service(request)
    bounds = gis.bounds(uat_id)
    if bounds is None:
        raise HTTPException(status_code=404, detail=f"No map loaded for UAT {uat_id!r}")
    return bounds.model_dump()


# --- Search ---


@router.get("/api/uats/{uat_id}/gis/search")
async def api_search_map(uat_id: str, request: Request, cf: str = "") -> dict[str, Any]:
    """Map search box: locate a parcel by its CF number."""
    gis = _get_gis_service(request)
    match = gis.search_map(uat_id, _require_cf(cf))
    if match is None:
        raise HTTPException(
            status_code=404, detail="Nu s-a găsit niciun imobil cu acest Nr. CF."
        )

    contracts = getattr(request.app.state, "contract_service", None)
    found_cf = cf_number(match.feature)
    bounds = feature_bounds(match.feature)
    limit = request.app.state.settings.gis.summary_property_limit
    return {
        "layer_name": match.layer_name,
        "cf": found_cf,
        "properties": match.feature.properties,
        "summary": feature_summary(match.feature, limit),
        "bounds": bounds.model_dump() if bounds else None,
        "contract_exists": bool(
            contracts and found_cf and contracts.check_exists(uat_id, found_cf)
        ),
    }


@router.get("/api/uats/{uat_id}/gis/lookup")
async def api_lookup(uat_id: str, request: Request, cf: str = "") -> dict[str, Any]:
    """Resolve a CF to a feature and the fields used to prefill forms."""
    gis = _get_gis_service(request)
    result = gis.lookup(uat_id, _require_cf(cf))
    return result.model_dump(mode="json")
