"""Shared test fixtures and helpers."""

from __future__ import annotations

import base64
from typing import Any

import pytest

from cadastru.gis.models import Feature, Layer


PDF_BYTES = b"%PDF-1.4\n% scanned contract\n%%EOF\n"


def make_layer(name: str, *properties: dict[str, Any]) -> Layer:
    """Build a layer whose features carry the given property mappings."""
    return Layer(name=name, features=tuple(Feature(properties=p) for p in properties))


def square(lng: float, lat: float, size: float = 0.001) -> dict[str, Any]:
    return {
        "type": "Polygon",
        "coordinates": [[
            [lng, lat],
            [lng + size, lat],
            [lng + size, lat + size],
            [lng, lat + size],
            [lng, lat],
        ]],
    }


def feature_collection(*features: tuple[dict[str, Any], dict[str, Any] | None]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "properties": props, "geometry": geometry}
            for props, geometry in features
        ],
    }


def contract_payload(**overrides: Any) -> dict[str, Any]:
    """A valid contract submission; top-level sections may be overridden."""
    payload: dict[str, Any] = {
        "parcel": {
            "cf_number": "50123",
            "cadastral_number": "50123-C1",
            "area": 10000,
            "land_use": "Pasune",
            "location": "Tarla 12",
        },
        "contract_type": "Arendă",
        "holder": {
            "holder_type": "PF",
            "name": "Ion Popescu",
            "cnp_cui": "1800101123456",
            "address": "Str. Principală 10",
            "phone": "0722 123 456",
            "email": "ion.popescu@example.ro",
        },
        "terms": {
            "number": "12/2024",
            "signed_on": "2024-01-15",
            "expires_on": "2029-01-15",
            "contracted_area": 5000,
            "price": 1200,
            "payment_period": "anual",
            "assignment_mode": "Licitatie",
            "hcl_number": "34",
            "hcl_date": "2023-12-20",
        },
    }
    payload.update(overrides)
    return payload


def pdf_base64() -> str:
    return base64.b64encode(PDF_BYTES).decode()


@pytest.fixture
def parcel_layers() -> list[Layer]:
    return [
        make_layer(
            "Parcele_intravilan",
            {"Nr_CF": "50123", "Suprafata": "1250", "Proprietar": "Ion Popescu",
             "Adresa": "Str. Principală 10", "Categoria": "Curți construcții",
             "Intravilan": "Intravilan"},
            {"Nr_CF": "50124", "Suprafata": 800, "Proprietar": None},
        ),
        make_layer(
            "Parcele_extravilan",
            {"NR_CF": "60001", "S_teren": 25000.0, "cat_fol": "Arabil", "regim": "Extravilan"},
        ),
        make_layer(
            "Drumuri",
            {"Denumire": "DC 12", "Cod_drum": "60001"},
        ),
    ]
