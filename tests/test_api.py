"""Tests for the HTTP API."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cadastru.core.config import RegistryConfig, Settings
from cadastru.web.app import create_app
from tests.conftest import contract_payload, feature_collection, pdf_base64, square


@pytest.fixture
def app(tmp_path):
    settings = Settings(registry=RegistryConfig(documents_dir=str(tmp_path / "docs")))
    return create_app(settings=settings)


@pytest.fixture
def client(app):
    return TestClient(app)


LAYERS = {
    "layers": [
        {
            "name": "Parcele_intravilan",
            "color": "#e11d48",
            "geojson": feature_collection(
                ({"Nr_CF": "50123", "Suprafata": "1250", "Proprietar": "Ion Popescu",
                  "Adresa": "Str. Principală 10"}, square(23.60, 46.77)),
                ({"Nr_CF": "50124", "Suprafata": "800"}, square(23.61, 46.78)),
            ),
        },
        {
            "name": "Parcele_extravilan",
            "geojson": feature_collection(
                ({"nr_cad": "60001", "S_teren": 25000, "cat_fol": "Arabil"}, square(23.70, 46.80)),
            ),
        },
        {
            "name": "Drumuri",
            "geojson": feature_collection(({"Denumire": "DC 12"}, None)),
        },
    ]
}


@pytest.fixture
def loaded(client):
    resp = client.put("/api/uats/uat-1/layers", json=LAYERS)
    assert resp.status_code == 200
    return client


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["healthy"] is True
        assert data["details"]["contracts"] == 0


class TestLayersAPI:
    def test_load_layers(self, client):
        resp = client.put("/api/uats/uat-1/layers", json=LAYERS)
        data = resp.json()
        assert [layer["features"] for layer in data["layers"]] == [2, 1, 1]
        assert data["layers"][0]["color"] == "#e11d48"
        assert data["layers"][1]["color"] == "#3388ff"
        assert data["bounds"]["min_lng"] == 23.60

    def test_load_invalid_geojson(self, client):
        resp = client.put(
            "/api/uats/uat-1/layers",
            json={"layers": [{"name": "X", "geojson": {"type": "Feature"}}]},
        )
        assert resp.status_code == 400

    def test_load_feature_with_list_properties(self, client):
        geojson = {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "properties": [1, 2], "geometry": None}],
        }
        resp = client.put(
            "/api/uats/uat-1/layers",
            json={"layers": [{"name": "X", "geojson": geojson}]},
        )
        assert resp.status_code == 400
        assert "malformed feature" in resp.json()["detail"]

    def test_list_and_groups(self, loaded):
        names = [layer["name"] for layer in loaded.get("/api/uats/uat-1/layers").json()]
        assert names == ["Parcele_intravilan", "Parcele_extravilan", "Drumuri"]
        groups = loaded.get("/api/uats/uat-1/layers/groups").json()
        assert groups == [
            {"name": "Parcele", "layers": ["Parcele_extravilan", "Parcele_intravilan"]},
            {"name": "Altele", "layers": ["Drumuri"]},
        ]

    def test_keys(self, loaded):
        keys = loaded.get("/api/uats/uat-1/layers/keys").json()["keys"]
        assert keys[:2] == ["Nr_CF", "Suprafata"]
        assert "nr_cad" in keys

    def test_bounds(self, loaded, client):
        assert loaded.get("/api/uats/uat-1/layers/bounds").status_code == 200
        assert client.get("/api/uats/uat-9/layers/bounds").status_code == 404

    def test_clear(self, loaded):
        assert loaded.delete("/api/uats/uat-1/layers").status_code == 200
        assert loaded.get("/api/uats/uat-1/layers").json() == []
        assert loaded.delete("/api/uats/uat-1/layers").status_code == 404


class TestSearchAPI:
    def test_search_found(self, loaded):
        resp = loaded.get("/api/uats/uat-1/gis/search", params={"cf": "50124"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["layer_name"] == "Parcele_intravilan"
        assert data["cf"] == "50124"
        assert data["contract_exists"] is False
        assert data["bounds"]["min_lat"] == 46.78

    def test_search_only_reads_cf_columns(self, loaded):
        resp = loaded.get("/api/uats/uat-1/gis/search", params={"cf": "60001"})
        assert resp.status_code == 404

    def test_search_blank(self, loaded):
        assert loaded.get("/api/uats/uat-1/gis/search", params={"cf": " "}).status_code == 400

    def test_search_reports_contract(self, loaded):
        body = contract_payload(document_base64=pdf_base64())
        assert loaded.post("/api/uats/uat-1/contracts", json=body).status_code == 200
        data = loaded.get("/api/uats/uat-1/gis/search", params={"cf": "50123"}).json()
        assert data["contract_exists"] is True


class TestLookupAPI:
    def test_lookup_found(self, loaded):
        data = loaded.get("/api/uats/uat-1/gis/lookup", params={"cf": "60001"}).json()
        assert data["state"] == "found"
        assert data["match"]["layer_name"] == "Parcele_extravilan"
        assert data["fields"]["area"] == 25000.0
        assert data["fields"]["usage_category"] == "Arabil"

    def test_lookup_not_found(self, loaded):
        data = loaded.get("/api/uats/uat-1/gis/lookup", params={"cf": "999"}).json()
        assert data["state"] == "not_found"
        assert data["fields"] is None
        assert "Denumire" in data["available_keys"]

    def test_lookup_blank(self, loaded):
        assert loaded.get("/api/uats/uat-1/gis/lookup").status_code == 400


class TestContractsAPI:
    def test_create_and_get(self, client):
        resp = client.post(
            "/api/uats/uat-1/contracts",
            json=contract_payload(document_base64=pdf_base64()),
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["parcel"]["cf_number"] == "50123"
        assert "document_path" not in data
        assert "active" in data

        resp = client.get(f"/api/uats/uat-1/contracts/{data['id']}")
        assert resp.status_code == 200
        assert client.get(f"/api/uats/uat-2/contracts/{data['id']}").status_code == 404

    def test_create_without_document(self, client):
        resp = client.post("/api/uats/uat-1/contracts", json=contract_payload())
        assert resp.status_code == 400

    def test_create_bad_base64(self, client):
        resp = client.post(
            "/api/uats/uat-1/contracts",
            json=contract_payload(document_base64="not base64!"),
        )
        assert resp.status_code == 400

    def test_create_invalid(self, client):
        terms = dict(contract_payload()["terms"], expires_on="2020-01-01")
        resp = client.post(
            "/api/uats/uat-1/contracts",
            json=contract_payload(terms=terms, document_base64=pdf_base64()),
        )
        assert resp.status_code == 400
        assert "terms.expires_on" in resp.json()["detail"]["errors"]

    def test_create_with_parent_dir_uat(self, client, tmp_path):
        resp = client.post(
            "/api/uats/%2E%2E/contracts",
            json=contract_payload(document_base64=pdf_base64()),
        )
        assert resp.status_code == 400
        assert not any(tmp_path.glob("*.pdf"))

    def test_unknown_contract_type(self, client):
        resp = client.post(
            "/api/uats/uat-1/contracts",
            json=contract_payload(contract_type="Vânzare", document_base64=pdf_base64()),
        )
        assert resp.status_code == 422

    def test_list_search_and_exists(self, client):
        client.post(
            "/api/uats/uat-1/contracts",
            json=contract_payload(document_base64=pdf_base64()),
        )
        assert len(client.get("/api/uats/uat-1/contracts").json()) == 1
        assert client.get("/api/uats/uat-1/contracts", params={"q": "popescu"}).json()
        assert client.get("/api/uats/uat-1/contracts", params={"q": "zzz"}).json() == []

        resp = client.get("/api/uats/uat-1/contracts/exists", params={"cf": "50123"})
        assert resp.json() == {"cf": "50123", "exists": True}


class TestCertificatesAPI:
    def test_draft_prefilled_from_map(self, loaded):
        resp = loaded.post(
            "/api/uats/uat-1/certificates/draft",
            json={"cf": "50123", "uat_name": "Comuna Florești"},
        )
        assert resp.status_code == 200
        data = resp.json()
        cert = data["certificate"]
        assert data["lookup"]["state"] == "found"
        assert cert["property"]["area"] == 1250.0
        assert cert["property"]["address"] == "Str. Principală 10"
        assert cert["legal_regime"]["owner"] == "Ion Popescu"
        assert cert["legal_regime"]["property_regime"] == "Intravilan"
        assert cert["property"]["uat"] == "Comuna Florești"

    def test_draft_without_map(self, client):
        data = client.post("/api/uats/uat-1/certificates/draft", json={"cf": "1"}).json()
        assert data["lookup"] is None
        assert data["certificate"]["property"]["cadastral_number"] == "1"

    def test_draft_not_found(self, loaded):
        data = loaded.post("/api/uats/uat-1/certificates/draft", json={"cf": "999"}).json()
        assert data["lookup"]["state"] == "not_found"
        assert data["certificate"]["property"]["area"] == 0.0

    def test_issue_and_list(self, loaded):
        cert = loaded.post(
            "/api/uats/uat-1/certificates/draft", json={"cf": "50123"}
        ).json()["certificate"]
        cert["applicant"]["name"] = "Maria Ionescu"
        cert["purpose"] = "Construire anexă gospodărească"

        resp = loaded.post("/api/uats/uat-1/certificates", json=cert)
        assert resp.status_code == 200
        assert resp.json()["status"] == "issued"

        listed = loaded.get("/api/uats/uat-1/certificates").json()
        assert [c["number"] for c in listed] == [cert["number"]]

    def test_issue_same_number_twice(self, client):
        drafts = [
            client.post("/api/uats/uat-1/certificates/draft", json={"cf": cf}).json()["certificate"]
            for cf in ("50123", "50124")
        ]
        for cert in drafts:
            cert["applicant"]["name"] = "Maria Ionescu"
            cert["purpose"] = "Construire"
        drafts[1]["number"] = drafts[0]["number"]

        assert client.post("/api/uats/uat-1/certificates", json=drafts[0]).status_code == 200
        resp = client.post("/api/uats/uat-1/certificates", json=drafts[1])
        assert resp.status_code == 400
        assert len(client.get("/api/uats/uat-1/certificates").json()) == 1

    def test_issue_incomplete(self, client):
        cert = client.post("/api/uats/uat-1/certificates/draft", json={}).json()["certificate"]
        resp = client.post("/api/uats/uat-1/certificates", json=cert)
        assert resp.status_code == 400
