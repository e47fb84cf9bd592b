#!/usr/bin/env python3
"""Load GeoJSON layers into a running cadastru backend.

Usage:
    # Start the backend first:
    uvicorn cadastru.web.app:create_app --factory --port 8080

    # Assign the map of UAT "uat-001" from exported shapefile layers:
    python3 scripts/load_layers.py uat-001 parcele.geojson drumuri.geojson

    # Look up a CF once the map is loaded:
    python3 scripts/load_layers.py uat-001 parcele.geojson --lookup 12345

Each file becomes one layer, named after the file stem. Loading replaces
whatever map the UAT had before (stores are in-memory; restarting the
server clears them).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"


def api(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json: dict | None = None,
    params: dict | None = None,
) -> dict | list | None:
    """Make an API call and return parsed JSON, or None on failure."""
    resp = client.request(method, path, json=json, params=params)
    if resp.status_code >= 400:
        print(f"  FAILED {method} {path} -> {resp.status_code}: {resp.text[:200]}")
        return None
    if resp.headers.get("content-type", "").startswith("application/json"):
        return resp.json()
    return None


def read_layers(paths: list[Path]) -> list[dict]:
    layers = []
    for path in paths:
        with open(path, encoding="utf-8") as fh:
            layers.append({"name": path.stem, "geojson": json.load(fh)})
    return layers


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("uat_id")
    parser.add_argument("files", nargs="+", type=Path)
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    parser.add_argument("--lookup", metavar="CF", help="resolve a CF after loading")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=60.0) as client:
        try:
            health = api(client, "GET", "/api/health")
        except httpx.ConnectError:
            print(f"ERROR: Cannot connect to {args.base_url}")
            print("  uvicorn cadastru.web.app:create_app --factory --port 8080")
            sys.exit(1)
        if not health:
            sys.exit(1)

        result = api(
            client,
            "PUT",
            f"/api/uats/{args.uat_id}/layers",
            json={"layers": read_layers(args.files)},
        )
        if result is None:
            sys.exit(1)
        for layer in result["layers"]:
            print(f"  {layer['name']}: {layer['features']} features")

        if args.lookup:
            lookup = api(
                client, "GET", f"/api/uats/{args.uat_id}/gis/lookup",
                params={"cf": args.lookup},
            )
            if lookup is None:
                sys.exit(1)
            if lookup["state"] == "found":
                print(f"  CF {args.lookup} found in {lookup['match']['layer_name']}")
                for name, value in lookup["fields"].items():
                    if value is not None:
                        print(f"    {name}: {value}")
            else:
                print(f"  CF {args.lookup} not found")
                print(f"  Available keys: {', '.join(lookup['available_keys'])}")


if __name__ == "__main__":
    main()
