"""Building, grouping and inspecting map layers."""

from __future__ import annotations

import json
import re
from collections.abc import Iterator, Sequence
from typing import Any

from cadastru.core.types import Scalar
from cadastru.gis.models import Bounds, Feature, Layer, LayerGroup
from cadastru.gis.resolver import as_text

OTHER_GROUP = "Altele"

# Keys the map search reads the CF number from.
MAP_CF_KEYS: tuple[str, ...] = ("Nr_CF", "nr_cf", "NR_CF")

_GROUP_SPLIT = re.compile(r"[_.\s]")


def _scalar(value: Any) -> Scalar:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return json.dumps(value, ensure_ascii=False)


def layer_from_geojson(
    name: str,
    data: dict[str, Any],
    color: str | None = None,
) -> Layer:
    """Build a Layer from a GeoJSON FeatureCollection.

    Nested property values (lists, objects) are kept as their JSON text so
    every property stays a flat scalar.
    """
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise ValueError(f"Layer {name!r} is not a GeoJSON FeatureCollection")

    features = []
    for raw in data.get("features") or []:
        if not isinstance(raw, dict):
            raise ValueError(f"Layer {name!r} contains a malformed feature")
        properties = raw.get("properties") or {}
        if not isinstance(properties, dict):
            raise ValueError(f"Layer {name!r} contains a malformed feature")
        features.append(
            Feature(
                properties={str(k): _scalar(v) for k, v in properties.items()},
                geometry=raw.get("geometry"),
            )
        )

    kwargs: dict[str, Any] = {"name": name, "features": tuple(features)}
    if color:
        kwargs["color"] = color
    return Layer(**kwargs)


def _name_key(item: Layer | LayerGroup) -> tuple[str, str]:
    return item.name.casefold(), item.name


def group_layers(layers: Sequence[Layer]) -> list[LayerGroup]:
    """Group layers by the first token of their name.

    A prefix shared by at least two layers forms its own group; layers
    with a unique prefix end up together in a trailing "Altele" group.
    """
    by_prefix: dict[str, list[Layer]] = {}
    for layer in layers:
        prefix = _GROUP_SPLIT.split(layer.name)[0]
        by_prefix.setdefault(prefix, []).append(layer)

    groups: list[LayerGroup] = []
    others: list[Layer] = []
    for prefix, members in by_prefix.items():
        if len(members) > 1:
            groups.append(LayerGroup(name=prefix, layers=sorted(members, key=_name_key)))
        else:
            others.extend(members)

    groups.sort(key=_name_key)
    if others:
        groups.append(LayerGroup(name=OTHER_GROUP, layers=sorted(others, key=_name_key)))
    return groups


def _positions(coordinates: Any) -> Iterator[tuple[float, float]]:
    if (
        isinstance(coordinates, (list, tuple))
        and len(coordinates) >= 2
        and all(isinstance(c, (int, float)) for c in coordinates[:2])
    ):
        yield float(coordinates[0]), float(coordinates[1])
        return
    if isinstance(coordinates, (list, tuple)):
        for item in coordinates:
            yield from _positions(item)


def _geometry_positions(geometry: dict[str, Any] | None) -> Iterator[tuple[float, float]]:
    if not geometry:
        return
    if geometry.get("type") == "GeometryCollection":
        for part in geometry.get("geometries") or []:
            yield from _geometry_positions(part)
        return
    yield from _positions(geometry.get("coordinates"))


def feature_bounds(feature: Feature) -> Bounds | None:
    """Bounding box of a single feature, used to zoom on a search result."""
    return _bounds(_geometry_positions(feature.geometry))


def compute_bounds(layers: Sequence[Layer]) -> Bounds | None:
    """Bounding box of every geometry in ``layers``, or None if there is none."""
    return _bounds(
        pos
        for layer in layers
        for feature in layer.features
        for pos in _geometry_positions(feature.geometry)
    )


def _bounds(positions: Iterator[tuple[float, float]]) -> Bounds | None:
    box: list[float] | None = None
    for lng, lat in positions:
        if box is None:
            box = [lng, lat, lng, lat]
            continue
        box[0] = min(box[0], lng)
        box[1] = min(box[1], lat)
        box[2] = max(box[2], lng)
        box[3] = max(box[3], lat)
    if box is None:
        return None
    return Bounds(min_lng=box[0], min_lat=box[1], max_lng=box[2], max_lat=box[3])


def feature_summary(feature: Feature, limit: int = 5) -> dict[str, Scalar]:
    """The first ``limit`` properties of a feature, for map popups."""
    return dict(list(feature.properties.items())[:limit])


def cf_number(feature: Feature) -> str | None:
    """CF number read from the canonical ``Nr_CF`` columns only."""
    for key in MAP_CF_KEYS:
        value = feature.properties.get(key)
        if value not in (None, "", 0, False):
            return as_text(value)
    return None
