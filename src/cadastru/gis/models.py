"""GIS data models."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from cadastru.core.types import LookupState, Scalar


class Feature(BaseModel):
    """A single geometry + attributes record from a loaded layer."""

    model_config = ConfigDict(frozen=True)

    properties: dict[str, Scalar] = Field(default_factory=dict)
    geometry: dict[str, Any] | None = None


class Layer(BaseModel):
    """A named group of features coming from one source dataset."""

    model_config = ConfigDict(frozen=True)

    name: str
    features: tuple[Feature, ...] = ()
    color: str = "#3388ff"


class LayerGroup(BaseModel):
    """Layers sharing a name prefix, as shown in the map layer panel."""

    name: str
    layers: list[Layer] = Field(default_factory=list)


class Bounds(BaseModel):
    """Bounding box in GeoJSON axis order (lng, lat)."""

    min_lng: float
    min_lat: float
    max_lng: float
    max_lat: float


class FeatureMatch(BaseModel):
    """A feature located by a CF lookup, with the name of its layer."""

    feature: Feature
    layer_name: str
    matched_by: Literal["key", "value"] = "key"


class ResolvedFields(BaseModel):
    """Semantic fields extracted from a matched feature.

    Every field is independently optional; ``None`` means no source
    property supplied a usable value.
    """

    area: float | None = None
    owner: str | None = None
    address: str | None = None
    usage_category: str | None = None
    property_regime: str | None = None

    def found(self) -> list[str]:
        """Names of the fields that were resolved."""
        return [name for name, value in self if value is not None]

    def merge_into(self, target: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``target`` with resolved fields layered on top.

        Unresolved fields never overwrite what is already in ``target``.
        """
        merged = dict(target)
        for name, value in self:
            if value is not None:
                merged[name] = value
        return merged


class LookupResult(BaseModel):
    """Outcome of a CF lookup against a set of layers."""

    query: str
    state: LookupState = LookupState.UNRESOLVED
    match: FeatureMatch | None = None
    fields: ResolvedFields | None = None
    available_keys: list[str] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.state == LookupState.FOUND
