"""GIS layer store and lookup service for UAT maps."""

from __future__ import annotations

import logging

from cadastru.core.config import GISConfig
from cadastru.gis.layers import cf_number, compute_bounds, group_layers
from cadastru.gis.models import Bounds, FeatureMatch, Layer, LayerGroup, LookupResult
from cadastru.gis.resolver import DEFAULT_TABLES, KeyTables, available_keys, normalize, resolve

logger = logging.getLogger(__name__)


class LayerStore:
    """In-memory store of the layers assigned to each UAT.

    Suitable for single-instance deployment; loading a map replaces the
    previous one for that UAT.
    """

    def __init__(self) -> None:
        self._layers: dict[str, tuple[Layer, ...]] = {}

    def replace(self, uat_id: str, layers: list[Layer]) -> None:
        self._layers[uat_id] = tuple(layers)

    def get(self, uat_id: str) -> list[Layer]:
        return list(self._layers.get(uat_id, ()))

    def clear(self, uat_id: str) -> bool:
        return self._layers.pop(uat_id, None) is not None

    def list_uats(self) -> list[str]:
        return list(self._layers)


class GISService:
    """Map search and CF lookup over the layers loaded for a UAT."""

    def __init__(
        self,
        store: LayerStore | None = None,
        config: GISConfig | None = None,
    ) -> None:
        self._store = store or LayerStore()
        self._config = config or GISConfig()
        if self._config.keys_path:
            self._tables = KeyTables.from_yaml(self._config.keys_path)
            logger.info("Loaded GIS key tables from %s", self._config.keys_path)
        else:
            self._tables = DEFAULT_TABLES

    @property
    def store(self) -> LayerStore:
        return self._store

    @property
    def tables(self) -> KeyTables:
        return self._tables

    # -- Layers --

    def load_layers(self, uat_id: str, layers: list[Layer]) -> None:
        names = [layer.name for layer in layers]
        if len(set(names)) != len(names):
            raise ValueError("Layer names must be unique within a map")
        self._store.replace(uat_id, layers)
        logger.info(
            "Loaded %d layers (%d features) for UAT %s",
            len(layers),
            sum(len(layer.features) for layer in layers),
            uat_id,
        )

    def get_layers(self, uat_id: str) -> list[Layer]:
        return self._store.get(uat_id)

    def clear_layers(self, uat_id: str) -> bool:
        removed = self._store.clear(uat_id)
        if removed:
            logger.info("Removed map of UAT %s", uat_id)
        return removed

    def list_groups(self, uat_id: str) -> list[LayerGroup]:
        return group_layers(self._store.get(uat_id))

    def bounds(self, uat_id: str) -> Bounds | None:
        return compute_bounds(self._store.get(uat_id))

    def available_keys(self, uat_id: str) -> list[str]:
        return available_keys(self._store.get(uat_id))

    # -- Lookups --

    def search_map(self, uat_id: str, cf: str) -> FeatureMatch | None:
        """Map search box: exact CF match on the canonical CF columns."""
        query = normalize(cf)
        if not query:
            return None
        for layer in self._store.get(uat_id):
            for feature in layer.features:
                value = cf_number(feature)
                if value is not None and normalize(value) == query:
                    return FeatureMatch(feature=feature, layer_name=layer.name)
        logger.info("Map search for CF %r in UAT %s found nothing", cf, uat_id)
        return None

    def lookup(self, uat_id: str, cf: str) -> LookupResult:
        """Resolve a CF to a feature and its prefill fields."""
        logger.debug("Searching GIS of UAT %s for CF %r", uat_id, cf)
        result = resolve(self._store.get(uat_id), cf, self._tables)

        if result.match is not None and result.fields is not None:
            if result.match.matched_by == "value":
                logger.info(
                    "CF %r not in CF columns; matched by value in layer %s",
                    cf,
                    result.match.layer_name,
                )
            logger.info(
                "CF %r found in layer %s, resolved fields: %s",
                cf,
                result.match.layer_name,
                ", ".join(result.fields.found()) or "none",
            )
        else:
            logger.info(
                "CF %r not found in UAT %s; available keys: %s",
                cf,
                uat_id,
                ", ".join(result.available_keys) or "none",
            )
        return result
