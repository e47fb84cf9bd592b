"""CF lookup and form-prefill over heterogeneous GIS layers.

Shapefiles from different sources name the same attribute in different
ways (``Nr_CF``, ``NR_CF``, ``nr_cad``...). Lookups therefore go through
prioritized key tables: a case-insensitive exact key match is tried for
every candidate first, then a case-insensitive "key contains candidate"
match.

Everything here is pure: inputs are never mutated, nothing is cached and
nothing is logged. Callers own logging and UI state.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

import yaml

from cadastru.core.types import LookupState, Scalar
from cadastru.gis.models import Feature, FeatureMatch, Layer, LookupResult, ResolvedFields


CF_KEYS: tuple[str, ...] = (
    "Nr_CF", "nr_cf", "NR_CF", "cf", "CF", "nr_cad", "cadastral", "id", "nr_top",
)

FIELD_KEYS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "area": ("Suprafata", "suprafata", "Area", "area", "S_teren", "mp", "st"),
    "owner": ("Proprietar", "proprietar", "Nume", "nume", "owner", "deinator"),
    "address": ("Adresa", "adresa", "Locatie", "strada"),
    "usage_category": ("Categoria", "folosinta", "utilizare", "cat_fol"),
    "property_regime": ("Intravilan", "intravilan", "regim"),
})

_NUMERIC_FIELDS = frozenset({"area"})


def _key_list(section: str, keys: Any) -> tuple[str, ...]:
    """Validate one table of candidate key names.

    A bare string is rejected instead of being split into characters.
    """
    if isinstance(keys, str) or not isinstance(keys, Sequence):
        raise ValueError(f"{section} must be a list of key names, got {keys!r}")
    if not all(isinstance(key, str) and key.strip() for key in keys):
        raise ValueError(f"{section} must contain only non-empty key names")
    return tuple(keys)


class KeyTables:
    """The CF key list and per-field synonym lists used by a lookup."""

    def __init__(
        self,
        cf_keys: Sequence[str] = CF_KEYS,
        field_keys: Mapping[str, Sequence[str]] = FIELD_KEYS,
    ) -> None:
        unknown = set(field_keys) - set(ResolvedFields.model_fields)
        if unknown:
            raise ValueError(f"Unknown target fields: {sorted(unknown)}")
        self.cf_keys: tuple[str, ...] = _key_list("cf_keys", cf_keys)
        self.field_keys: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: _key_list(f"field_keys.{name}", keys) for name, keys in field_keys.items()}
        )

    @classmethod
    def from_yaml(cls, path: str) -> KeyTables:
        """Load tables from YAML; sections that are absent keep the defaults.

        Expected layout::

            cf_keys: [Nr_CF, nr_cad]
            field_keys:
              area: [Suprafata, S_teren]
        """
        with open(path) as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping with cf_keys and field_keys")
        overrides = data.get("field_keys") or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"{path}: field_keys must map field names to key lists")
        field_keys = dict(FIELD_KEYS)
        field_keys.update(overrides)
        return cls(
            cf_keys=data.get("cf_keys") or CF_KEYS,
            field_keys=field_keys,
        )


DEFAULT_TABLES = KeyTables()


def normalize(value: Scalar) -> str:
    """Trimmed, case-folded text form of a property value or query."""
    return as_text(value).strip().casefold()


def as_text(value: Scalar) -> str:
    """Textual representation of a property value.

    Integral floats render without a fractional part and booleans in lower
    case, so ``500.0`` reads as ``"500"`` the way users type it.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def find_key(properties: Mapping[str, Scalar], candidates: Iterable[str]) -> str | None:
    """Return the property name best matching one of ``candidates``.

    Exact case-insensitive matches win over "contains" matches; within a
    tier, candidate order decides, then property order.
    """
    candidates = [c.casefold() for c in candidates]
    folded = [(key, key.casefold()) for key in properties]

    for candidate in candidates:
        for key, lowered in folded:
            if lowered == candidate:
                return key

    for candidate in candidates:
        for key, lowered in folded:
            if candidate in lowered:
                return key

    return None


def find_property(properties: Mapping[str, Scalar], candidates: Iterable[str]) -> Scalar:
    """Value of the property located by :func:`find_key`, or ``None``."""
    key = find_key(properties, candidates)
    if key is None:
        return None
    return properties[key]


def _is_blank(value: Scalar) -> bool:
    return value is None or as_text(value).strip() == ""


def find_feature(
    layers: Sequence[Layer],
    identifier: str,
    tables: KeyTables = DEFAULT_TABLES,
) -> FeatureMatch | None:
    """Locate the feature whose CF equals ``identifier``.

    Pass 1 compares the query against the CF property of each feature,
    located through ``tables.cf_keys``. Only when that finds nothing,
    pass 2 compares it against every property value. Layers and features
    are visited in their given order and the first hit wins.
    """
    query = normalize(identifier)
    if not query:
        return None

    for layer in layers:
        for feature in layer.features:
            value = find_property(feature.properties, tables.cf_keys)
            if not _is_blank(value) and normalize(value) == query:
                return FeatureMatch(feature=feature, layer_name=layer.name, matched_by="key")

    for layer in layers:
        for feature in layer.features:
            for value in feature.properties.values():
                if value is not None and normalize(value) == query:
                    return FeatureMatch(feature=feature, layer_name=layer.name, matched_by="value")

    return None


def _to_number(value: Scalar) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(as_text(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def extract_fields(feature: Feature, tables: KeyTables = DEFAULT_TABLES) -> ResolvedFields:
    """Map a feature's properties onto the :class:`ResolvedFields` schema.

    Values that are missing, blank or (for numeric fields) unparseable are
    left unset; this never raises.
    """
    resolved: dict[str, Any] = {}
    for name, candidates in tables.field_keys.items():
        value = find_property(feature.properties, candidates)
        if _is_blank(value):
            continue
        if name in _NUMERIC_FIELDS:
            number = _to_number(value)
            if number is not None:
                resolved[name] = number
        else:
            resolved[name] = as_text(value)
    return ResolvedFields(**resolved)


def available_keys(layers: Sequence[Layer]) -> list[str]:
    """Property names of the first feature of each layer, first-seen order."""
    keys: dict[str, None] = {}
    for layer in layers:
        if layer.features:
            for key in layer.features[0].properties:
                keys.setdefault(key, None)
    return list(keys)


def resolve(
    layers: Sequence[Layer],
    identifier: str,
    tables: KeyTables = DEFAULT_TABLES,
) -> LookupResult:
    """Run a complete lookup: find the feature, then extract its fields.

    A miss is reported as ``LookupState.NOT_FOUND`` together with the
    property names present in the layers, so operators can spot naming
    mismatches.
    """
    result = LookupResult(query=identifier, state=LookupState.SEARCHING)

    match = find_feature(layers, identifier, tables)
    if match is None:
        result.state = LookupState.NOT_FOUND
        result.available_keys = available_keys(layers)
        return result

    result.state = LookupState.FOUND
    result.match = match
    result.fields = extract_fields(match.feature, tables)
    return result
