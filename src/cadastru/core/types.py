"""Core type definitions shared across cadastru modules."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

# Value of a single GIS feature property.
Scalar = str | int | float | bool | None


class LookupState(StrEnum):
    """Progress of a single CF lookup."""

    UNRESOLVED = "unresolved"
    SEARCHING = "searching"
    FOUND = "found"
    NOT_FOUND = "not_found"


class HealthStatus(BaseModel):
    """Health check response for any service."""

    service: str
    healthy: bool
    details: dict[str, Any] = Field(default_factory=dict)
