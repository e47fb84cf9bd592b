"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class GISConfig(BaseSettings):
    """GIS layer and lookup configuration."""

    model_config = {"env_prefix": "CADASTRU_GIS_"}

    keys_path: str | None = None
    default_layer_color: str = "#3388ff"
    summary_property_limit: int = 5


class RegistryConfig(BaseSettings):
    """Agricultural contract registry configuration."""

    model_config = {"env_prefix": "CADASTRU_REGISTRY_"}

    documents_dir: str = "data/contracts"
    max_document_bytes: int = 20 * 1024 * 1024


class UrbanismConfig(BaseSettings):
    """Urbanism certificate defaults."""

    model_config = {"env_prefix": "CADASTRU_URBANISM_"}

    technical_regime: str = (
        "POT: 35%\nCUT: 1.2\nRegim înălțime: P+1E+M\n(Generat automat din PUG)"
    )
    restrictions: str = (
        "Nu au fost identificate restricții majore în zona selectată.\n"
        "(Verificare automată GIS)"
    )


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "CADASTRU_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    gis: GISConfig = Field(default_factory=GISConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    urbanism: UrbanismConfig = Field(default_factory=UrbanismConfig)
