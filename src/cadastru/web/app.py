"""FastAPI application for the cadastru UAT back end.

Provides the REST API behind the UAT dashboard: GIS map layers and CF
lookup, the agricultural contract registry and urbanism certificates.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cadastru.core.config import Settings
from cadastru.core.types import HealthStatus
from cadastru.gis.service import GISService
from cadastru.registry.documents import DocumentStorage
from cadastru.registry.service import ContractService
from cadastru.urbanism.service import UrbanismService
from cadastru.web.gis_router import router as gis_router
from cadastru.web.registry_router import router as registry_router
from cadastru.web.urbanism_router import router as urbanism_router

VERSION = "0.1.0"


def create_app(
    settings: Settings | None = None,
    gis_service: GISService | None = None,
    contract_service: ContractService | None = None,
    urbanism_service: UrbanismService | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Uses the factory pattern so tests can create isolated app instances
    with their own stores.

    Args:
        settings: Application settings. Defaults to Settings().
        gis_service: Optional pre-built GISService.
        contract_service: Optional pre-built ContractService.
        urbanism_service: Optional pre-built UrbanismService.

    Returns:
        A configured FastAPI instance.
    """
    if settings is None:
        settings = Settings()

    logging.getLogger("cadastru").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="Cadastru UAT",
        description="GIS parcel lookup, land-contract registry and urbanism certificates",
        version=VERSION,
        debug=settings.debug,
    )

    # CORS for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if gis_service is None:
        gis_service = GISService(config=settings.gis)
    if contract_service is None:
        contract_service = ContractService(documents=DocumentStorage(config=settings.registry))
    if urbanism_service is None:
        urbanism_service = UrbanismService(config=settings.urbanism)

    # Store on app state for access in route handlers
    app.state.settings = settings
    app.state.gis_service = gis_service
    app.state.contract_service = contract_service
    app.state.urbanism_service = urbanism_service

    app.include_router(gis_router)
    app.include_router(registry_router)
    app.include_router(urbanism_router)

    @app.get("/api/health", response_model=HealthStatus)
    async def health_check() -> HealthStatus:
        """Health check endpoint."""
        return HealthStatus(
            service="cadastru",
            healthy=True,
            details={
                "version": VERSION,
                "environment": settings.environment,
                "uats_with_maps": len(gis_service.store.list_uats()),
                "contracts": contract_service.store.count,
            },
        )

    return app
