"""
Main entrypoint for the Medicine Tracker API.

This module assembles the FastAPI application, sets up logging,
includes versioned routers and wires the medicine service.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn medicine_tracker_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

from typing import Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.clock import Clock, SystemClock
from .core.config import settings
from .core.logging_config import setup_logging
from .services.medicine_service import MedicineService
from .services.medicine_store import MedicineStore


def create_app(
    store: Optional[MedicineStore] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[MedicineStore]
        Store to serve.  When omitted, a store on
        ``settings.database_url`` is opened at startup, so importing
        this module does not touch the filesystem.
    clock : Optional[Clock]
        Time source; defaults to the system clock.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(
        settings.log_level,
        settings.log_file,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.include_router(v1_router, prefix="/api/v1")

    service_clock = clock or SystemClock()

    if store is not None:
        app.state.medicine_service = MedicineService(store, service_clock)
    else:
        @app.on_event("startup")
        async def startup_event() -> None:
            # Opening the store creates the database file and applies migrations.
            app.state.medicine_service = MedicineService(MedicineStore(), service_clock)

    return app


app = create_app()
