"""Entry point for serving the Medicine Tracker API.

Host and port are read from ``API_HOST`` and ``API_PORT`` (defaults
``0.0.0.0`` and ``8000``); everything else comes from the settings in
``medicine_tracker_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from medicine_tracker_api.app.core.config import settings
from medicine_tracker_api.app.main import app


async def run_api() -> None:
    """Serve the API with Uvicorn until interrupted."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    try:
        await run_api()
    except Exception:
        logging.exception("Medicine Tracker API stopped with an error")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
