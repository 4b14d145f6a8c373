"""
Application package initializer.

Contains the FastAPI entrypoint (``main``) and its submodules:
``core`` (settings, logging, database, identity, clock, errors),
``schemas``, ``services`` and the versioned ``api`` routers.
"""

from .main import app  # noqa: F401
