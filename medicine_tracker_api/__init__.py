"""
Top-level package for the Medicine Tracker API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``medicine_tracker_api.app.main:app``.
"""

__all__ = []
