"""
Top-level router for version 1 of the API.

This router aggregates domain-specific routers under a unified
prefix.  When new endpoints are added, update this file to include
their routers.
"""

from fastapi import APIRouter

from .endpoints import health, medicines

router = APIRouter()

router.include_router(medicines.router, prefix="/medicines", tags=["medicines"])
router.include_router(health.router, prefix="/health", tags=["health"])
