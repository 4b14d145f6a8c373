"""
Health endpoint for API v1.

Reports that the service is up and how many medicine records the
store currently holds.  Publicly accessible.
"""

from fastapi import APIRouter, Depends

from medicine_tracker_api.app.api.v1.endpoints.medicines import get_medicine_service
from medicine_tracker_api.app.schemas.medicine import HealthRead
from medicine_tracker_api.app.services.medicine_service import MedicineService

router = APIRouter()


@router.get("/", response_model=HealthRead)
async def health(service: MedicineService = Depends(get_medicine_service)) -> HealthRead:
    return HealthRead(status="ok", medicines=await service.count())
