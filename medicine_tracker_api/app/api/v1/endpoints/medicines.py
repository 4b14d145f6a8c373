"""
Medicine endpoints for API v1.

Query routes (lists, search, filters) are open; every route that
changes a record, and reading a single record by id, requires a bearer
token identifying the caller.  Ownership rules live in
``MedicineService``; this module only translates service errors into
HTTP responses carrying the service's message in ``detail``.

Fixed paths (``/initial``, ``/search``, ``/by-tag`` ...) are declared
before ``/{medicine_id}`` so they are not captured by it.
"""

from typing import List, NoReturn, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from medicine_tracker_api.app.core.errors import MedicineError
from medicine_tracker_api.app.core.security import get_current_principal
from medicine_tracker_api.app.schemas.medicine import (
    AssignPayload,
    CommentPayload,
    MedicinePayload,
    MedicineRead,
    PriorityPayload,
    ReminderRead,
    StatusPayload,
    TagsPayload,
)
from medicine_tracker_api.app.services.medicine_service import MedicineService

router = APIRouter()


def get_medicine_service(request: Request) -> MedicineService:
    """Return the service instance wired onto the application at startup."""
    return request.app.state.medicine_service


def _raise_http(exc: MedicineError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc


def _query_int(raw: str) -> Union[int, str]:
    """Convert a query value to ``int``; anything else is passed on for the service to reject."""
    try:
        return int(raw)
    except ValueError:
        return raw


# ----------------------------------------------------------------------
# Queries
# ----------------------------------------------------------------------
@router.get("/initial", response_model=List[MedicineRead])
async def get_initial_medicines(
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    """Return the first page of medicines.

    Responds 404 when the store is empty.
    """
    try:
        return await service.get_initial_medicines()
    except MedicineError as e:
        _raise_http(e)


@router.get("/", response_model=List[MedicineRead])
async def load_more_medicines(
    offset: str = Query(..., description="Index of the first record to return"),
    limit: str = Query(..., description="Number of records to return"),
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    """Return exactly ``limit`` records starting at ``offset``.

    Negative or non-integer values are rejected with 400; a window
    reaching past the last record is rejected with 404.
    """
    try:
        return await service.load_more_medicines(_query_int(offset), _query_int(limit))
    except MedicineError as e:
        _raise_http(e)


@router.get("/search", response_model=List[MedicineRead])
async def search_medicines(
    q: str = Query("", description="Text to look for in title or description"),
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    return await service.search_medicines(q)


@router.get("/by-tag", response_model=List[MedicineRead])
async def get_medicines_by_tag(
    tag: str = Query(..., description="Exact tag to match"),
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    return await service.get_medicines_by_tag(tag)


@router.get("/by-status", response_model=List[MedicineRead])
async def get_medicines_by_status(
    status_value: str = Query(..., alias="status", description="Exact status to match"),
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    return await service.get_medicines_by_status(status_value)


@router.get("/by-creator", response_model=List[MedicineRead])
async def get_medicines_by_creator(
    creator: str = Query(..., description="Principal that created the records"),
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    return await service.get_medicines_by_creator(creator)


@router.get("/overdue", response_model=List[MedicineRead])
async def get_overdue_medicines(
    service: MedicineService = Depends(get_medicine_service),
) -> List[MedicineRead]:
    """Medicines past their expiry date that are not completed."""
    return await service.get_overdue_medicines()


@router.get("/{medicine_id}", response_model=MedicineRead)
async def get_medicine(
    medicine_id: str,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    """Retrieve a single medicine.  Only its creator may read it."""
    try:
        return await service.get_medicine(medicine_id, principal)
    except MedicineError as e:
        _raise_http(e)


# ----------------------------------------------------------------------
# Updates
# ----------------------------------------------------------------------
@router.post("/", response_model=MedicineRead, status_code=status.HTTP_201_CREATED)
async def add_medicine(
    payload: MedicinePayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    """Create a medicine owned by the caller.

    All four payload fields are required and ``expiry_date`` must not be
    in the past.  The new record starts ``In Progress``.
    """
    try:
        return await service.add_medicine(payload, principal)
    except MedicineError as e:
        _raise_http(e)


@router.put("/{medicine_id}", response_model=MedicineRead)
async def update_medicine(
    medicine_id: str,
    payload: MedicinePayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    try:
        return await service.update_medicine(medicine_id, payload, principal)
    except MedicineError as e:
        _raise_http(e)


@router.delete("/{medicine_id}", response_model=MedicineRead)
async def delete_medicine(
    medicine_id: str,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    """Delete a medicine (creator only) and return the removed record."""
    try:
        return await service.delete_medicine(medicine_id, principal)
    except MedicineError as e:
        _raise_http(e)


@router.post("/{medicine_id}/complete", response_model=MedicineRead)
async def complete_medicine(
    medicine_id: str,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    """Mark a medicine as completed.  Fails with 409 if nobody is assigned."""
    try:
        return await service.complete_medicine(medicine_id)
    except MedicineError as e:
        _raise_http(e)


@router.post("/{medicine_id}/tags", response_model=MedicineRead)
async def add_tags(
    medicine_id: str,
    payload: TagsPayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    try:
        return await service.add_tags(medicine_id, payload.tags, principal)
    except MedicineError as e:
        _raise_http(e)


@router.put("/{medicine_id}/assignee", response_model=MedicineRead)
async def assign_medicine(
    medicine_id: str,
    payload: AssignPayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    try:
        return await service.assign_medicine(medicine_id, payload.assigned_to, principal)
    except MedicineError as e:
        _raise_http(e)


@router.put("/{medicine_id}/status", response_model=MedicineRead)
async def change_medicine_status(
    medicine_id: str,
    payload: StatusPayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    try:
        return await service.change_medicine_status(medicine_id, payload.status, principal)
    except MedicineError as e:
        _raise_http(e)


@router.put("/{medicine_id}/priority", response_model=MedicineRead)
async def set_medicine_priority(
    medicine_id: str,
    payload: PriorityPayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    try:
        return await service.set_medicine_priority(medicine_id, payload.priority, principal)
    except MedicineError as e:
        _raise_http(e)


@router.post("/{medicine_id}/reminder", response_model=ReminderRead)
async def send_due_date_reminder(
    medicine_id: str,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> ReminderRead:
    """Return a reminder message for an overdue, uncompleted medicine.

    Responds 409 when the medicine is not overdue or already completed.
    """
    try:
        message = await service.send_due_date_reminder(medicine_id)
    except MedicineError as e:
        _raise_http(e)
    return ReminderRead(id=medicine_id, message=message)


@router.post("/{medicine_id}/comments", response_model=MedicineRead)
async def add_medicine_comment(
    medicine_id: str,
    payload: CommentPayload,
    principal: str = Depends(get_current_principal),
    service: MedicineService = Depends(get_medicine_service),
) -> MedicineRead:
    """Append a comment.  Any authenticated caller may comment."""
    try:
        return await service.add_medicine_comment(medicine_id, payload.comment)
    except MedicineError as e:
        _raise_http(e)
