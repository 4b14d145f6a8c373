"""
Pydantic schemas for medicine records.

A medicine record tracks one medicine-related task: who created it,
who it is assigned to, when it expires, its free-text status and
priority, plus append-only tags and comments.  ``status`` and
``priority`` are deliberately plain strings; ``STATUS_IN_PROGRESS`` and
``STATUS_COMPLETED`` are the two values the service itself writes.

Request payloads default their text fields to empty strings so that a
missing field reaches the service and is rejected with the same
message as an empty one.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"


class MedicinePayload(BaseModel):
    """Body of the create and update requests."""

    title: str = Field("", description="Short title of the medicine task")
    description: str = Field("", description="Free-text description")
    assigned_to: str = Field("", description="Identifier of the assignee")
    expiry_date: str = Field(
        "",
        description="ISO-8601 date or datetime; naive values are read as UTC",
    )


class TagsPayload(BaseModel):
    """Tags to append to a record, in order."""

    tags: List[str] = Field(default_factory=list)


class AssignPayload(BaseModel):
    assigned_to: str = ""


class StatusPayload(BaseModel):
    status: str = ""


class PriorityPayload(BaseModel):
    priority: str = ""


class CommentPayload(BaseModel):
    """A comment to append.  ``None`` is rejected; an empty string is kept."""

    comment: Optional[str] = None


class MedicineRead(BaseModel):
    """Schema for a medicine record returned by the API."""

    id: str
    creator: str
    title: str
    description: str
    created_date: datetime
    updated_at: Optional[datetime] = None
    expiry_date: str
    assigned_to: str = ""
    tags: List[str] = Field(default_factory=list)
    status: str = STATUS_IN_PROGRESS
    priority: str = ""
    comments: List[str] = Field(default_factory=list)

    model_config = {
        "from_attributes": True,
    }


class ReminderRead(BaseModel):
    """Result of a due-date reminder request."""

    id: str
    message: str


class HealthRead(BaseModel):
    status: str
    medicines: int
