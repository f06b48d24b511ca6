from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.schemas.common import RowId


class ApplicationStatus(str, Enum):
    """Review status of an application"""
    PENDING = "pending"
    REVIEWED = "reviewed"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    def __str__(self) -> str:
        return self.value


class Application(BaseModel):
    """A job seeker's application to a job"""
    id: int
    job_seeker_id: RowId
    job_id: RowId
    cover_letter: Optional[str] = None
    resume: Optional[str] = Field(None, description="Link to the resume file")
    status: ApplicationStatus
    applied_at: datetime


class ApplicationCreate(BaseModel):
    """Schema for submitting an application"""
    job_seeker_id: RowId
    job_id: RowId
    cover_letter: Optional[str] = None
    resume: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.PENDING


class ApplicationUpdate(BaseModel):
    """Only the cover letter, resume and status can change after submission"""
    cover_letter: Optional[str] = None
    resume: Optional[str] = None
    status: Optional[ApplicationStatus] = None
