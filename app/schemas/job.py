from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.schemas.common import RowId


class EmploymentType(str, Enum):
    """Type of employment offered by a job posting"""
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    CONTRACT = "contract"

    def __str__(self) -> str:
        return self.value


class Job(BaseModel):
    """A stored job posting"""
    id: int
    employer_id: RowId
    title: str
    description: str
    location: str
    salary: Optional[str] = None
    employment_type: EmploymentType
    posted_at: datetime
    updated_at: datetime


class JobCreate(BaseModel):
    """Schema for creating a new job"""
    employer_id: RowId
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    salary: Optional[str] = None
    employment_type: EmploymentType


class JobUpdate(BaseModel):
    """
    Partial update for a job.

    employer_id and posted_at are fixed at creation and cannot be changed.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    location: Optional[str] = Field(None, min_length=1)
    salary: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
