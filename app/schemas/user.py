"""
Pydantic schemas for job board users.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Role of a user on the job board"""
    JOB_SEEKER = "job_seeker"
    EMPLOYER = "employer"

    def __str__(self) -> str:
        return self.value


class User(BaseModel):
    """A stored user"""
    id: int
    name: str
    email: str
    password: str = Field(..., description="Pre-hashed password")
    role: UserRole
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Schema for creating a new user"""
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=1, description="Already hashed by the caller")
    role: UserRole = UserRole.JOB_SEEKER


class UserUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value"""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)
    role: Optional[UserRole] = None
