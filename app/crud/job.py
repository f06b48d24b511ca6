"""
CRUD operations for Job model.

Implements the Repository pattern to encapsulate all database operations
for jobs, providing a clean interface for the API layer.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import codec
from app.models.job import JobRow
from app.schemas.job import Job, JobCreate


def get_multi(db: Session, skip: int = 0, limit: int = 10) -> List[Job]:
    """
    Retrieve multiple jobs with pagination.

    Args:
        db: Database session
        skip: Number of records to skip (offset)
        limit: Maximum number of records to return

    Returns:
        List of Job records, in no particular order
    """
    rows = db.query(JobRow).offset(skip).limit(limit).all()
    return [codec.decode_job(row) for row in rows]


def count(db: Session) -> int:
    """Total number of jobs, ignoring pagination."""
    return db.query(func.count(JobRow.id)).scalar() or 0


def create(db: Session, job_data: JobCreate) -> Job:
    """
    Create a new job in the database.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        Created Job with id, posted_at and updated_at set
    """
    db_job = JobRow(**codec.encode_new_job(
        employer_id=job_data.employer_id,
        title=job_data.title,
        description=job_data.description,
        location=job_data.location,
        salary=job_data.salary,
        employment_type=job_data.employment_type,
        now=codec.utcnow(),
    ))

    db.add(db_job)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_job)

    return codec.decode_job(db_job)


def get_by_id(db: Session, job_id: int) -> Optional[Job]:
    """
    Retrieve a job by its ID.

    Args:
        db: Database session
        job_id: Job ID to retrieve

    Returns:
        Job if found, None otherwise
    """
    row = db.query(JobRow).filter(JobRow.id == job_id).first()
    return codec.decode_job(row) if row else None


def update(
    db: Session,
    job_id: int,
    changes: Dict[str, Any],
    updated_at: Optional[datetime] = None
) -> int:
    """
    Merge the provided fields into a job.

    updated_at is written on every call, even when changes is empty.

    Args:
        db: Database session
        job_id: Job ID to update
        changes: Provided fields only (title, description, location, salary, employment_type)
        updated_at: Timestamp to store; defaults to now

    Returns:
        Number of rows affected
    """
    values = codec.encode_job_changes(changes)
    values["updated_at"] = codec.encode_timestamp(updated_at or codec.utcnow())

    affected = db.query(JobRow).filter(JobRow.id == job_id).update(values, synchronize_session=False)
    db.commit()

    return affected


def delete(db: Session, job_id: int) -> int:
    """
    Delete a job by ID.

    Args:
        db: Database session
        job_id: Job ID to delete

    Returns:
        Number of rows deleted (0 if the job did not exist)
    """
    affected = db.query(JobRow).filter(JobRow.id == job_id).delete(synchronize_session=False)
    db.commit()

    return affected
