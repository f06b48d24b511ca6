import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.codec import utcnow
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.crud import job as job_crud
from app.schemas.common import INT64_MAX, IdPath, Page, page_number, provided_fields
from app.schemas.job import Job, JobCreate, JobUpdate

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("", status_code=201, response_model=Job)
def create_job(request: JobCreate, db: Session = Depends(get_db)):
    """
    Create a new job posting.

    posted_at and updated_at are both set to the creation time.
    """
    new_job = job_crud.create(db, request)
    logger.info(f"Created job {new_job.id}: {new_job.title}")
    return new_job


@router.get("/{job_id}", response_model=Job)
def get_job(job_id: IdPath, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.

    Returns 404 when the job does not exist. A database failure is a 500,
    never a 404.
    """
    job = job_crud.get_by_id(db, job_id)

    if not job:
        logger.warning(f"Job {job_id} not found")
        raise NotFoundError(f"Job with ID {job_id} not found")

    return job


@router.get("", response_model=Page[Job])
def list_jobs(
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1),
    offset: int = Query(0, ge=0, le=INT64_MAX),
    db: Session = Depends(get_db)
):
    """
    List jobs with pagination.

    Args:
        limit: Maximum number of records to return (default: 10, max: 100, must be >= 1)
        offset: Number of records to skip (default: 0)
    """
    if limit > settings.MAX_PAGE_LIMIT:
        limit = settings.MAX_PAGE_LIMIT

    total = job_crud.count(db)
    jobs = job_crud.get_multi(db, skip=offset, limit=limit)

    return Page[Job](page=page_number(offset, limit), count=total, items=jobs)


@router.put("/{job_id}", response_model=Job)
def update_job(job_id: IdPath, request: JobUpdate, db: Session = Depends(get_db)):
    """
    Partially update a job.

    posted_at never changes. updated_at is refreshed on every call, even
    when the body changes nothing.
    """
    existing = job_crud.get_by_id(db, job_id)
    if not existing:
        raise NotFoundError(f"Job with ID {job_id} not found")

    changes = provided_fields(request)
    now = utcnow()
    merged = existing.model_copy(update={**changes, "updated_at": now})

    affected = job_crud.update(db, job_id, changes, updated_at=now)
    if affected == 0:
        raise NotFoundError(f"Job with ID {job_id} not found")

    logger.info(f"Updated job {job_id}: {sorted(changes)}")
    return merged


@router.delete("/{job_id}", status_code=204)
def delete_job(job_id: IdPath, db: Session = Depends(get_db)):
    """
    Delete a job by ID.

    No existence check: deleting an unknown job still returns 204.
    """
    deleted = job_crud.delete(db, job_id)
    logger.info(f"Deleted job {job_id} ({deleted} row(s))")
    return None
