import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.crud import application as application_crud
from app.schemas.application import Application, ApplicationCreate, ApplicationUpdate
from app.schemas.common import INT64_MAX, IdPath, Page, page_number, provided_fields

router = APIRouter(prefix="/applications", tags=["Applications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[Application])
def list_applications(
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1),
    offset: int = Query(0, ge=0, le=INT64_MAX),
    db: Session = Depends(get_db)
):
    limit = min(limit, settings.MAX_PAGE_LIMIT)

    total = application_crud.count(db)
    applications = application_crud.get_multi(db, skip=offset, limit=limit)

    return Page[Application](page=page_number(offset, limit), count=total, items=applications)


@router.get("/{application_id}", response_model=Application)
def get_application(application_id: IdPath, db: Session = Depends(get_db)):
    application = application_crud.get_by_id(db, application_id)

    if application is None:
        logger.warning(f"Application {application_id} not found")
        raise NotFoundError(f"Application with ID {application_id} not found")

    return application


@router.post("", status_code=201, response_model=Application)
def create_application(request: ApplicationCreate, db: Session = Depends(get_db)):
    """
    Submit an application to a job.

    `status` defaults to `pending`; `applied_at` is set by the server.
    """
    new_application = application_crud.create(db, request)
    logger.info(
        f"Created application {new_application.id}: "
        f"seeker {new_application.job_seeker_id} -> job {new_application.job_id}"
    )
    return new_application


@router.put("/{application_id}", response_model=Application)
def update_application(application_id: IdPath, request: ApplicationUpdate, db: Session = Depends(get_db)):
    """
    Partially update an application's cover letter, resume or status.

    applied_at is kept from the original submission.
    """
    existing = application_crud.get_by_id(db, application_id)
    if existing is None:
        raise NotFoundError(f"Application with ID {application_id} not found")

    changes = provided_fields(request)
    if not changes:
        return existing

    merged = existing.model_copy(update=changes)
    affected = application_crud.update(db, application_id, changes)
    if affected == 0:
        raise NotFoundError(f"Application with ID {application_id} not found")

    logger.info(f"Updated application {application_id}: {sorted(changes)}")
    return merged


@router.delete("/{application_id}", status_code=204)
def delete_application(application_id: IdPath, db: Session = Depends(get_db)):
    deleted = application_crud.delete(db, application_id)
    logger.info(f"Deleted application {application_id} ({deleted} row(s))")
    return None
