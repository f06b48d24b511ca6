"""
CRUD operations for applications.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import codec
from app.models.application import ApplicationRow
from app.schemas.application import Application, ApplicationCreate


def get_multi(db: Session, skip: int = 0, limit: int = 10) -> List[Application]:
    rows = db.query(ApplicationRow).offset(skip).limit(limit).all()
    return [codec.decode_application(row) for row in rows]


def count(db: Session) -> int:
    return db.query(func.count(ApplicationRow.id)).scalar() or 0


def create(db: Session, application_data: ApplicationCreate) -> Application:
    """Store a new application; applied_at is set here and never changes."""
    db_application = ApplicationRow(**codec.encode_new_application(
        job_seeker_id=application_data.job_seeker_id,
        job_id=application_data.job_id,
        cover_letter=application_data.cover_letter,
        resume=application_data.resume,
        status=application_data.status,
        now=codec.utcnow(),
    ))

    db.add(db_application)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(db_application)

    return codec.decode_application(db_application)


def get_by_id(db: Session, application_id: int) -> Optional[Application]:
    row = db.query(ApplicationRow).filter(ApplicationRow.id == application_id).first()
    return codec.decode_application(row) if row else None


def update(db: Session, application_id: int, changes: Dict[str, Any]) -> int:
    """
    Overwrite the provided cover_letter, resume and status fields.

    Returns the number of rows affected; an empty change set writes nothing.
    """
    values = codec.encode_application_changes(changes)
    if not values:
        return 0

    affected = (
        db.query(ApplicationRow)
        .filter(ApplicationRow.id == application_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    return affected


def delete(db: Session, application_id: int) -> int:
    affected = (
        db.query(ApplicationRow)
        .filter(ApplicationRow.id == application_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return affected
