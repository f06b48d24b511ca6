"""
CRUD operations for users.

Rows come back as domain records decoded by app.core.codec.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core import codec
from app.core.database import is_unique_violation
from app.core.errors import ConflictError
from app.models.user import UserRow
from app.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)


def _handle_integrity_error(db: Session, exc: IntegrityError, email: Optional[str]) -> None:
    """Roll back, and turn a duplicate email into ConflictError."""
    db.rollback()
    if is_unique_violation(exc):
        raise ConflictError(f"A user with email {email} already exists") from exc


def get_multi(db: Session, skip: int = 0, limit: int = 10) -> List[User]:
    """
    Retrieve a page of users.

    No ordering is applied; rows come back in the store's natural order.
    """
    rows = db.query(UserRow).offset(skip).limit(limit).all()
    return [codec.decode_user(row) for row in rows]


def count(db: Session) -> int:
    return db.query(func.count(UserRow.id)).scalar() or 0


def create(db: Session, user_data: UserCreate) -> User:
    """
    Insert a user, stamping created_at and updated_at with the current time.

    Raises:
        ConflictError: if the email is already taken
    """
    db_user = UserRow(**codec.encode_new_user(
        name=user_data.name,
        email=user_data.email,
        password=user_data.password,
        role=user_data.role,
        now=codec.utcnow(),
    ))
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as e:
        _handle_integrity_error(db, e, user_data.email)
        raise
    db.refresh(db_user)

    return codec.decode_user(db_user)


def get_by_id(db: Session, user_id: int) -> Optional[User]:
    row = db.query(UserRow).filter(UserRow.id == user_id).first()
    if row is None:
        return None
    return codec.decode_user(row)


def update(
    db: Session,
    user_id: int,
    changes: Dict[str, Any],
    updated_at: Optional[datetime] = None,
) -> int:
    """
    Overwrite only the provided fields of a user.

    updated_at is refreshed only when at least one field is written.

    Returns:
        Number of rows affected (0 when nothing changed or the user is absent)
    """
    values = codec.encode_user_changes(changes)
    if not values:
        return 0
    values["updated_at"] = codec.encode_timestamp(updated_at or codec.utcnow())

    try:
        affected = db.query(UserRow).filter(UserRow.id == user_id).update(values, synchronize_session=False)
        db.commit()
    except IntegrityError as e:
        _handle_integrity_error(db, e, changes.get("email"))
        raise
    return affected


def delete(db: Session, user_id: int) -> int:
    """
    Delete a user by ID. Deleting a missing user is not an error.

    Jobs and applications referencing the user are left in place.
    """
    affected = db.query(UserRow).filter(UserRow.id == user_id).delete(synchronize_session=False)
    db.commit()
    return affected
