import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.codec import utcnow
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.crud import user as user_crud
from app.schemas.common import INT64_MAX, IdPath, Page, page_number, provided_fields
from app.schemas.user import User, UserCreate, UserUpdate

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)


@router.get("", response_model=Page[User])
def list_users(
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, description="Maximum number of items to return"),
    offset: int = Query(0, ge=0, le=INT64_MAX, description="Offset for pagination"),
    db: Session = Depends(get_db)
):
    """
    List users with pagination.

    `count` is the total number of users, independent of limit/offset.
    """
    limit = min(limit, settings.MAX_PAGE_LIMIT)

    total = user_crud.count(db)
    users = user_crud.get_multi(db, skip=offset, limit=limit)

    return Page[User](page=page_number(offset, limit), count=total, items=users)


@router.get("/{user_id}", response_model=User)
def get_user(user_id: IdPath, db: Session = Depends(get_db)):
    """Retrieve a user by ID."""
    user = user_crud.get_by_id(db, user_id)

    if user is None:
        logger.warning(f"User {user_id} not found")
        raise NotFoundError(f"User with ID {user_id} not found")

    return user


@router.post("", status_code=201, response_model=User)
def create_user(request: UserCreate, db: Session = Depends(get_db)):
    """
    Register a new user.

    The password must already be hashed. `role` defaults to `job_seeker`.
    Returns 409 if the email is already registered.
    """
    new_user = user_crud.create(db, request)
    logger.info(f"Created user {new_user.id} ({new_user.role})")
    return new_user


@router.put("/{user_id}", response_model=User)
def update_user(user_id: IdPath, request: UserUpdate, db: Session = Depends(get_db)):
    """
    Partially update a user.

    Only fields present in the body change. updated_at is refreshed when
    something actually changes.
    """
    existing = user_crud.get_by_id(db, user_id)
    if existing is None:
        raise NotFoundError(f"User with ID {user_id} not found")

    changes = provided_fields(request)
    if not changes:
        return existing

    merged = existing.model_copy(update={**changes, "updated_at": utcnow()})
    affected = user_crud.update(db, user_id, changes, updated_at=merged.updated_at)
    if affected == 0:
        raise NotFoundError(f"User with ID {user_id} not found")

    logger.info(f"Updated user {user_id}: {sorted(changes)}")
    return merged


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: IdPath, db: Session = Depends(get_db)):
    """
    Delete a user by ID.

    Succeeds whether or not the user exists. Jobs and applications that
    reference the user are not removed.
    """
    deleted = user_crud.delete(db, user_id)
    logger.info(f"Deleted user {user_id} ({deleted} row(s))")
    return None
