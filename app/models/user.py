"""
Stored users.

Roles and timestamps are kept as text; app.core.codec converts them to and
from the domain types.
"""

from sqlalchemy import Column, Integer, String, CheckConstraint
from app.core.codec import USER_ROLE
from app.core.database import Base


class UserRow(Base):
    """
    A job board account, either a job seeker or an employer.

    Email is unique across all users.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(USER_ROLE.sql_check("role"), name="ck_users_role"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)  # hashed before it reaches the API
    role = Column(String, nullable=False)

    # RFC3339 text, UTC
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)

    def __repr__(self):
        return f"<UserRow(id={self.id}, email='{self.email}', role={self.role})>"
