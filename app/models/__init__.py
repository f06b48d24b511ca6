"""
Database models package.
"""

from app.models.user import UserRow
from app.models.job import JobRow
from app.models.application import ApplicationRow

__all__ = ["UserRow", "JobRow", "ApplicationRow"]
