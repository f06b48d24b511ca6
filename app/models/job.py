from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from app.core.codec import EMPLOYMENT_TYPE
from app.core.database import Base


class JobRow(Base):
    """
    Job posting published by an employer.

    posted_at is written once at creation; updated_at changes on every update.
    """
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint(EMPLOYMENT_TYPE.sql_check("employment_type"), name="ck_jobs_employment_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    location = Column(String, nullable=False)
    salary = Column(String, nullable=True)
    employment_type = Column(String, nullable=False)

    posted_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)

    def __repr__(self):
        return f"<JobRow(id={self.id}, title='{self.title}', employment_type={self.employment_type})>"
