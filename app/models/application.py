from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint
from app.core.codec import APPLICATION_STATUS
from app.core.database import Base


class ApplicationRow(Base):
    """A job seeker's application to a job posting."""
    __tablename__ = "applications"
    __table_args__ = (
        CheckConstraint(APPLICATION_STATUS.sql_check("status"), name="ck_applications_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_seeker_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)
    cover_letter = Column(String, nullable=True)
    resume = Column(String, nullable=True)
    status = Column(String, nullable=False)
    applied_at = Column(String, nullable=False)

    def __repr__(self):
        return f"<ApplicationRow(id={self.id}, job_id={self.job_id}, status={self.status})>"
