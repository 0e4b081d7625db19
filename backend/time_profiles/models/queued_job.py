"""QueuedJob ORM model — deferred work handed to the external worker pool."""
from sqlalchemy import BigInteger, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from time_profiles.database import Base


class QueuedJob(Base):
    __tablename__ = "queued_jobs"

    job_id = Column(Integer, primary_key=True, autoincrement=True)
    class_name = Column(String(100), nullable=False)
    instance_id = Column(BigInteger, nullable=False, index=True)
    method_name = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<QueuedJob({self.class_name}#{self.instance_id}.{self.method_name})>"
