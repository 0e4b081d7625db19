"""Job queue collaborator.

The core only decides what to enqueue. ``DatabaseJobQueue`` writes the job
into the caller's session, so the job is committed or rolled back together
with the mutation that produced it.
"""
import logging
from typing import Protocol

from sqlalchemy.orm import Session

from time_profiles.models.queued_job import QueuedJob

logger = logging.getLogger(__name__)


class JobQueue(Protocol):
    def enqueue(self, target_type: str, target_id: int, action_verb: str) -> None:
        ...


class DatabaseJobQueue:
    """Queue backed by the ``queued_jobs`` table, sharing the caller's transaction."""

    def __init__(self, db: Session):
        self.db = db

    def enqueue(self, target_type: str, target_id: int, action_verb: str) -> None:
        self.db.add(QueuedJob(class_name=target_type, instance_id=target_id, method_name=action_verb))
        logger.debug("Queued %s#%s.%s", target_type, target_id, action_verb)
