"""
Job Result Adapter
------------------
Single-shot lookup of a previously submitted job. Polling cadence belongs to
the client; nothing here loops, waits or caches.
"""
import re
import logging
from typing import Optional

from contracts.job_schemas import JobOutcome, OutcomeState
from interfaces.task_engine_interface import TaskEngineInterface
from support.constants import APP_NAME, JOB_ID_PATTERN
from support.exceptions import InvalidJobIdentifier, JobNotFound, Unauthenticated


logger = logging.getLogger(APP_NAME)

_JOB_ID_RE = re.compile(JOB_ID_PATTERN)


def validate_job_id(job_id: str) -> str:
    """Check the shape of an untrusted job id; the value itself is never interpreted."""
    if not isinstance(job_id, str) or not _JOB_ID_RE.fullmatch(job_id):
        raise InvalidJobIdentifier()
    return job_id


class JobResultAdapter:
    """Fetches and normalizes job outcomes from the task engine."""

    def __init__(self, task_engine: TaskEngineInterface):
        self.task_engine = task_engine

    async def fetch(self, job_id: str, credential: Optional[str]) -> JobOutcome:
        """
        Poll the engine once.
        :return: a pending, completed or failed outcome
        :raises JobNotFound: if the engine has no record of the job
        """
        if not credential:
            raise Unauthenticated()
        validate_job_id(job_id)

        outcome = await self.task_engine.poll(job_id, credential)
        if outcome.state == OutcomeState.NOT_FOUND:
            logger.info("Job %s not found upstream", job_id)
            raise JobNotFound()

        logger.info("Job %s is %s (%s)", job_id, outcome.state.value, outcome.status)
        return outcome
