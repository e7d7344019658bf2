"""
Abstraction layer for the external AI task engine.

The gateway never reimplements the engine's matching logic; it only submits a
job specification and polls for the outcome. Keeping the contract this narrow
lets tests swap in an in-process double.

Classes:
- TaskEngineInterface (ABC): submit a job, poll a job.
"""

from abc import ABC, abstractmethod

from contracts.job_schemas import JobOutcome, JobSpecification


class TaskEngineInterface(ABC):
    """
    Abstract base class for task engine clients.
    Implementations must not retry and must not keep per-job or per-credential state.
    """

    @abstractmethod
    async def submit(self, spec: JobSpecification, credential: str) -> str:
        """
        Create exactly one job and return its identifier.
        Raises SubmissionRejected or UpstreamEngineError.
        """

    @abstractmethod
    async def poll(self, job_id: str, credential: str) -> JobOutcome:
        """
        Look up a job once and return its normalized outcome.
        Raises UpstreamEngineError on transport failure.
        """
