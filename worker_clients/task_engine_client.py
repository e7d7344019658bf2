"""
Task Engine Client
------------------
aiohttp client for the external AI task engine (Parallel Tasks API).
Submits task runs and fetches run results; result payloads are parsed into a
JobOutcome at this boundary.
"""
import logging
from urllib.parse import quote

from contracts.job_schemas import JobOutcome, JobSpecification, parse_engine_result
from interfaces.task_engine_interface import TaskEngineInterface
from support.constants import APP_NAME, CREDENTIAL_HEADER_NAME, TASK_ENGINE_BASE_URL
from support.exceptions import SubmissionRejected, UpstreamEngineError
from worker_clients.base_http_client import BaseHttpClient, UpstreamTransportError


logger = logging.getLogger(APP_NAME)


class TaskEngineClient(BaseHttpClient, TaskEngineInterface):
    """Client for interacting with the task engine."""

    def __init__(self, base_url: str = TASK_ENGINE_BASE_URL):
        super().__init__()
        self.client_name = "TaskEngine"
        self.base_url = base_url.rstrip("/")

    @property
    def runs_url(self) -> str:
        return f"{self.base_url}/v1/tasks/runs"

    def result_url(self, job_id: str) -> str:
        return f"{self.runs_url}/{quote(job_id, safe='')}/result"

    async def submit(self, spec: JobSpecification, credential: str) -> str:
        try:
            result = await self._request_json(
                "POST",
                self.runs_url,
                headers={"Content-Type": "application/json", CREDENTIAL_HEADER_NAME: credential},
                json_body=spec.model_dump(),
            )
        except UpstreamTransportError as e:
            raise UpstreamEngineError("Failed to submit resolution") from e

        run_id = result.get("run_id") if isinstance(result, dict) else None
        if not run_id or not isinstance(run_id, str):
            logger.warning("[%s] Task run response carried no run_id", self.client_name)
            raise SubmissionRejected()

        return run_id

    async def poll(self, job_id: str, credential: str) -> JobOutcome:
        try:
            result = await self._request_json(
                "GET",
                self.result_url(job_id),
                headers={CREDENTIAL_HEADER_NAME: credential},
            )
        except UpstreamTransportError as e:
            raise UpstreamEngineError("Failed to get resolution result") from e

        return parse_engine_result(result)
