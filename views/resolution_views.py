"""
Resolution Views
----------------
Defines the ResolutionViewsManager and the endpoints for submitting an
identity-resolution job and polling its result.

Endpoints:
    - POST /resolve: Submit a resolution request, returns the engine job id
    - GET /resolve/{job_id}: Poll a job once, returns profiles or a status
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi import Path as PathParam
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette import status as H

from adapters.job_result import JobResultAdapter
from adapters.job_submission import JobSubmissionAdapter
from contracts.job_schemas import ResolutionRequest, SubmissionResponse
from needs.INeedTaskEngine import INeedTaskEngineInterface
from support.security import require_credential


class ResolutionViewsManager(INeedTaskEngineInterface):
    """
    Registers the resolution endpoints on the provided router.
    The task engine is injected through the `task_engine` need.
    """

    def __init__(self, router: APIRouter):
        self.router = router

        self.register_views()

    def register_views(self) -> None:
        # POST @ http://127.0.0.1:8000/resolve
        @self.router.post(
            "/resolve", status_code=H.HTTP_202_ACCEPTED, summary="Submit resolution job"
        )
        async def submit_resolution(
            request: Request,
            credential: str = Depends(require_credential),
        ) -> SubmissionResponse:
            """
            Submit a person to resolve.
            request body (application/json)
            {"input": "john.doe@techcorp.com or @johndoe on Twitter"}
            The body is read only after the credential check, so a request
            without a credential is a 401 whatever its body.
            :param request: incoming request carrying the resolution request body
            :param credential: engine credential from the x-api-key header or cookie
            :return: {"job_id": "<engine run id>"} (202 Accepted)
            """
            try:
                body = ResolutionRequest.model_validate_json(await request.body())
            except ValidationError as e:
                raise RequestValidationError(
                    [{**err, "loc": ("body", *err["loc"])} for err in e.errors()]
                ) from e

            adapter = JobSubmissionAdapter(self.task_engine)
            job_id = await adapter.submit(body.input, credential)
            return SubmissionResponse(job_id=job_id)

        # GET @ http://127.0.0.1:8000/resolve/{job_id}
        @self.router.get(
            "/resolve/{job_id}", status_code=H.HTTP_200_OK, summary="Poll resolution job"
        )
        async def get_resolution_result(
            job_id: str = PathParam(...),
            credential: str = Depends(require_credential),
        ) -> Dict[str, Any]:
            """
            Returns {"profiles": [...]} once completed, {"status": "..."} otherwise.
            :param job_id: the job id returned by POST /resolve
            :param credential: engine credential from the x-api-key header or cookie
            :return: the job outcome body
            """
            adapter = JobResultAdapter(self.task_engine)
            outcome = await adapter.fetch(job_id, credential)
            return outcome.to_client_body()
