"""
Shared job schemas for the gateway and the task engine contract
----------------------------------------------------------------
Pydantic models for resolution requests, the job specification sent to the
task engine, and the normalized job outcome returned to clients.

The engine's result payload is parsed here, at the boundary, so that the rest
of the service only ever sees a `JobOutcome`.
"""
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from support.constants import APP_NAME
from support.exceptions import MalformedUpstreamPayload


logger = logging.getLogger(APP_NAME)


class ResolutionRequest(BaseModel):
    """Free-text description of the person to resolve."""
    model_config = ConfigDict(frozen=True)

    input: str = Field(min_length=1, description="Handles, emails, names or any identifying text")


class ProfileMatch(BaseModel):
    """
    One candidate profile returned by the engine. Used to validate shape only;
    the engine's own dicts are what the client receives.
    """
    model_config = ConfigDict(extra="allow")

    platform_slug: str
    profile_url: str
    is_self_proclaimed_from_input: bool
    is_self_referring: bool
    confidence: float = Field(ge=0, le=1)
    match_reasoning: str
    profile_snippet: str


PROFILE_FIELDS = (
    "platform_slug",
    "profile_url",
    "is_self_proclaimed_from_input",
    "is_self_referring",
    "confidence",
    "match_reasoning",
    "profile_snippet",
)

# Identical for every submission; only the instruction text varies.
PROFILE_OUTPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "profiles": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "platform_slug": {
                        "type": "string",
                        "description": "Platform identifier (e.g., 'twitter', 'linkedin', 'github')",
                    },
                    "profile_url": {
                        "type": "string",
                        "description": "Full URL to the profile",
                    },
                    "is_self_proclaimed_from_input": {
                        "type": "boolean",
                        "description": "Whether this profile was directly mentioned in the input",
                    },
                    "is_self_referring": {
                        "type": "boolean",
                        "description": "Whether this profile links back to other found profiles",
                    },
                    "confidence": {
                        "type": "number",
                        "minimum": 0,
                        "maximum": 1,
                        "description": "Confidence score for this match (0-1)",
                    },
                    "match_reasoning": {
                        "type": "string",
                        "description": "Explanation of why this profile matches the input person",
                    },
                    "profile_snippet": {
                        "type": "string",
                        "description": "Brief excerpt or description from the profile",
                    },
                },
                "required": list(PROFILE_FIELDS),
            },
        },
    },
    "required": ["profiles"],
}


class TaskSpec(BaseModel):
    output_schema: Dict[str, Any]


class JobSpecification(BaseModel):
    """
    Schema for the task run request sent from the gateway to the task engine.
    """
    task_spec: TaskSpec
    input: str
    processor: str


class SubmissionResponse(BaseModel):
    job_id: str


class OutcomeState(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    NOT_FOUND = "not_found"


TERMINAL_FAILURE_STATUSES = {"failed", "cancelled"}


class JobOutcome(BaseModel):
    """
    Normalized job status. `profiles` is only set when a completed run carried
    output; otherwise the client sees `status`, the engine's raw status string.
    """
    state: OutcomeState
    status: Optional[str] = None
    profiles: Optional[List[Dict[str, Any]]] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != OutcomeState.PENDING

    def to_client_body(self) -> Dict[str, Any]:
        if self.state == OutcomeState.COMPLETED and self.profiles is not None:
            return {"profiles": self.profiles}
        return {"status": self.status}


def _extract_profiles(output: Any) -> List[Any]:
    """Pull `content.profiles` out of the engine output or raise MalformedUpstreamPayload."""
    if not isinstance(output, dict):
        raise MalformedUpstreamPayload("output is not an object")

    content = output.get("content")
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except json.JSONDecodeError as e:
            raise MalformedUpstreamPayload(f"output content is not JSON: {e}") from e
    if not isinstance(content, dict):
        raise MalformedUpstreamPayload("output content is not an object")

    profiles = content.get("profiles")
    if not isinstance(profiles, list):
        raise MalformedUpstreamPayload("profiles is not a list")

    return profiles


def _valid_profiles(profiles: List[Any], run_id: Any) -> List[Dict[str, Any]]:
    """Keep well-formed profiles exactly as the engine sent them, drop the rest."""
    kept = []
    for index, profile in enumerate(profiles):
        try:
            ProfileMatch.model_validate(profile)
        except ValidationError as e:
            logger.warning(
                "Dropping malformed profile %d of run %s: %d error(s)", index, run_id, e.error_count()
            )
            continue
        kept.append(profile)
    return kept


def parse_engine_result(payload: Any) -> JobOutcome:
    """
    Map a task engine result payload onto a JobOutcome.

    - completed run with output -> completed (well-formed profiles as returned by the engine)
    - completed run without output -> completed, reported by status only
    - failed / cancelled run -> failed
    - any other run status -> pending
    - no run record -> not_found
    """
    run = payload.get("run") if isinstance(payload, dict) else None
    if not isinstance(run, dict):
        return JobOutcome(state=OutcomeState.NOT_FOUND)

    status = run.get("status")
    status = str(status) if status is not None else "unknown"

    if status == "completed":
        output = payload.get("output")
        if output is None:
            return JobOutcome(state=OutcomeState.COMPLETED, status=status)
        try:
            profiles = _valid_profiles(_extract_profiles(output), run.get("run_id"))
        except MalformedUpstreamPayload as e:
            logger.warning("Degrading malformed result for run %s: %s", run.get("run_id"), e)
            profiles = []
        return JobOutcome(state=OutcomeState.COMPLETED, status=status, profiles=profiles)

    if status in TERMINAL_FAILURE_STATUSES:
        return JobOutcome(state=OutcomeState.FAILED, status=status)

    return JobOutcome(state=OutcomeState.PENDING, status=status)
