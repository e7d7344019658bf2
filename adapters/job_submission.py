"""
Job Submission Adapter
----------------------
Turns a free-form resolution request into a task engine job specification and
submits it. One call creates exactly one external job; resubmitting the same
request creates a new one.
"""
import logging
from typing import Optional

from contracts.job_schemas import JobSpecification, PROFILE_OUTPUT_SCHEMA, TaskSpec
from interfaces.task_engine_interface import TaskEngineInterface
from support.constants import APP_NAME, TASK_PROCESSOR
from support.exceptions import Unauthenticated


logger = logging.getLogger(APP_NAME)


INSTRUCTION_TEMPLATE = """You are a person entity resolution system. Given information about a person, find and return their digital profiles across various platforms.

Input: {request_text}

Instructions:
1. Analyze the input for any directly mentioned social media handles, usernames, email addresses, names, or other identifying information
2. Search for and identify profiles across platforms like Twitter, LinkedIn, GitHub, Instagram, Facebook, TikTok, etc.
3. For each profile found, determine:
   - Whether it was directly mentioned in the input (is_self_proclaimed_from_input)
   - Whether the profile links to or references other profiles you found (is_self_referring)
   - Your confidence level in the match (0.0 to 1.0)
   - Clear reasoning for why you believe this profile belongs to the same person
   - A brief snippet or description from the profile

4. Pay attention to cross-references between profiles to increase confidence
5. Return only profiles you have reasonable confidence belong to the same person
6. If no profiles can be found, return an empty profiles array

Be thorough but conservative - only return profiles you're reasonably confident about."""


def build_instruction(request_text: str) -> str:
    # str.format would choke on braces inside the request text
    return INSTRUCTION_TEMPLATE.replace("{request_text}", request_text)


def build_job_specification(request_text: str, processor: str = TASK_PROCESSOR) -> JobSpecification:
    """Deterministic: same request text, same specification."""
    return JobSpecification(
        task_spec=TaskSpec(output_schema=PROFILE_OUTPUT_SCHEMA),
        input=build_instruction(request_text),
        processor=processor,
    )


class JobSubmissionAdapter:
    """Submits resolution jobs to the task engine."""

    def __init__(self, task_engine: TaskEngineInterface, processor: str = TASK_PROCESSOR):
        self.task_engine = task_engine
        self.processor = processor

    async def submit(self, request_text: str, credential: Optional[str]) -> str:
        """
        Submit one resolution job.
        :param request_text: the resolution request, embedded verbatim
        :param credential: bearer credential for the engine
        :return: the engine-issued job identifier
        """
        if not credential:
            raise Unauthenticated()

        spec = build_job_specification(request_text, self.processor)
        job_id = await self.task_engine.submit(spec, credential)
        logger.info("Submitted resolution job %s", job_id)
        return job_id
