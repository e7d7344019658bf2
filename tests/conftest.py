import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest
from fastapi.testclient import TestClient

from main import app
from contracts.job_schemas import JobOutcome, JobSpecification, parse_engine_result
from interfaces.task_engine_interface import TaskEngineInterface
from support.constants import APP_NAME, LOG_FILE_PATH
from support.exceptions import UpstreamAuthError


# TEST DOUBLES ------------------------------------------------------------------------------------------------
class RecordingTaskEngine(TaskEngineInterface):
    """
    In-process task engine. Issues a fresh run id per submission and answers
    polls with whatever raw engine payload the test registered for that id.
    """

    def __init__(self):
        self.submit_calls: List[Tuple[JobSpecification, str]] = []
        self.poll_calls: List[Tuple[str, str]] = []
        self.results: Dict[str, Dict[str, Any]] = {}

    @property
    def call_count(self) -> int:
        return len(self.submit_calls) + len(self.poll_calls)

    async def submit(self, spec: JobSpecification, credential: str) -> str:
        self.submit_calls.append((spec, credential))
        job_id = f"trun_{uuid.uuid4().hex}"
        self.results[job_id] = {"run": {"run_id": job_id, "status": "queued"}}
        return job_id

    async def poll(self, job_id: str, credential: str) -> JobOutcome:
        self.poll_calls.append((job_id, credential))
        payload = self.results.get(
            job_id, {"type": "error", "error": {"message": "Run not found"}}
        )
        return parse_engine_result(payload)

    def complete(self, job_id: str, profiles: List[Dict[str, Any]]) -> None:
        self.results[job_id] = {
            "run": {"run_id": job_id, "status": "completed"},
            "output": {"type": "json", "content": {"profiles": profiles}},
        }

    def set_status(self, job_id: str, status: str) -> None:
        self.results[job_id] = {"run": {"run_id": job_id, "status": status}}


class FakeTokenClient:
    """Stands in for OAuthTokenClient; records every exchange."""

    def __init__(self, access_token: Optional[str] = "issued-token", unreachable: bool = False):
        self.access_token = access_token
        self.unreachable = unreachable
        self.calls: List[Dict[str, str]] = []

    async def exchange_code(self, code, code_verifier, client_id, redirect_uri):
        self.calls.append({
            "code": code,
            "code_verifier": code_verifier,
            "client_id": client_id,
            "redirect_uri": redirect_uri,
        })
        if self.unreachable:
            raise UpstreamAuthError()
        return self.access_token


# APP FIXTURES ------------------------------------------------------------------------------------------------
@pytest.fixture
def client():
    """FastAPI test client bound to the application instance. Redirects are not followed."""
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def fake_engine():
    """Install a RecordingTaskEngine on the resolution views for the duration of a test."""
    manager = app.state.resolution_manager
    original = manager.task_engine
    engine = RecordingTaskEngine()
    manager.task_engine = engine
    yield engine
    manager.task_engine = original


@pytest.fixture
def fake_token_client():
    """Install a FakeTokenClient on the auth views for the duration of a test."""
    manager = app.state.auth_manager
    original = manager.token_client
    token_client = FakeTokenClient()
    manager.token_client = token_client
    yield token_client
    manager.token_client = original


@pytest.fixture
def api_key_headers():
    return {"x-api-key": "test-api-key"}


# Logging ----------------------------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup test logging configuration for all tests."""
    logging.getLogger().handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


@pytest.fixture
def caplog(caplog):
    """caplog with the service logger captured at DEBUG."""
    caplog.set_level(logging.DEBUG, logger=APP_NAME)
    return caplog


def close_all_log_handlers():
    """Close all logging handlers to release file handles."""
    for logger_name in logging.Logger.manager.loggerDict:
        logger = logging.getLogger(logger_name)
        if not isinstance(logger, logging.Logger):
            continue
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture(scope="session", autouse=True)
def cleanup_log_file_after_tests():
    """Delete the service log file once the whole session is done."""
    yield

    close_all_log_handlers()
    for path in (LOG_FILE_PATH, *(f"{LOG_FILE_PATH}.{i}" for i in range(1, 6))):
        if os.path.exists(path):
            os.remove(path)
