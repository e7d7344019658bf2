"""
Base for all upstream HTTP clients
"""
import json
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp

from support.constants import APP_NAME, UPSTREAM_TIMEOUT_SECONDS


logger = logging.getLogger(APP_NAME)


class UpstreamTransportError(Exception):
    """Network, timeout or decoding failure; callers convert it to a gateway error."""


class BaseHttpClient(ABC):
    """Single-shot JSON requests against an upstream service. No retries, no pooling."""

    @abstractmethod
    def __init__(self):
        """Override in inheriting class."""
        self.client_name = ""  # e.g., 'TaskEngine'
        self.timeout_seconds = UPSTREAM_TIMEOUT_SECONDS

    async def _request_json(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON body, whatever the status code.

        Args:
            method: HTTP method
            url: Absolute URL
            headers: Request headers (may carry the credential; never logged)
            json_body: JSON payload
            form: Form-encoded payload

        Returns:
            Decoded JSON (None for an empty body)
        """
        request_kwargs: Dict[str, Any] = {}
        if headers:
            request_kwargs["headers"] = headers
        if json_body is not None:
            request_kwargs["json"] = json_body
        if form is not None:
            request_kwargs["data"] = form

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, **request_kwargs) as response:
                    logger.debug(
                        "[%s] %s %s -> %s", self.client_name, method, url, response.status
                    )
                    return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            logger.error(
                "[%s] %s %s failed: %s", self.client_name, method, url, type(e).__name__
            )
            raise UpstreamTransportError(str(e)) from e
