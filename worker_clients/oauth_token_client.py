"""
OAuth Token Client
------------------
Exchanges an authorization code plus PKCE verifier for an access token at the
authorization server's token endpoint.
"""
from typing import Optional

from support.constants import OAUTH_TOKEN_URL
from support.exceptions import UpstreamAuthError
from worker_clients.base_http_client import BaseHttpClient, UpstreamTransportError


class OAuthTokenClient(BaseHttpClient):
    """Client for the authorization server token endpoint."""

    def __init__(self, token_url: str = OAUTH_TOKEN_URL):
        super().__init__()
        self.client_name = "OAuthToken"
        self.token_url = token_url

    async def exchange_code(
        self, code: str, code_verifier: str, client_id: str, redirect_uri: str
    ) -> Optional[str]:
        """
        Returns the access token, or None when the server answered without one.
        Raises UpstreamAuthError when the server could not be reached.
        """
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "code_verifier": code_verifier,
        }
        try:
            token_data = await self._request_json(
                "POST",
                self.token_url,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                form=form,
            )
        except UpstreamTransportError as e:
            raise UpstreamAuthError() from e

        if not isinstance(token_data, dict):
            return None
        access_token = token_data.get("access_token")
        return access_token if isinstance(access_token, str) and access_token else None
