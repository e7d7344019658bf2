"""
OAuth PKCE Exchange
-------------------
Two states per authorization attempt:

    awaiting-callback  verifier generated, kept in a client cookie, user sent
                       to the authorization endpoint with only the challenge
    exchanged          code + verifier traded for a credential (terminal)

This module holds no state of its own; the verifier travels in the cookie and
the views set and clear cookies around these calls.
"""
import logging
from typing import Optional, Tuple
from urllib.parse import urlencode

from support.constants import APP_NAME, OAUTH_AUTHORIZE_URL, OAUTH_CLIENT_ID
from support.exceptions import ExchangeRejected, MissingAuthorizationCode, MissingVerifier
from support.security import code_challenge_for, generate_code_verifier
from worker_clients.oauth_token_client import OAuthTokenClient


logger = logging.getLogger(APP_NAME)


class PkceExchange:
    """Starts and completes the authorization-code-with-PKCE flow."""

    def __init__(
        self,
        token_client: OAuthTokenClient,
        authorize_url: str = OAUTH_AUTHORIZE_URL,
        client_id: str = OAUTH_CLIENT_ID,
    ):
        self.token_client = token_client
        self.authorize_url = authorize_url
        self.client_id = client_id

    def resolve_client_id(self, hostname: str) -> str:
        return self.client_id or hostname

    @staticmethod
    def redirect_uri_for(origin: str) -> str:
        return f"{origin.rstrip('/')}/callback"

    def start(self, origin: str, hostname: str) -> Tuple[str, str]:
        """
        Begin an authorization attempt.
        :return: (authorization URL to redirect to, verifier to store client-side)
        """
        verifier = generate_code_verifier()
        query = urlencode({
            "response_type": "code",
            "client_id": self.resolve_client_id(hostname),
            "redirect_uri": self.redirect_uri_for(origin),
            "code_challenge": code_challenge_for(verifier),
            "code_challenge_method": "S256",
        })
        return f"{self.authorize_url}?{query}", verifier

    async def complete(
        self, code: Optional[str], verifier: Optional[str], origin: str, hostname: str
    ) -> str:
        """
        Trade the authorization code for a credential.
        :raises MissingAuthorizationCode, MissingVerifier, ExchangeRejected, UpstreamAuthError
        """
        if not code:
            raise MissingAuthorizationCode()
        if not verifier:
            raise MissingVerifier()

        access_token = await self.token_client.exchange_code(
            code=code,
            code_verifier=verifier,
            client_id=self.resolve_client_id(hostname),
            redirect_uri=self.redirect_uri_for(origin),
        )
        if not access_token:
            logger.warning("Token endpoint answered without an access token")
            raise ExchangeRejected()

        logger.info("Authorization code exchanged")
        return access_token
