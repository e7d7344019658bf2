from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from starlette import status as H

from adapters.pkce_exchange import PkceExchange
from needs.INeedTokenClient import INeedTokenClientInterface
from support.constants import AUTH_SUCCESS_REDIRECT, LOGOUT_REDIRECT
from support.credential_store import (
    clear_credential_cookie,
    clear_verifier_cookie,
    extract_verifier,
    set_credential_cookie,
    set_verifier_cookie,
)


def _origin(request: Request) -> str:
    return f"{request.url.scheme}://{request.url.netloc}"


class AuthViewsManager(INeedTokenClientInterface):
    """
    Manages the OAuth PKCE login, callback and logout views.
    """
    def __init__(self, router: APIRouter):
        self.router = router

        self.register_views()

    def _exchange(self) -> PkceExchange:
        return PkceExchange(self.token_client)

    def register_views(self):
        # GET @ http://127.0.0.1:8000/login
        @self.router.get("/login", status_code=H.HTTP_302_FOUND)
        async def login(request: Request):
            """
            Start an authorization attempt: store a fresh verifier in a short-lived
            cookie and send the user to the authorization endpoint with its challenge.
            """
            authorize_url, verifier = self._exchange().start(
                _origin(request), request.url.hostname or ""
            )
            response = RedirectResponse(authorize_url, status_code=H.HTTP_302_FOUND)
            set_verifier_cookie(response, verifier)
            return response

        # GET @ http://127.0.0.1:8000/callback?code=...
        @self.router.get("/callback", status_code=H.HTTP_302_FOUND)
        async def oauth_callback(request: Request):
            """
            Exchange the authorization code for a credential. On success the
            credential cookie is set and the verifier cookie cleared in the same
            response. Failures are rendered as plain text by the error handlers.
            """
            credential = await self._exchange().complete(
                code=request.query_params.get("code"),
                verifier=extract_verifier(request),
                origin=_origin(request),
                hostname=request.url.hostname or "",
            )
            response = RedirectResponse(AUTH_SUCCESS_REDIRECT, status_code=H.HTTP_302_FOUND)
            set_credential_cookie(response, credential)
            clear_verifier_cookie(response)
            return response

        # POST @ http://127.0.0.1:8000/api/logout
        @self.router.post("/api/logout", status_code=H.HTTP_302_FOUND)
        async def logout():
            """Always expires the credential cookie, whether or not one was set."""
            response = RedirectResponse(LOGOUT_REDIRECT, status_code=H.HTTP_302_FOUND)
            clear_credential_cookie(response)
            return response
