"""
Credential store (cookie codec).

The gateway keeps no sessions. The bearer credential lives with the client,
either in an explicit `x-api-key` header or in an HttpOnly cookie, and this
module is the only place that reads or writes those carriers.
"""
from typing import Optional

from fastapi import Request, Response

from support.constants import (
    CREDENTIAL_HEADER_NAME,
    CREDENTIAL_COOKIE_NAME,
    CREDENTIAL_COOKIE_MAX_AGE,
    VERIFIER_COOKIE_NAME,
    VERIFIER_COOKIE_MAX_AGE,
)


def extract_credential(request: Request) -> Optional[str]:
    """
    Return the caller's credential, or None if the request carries none.
    The header wins over the cookie. Empty values count as absent.
    """
    header_value = request.headers.get(CREDENTIAL_HEADER_NAME)
    if header_value:
        return header_value

    cookie_value = request.cookies.get(CREDENTIAL_COOKIE_NAME)
    if cookie_value:
        return cookie_value

    return None


def set_credential_cookie(response: Response, credential: str) -> None:
    """Long-lived but finite, so a login survives browser restarts."""
    response.set_cookie(
        key=CREDENTIAL_COOKIE_NAME,
        value=credential,
        max_age=CREDENTIAL_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=True,
        samesite="lax",
    )


def clear_credential_cookie(response: Response) -> None:
    response.delete_cookie(
        key=CREDENTIAL_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=True,
        samesite="lax",
    )


def extract_verifier(request: Request) -> Optional[str]:
    return request.cookies.get(VERIFIER_COOKIE_NAME) or None


def set_verifier_cookie(response: Response, verifier: str) -> None:
    response.set_cookie(
        key=VERIFIER_COOKIE_NAME,
        value=verifier,
        max_age=VERIFIER_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        secure=True,
        samesite="lax",
    )


def clear_verifier_cookie(response: Response) -> None:
    response.delete_cookie(
        key=VERIFIER_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=True,
        samesite="lax",
    )
