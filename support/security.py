"""Security utilities for PKCE and credential enforcement."""

import base64
import hashlib
import secrets

from fastapi import Request

from support.credential_store import extract_credential
from support.exceptions import Unauthenticated


def generate_code_verifier() -> str:
    """Random verifier of 86 URL-safe characters (RFC 7636 allows 43-128)"""
    return secrets.token_urlsafe(64)


def code_challenge_for(verifier: str) -> str:
    """S256 challenge: unpadded base64url of the SHA256 digest of the verifier"""
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def require_credential(request: Request) -> str:
    """Dependency that fails with 401 before the endpoint body runs."""
    credential = extract_credential(request)
    if credential is None:
        raise Unauthenticated()
    return credential
