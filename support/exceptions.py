"""
Error taxonomy for the gateway.

Every failure that can reach the router is one of these kinds. The exception
handlers registered in main.py turn them into a response with the error's
status code and an `error` body (plain text for the OAuth callback errors,
which are reached by browser navigation).
"""


class GatewayError(Exception):
    """Base class for all errors the router knows how to render."""

    status_code = 500
    message = "Internal server error"
    plain_text = False
    clears_verifier = False

    def __init__(self, message: str = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(GatewayError):
    status_code = 401
    message = "API key required"


class InvalidJobIdentifier(GatewayError):
    status_code = 400
    message = "Invalid job id"


class JobNotFound(GatewayError):
    status_code = 404
    message = "Task not found or failed"


class SubmissionRejected(GatewayError):
    """The engine answered but did not hand back a job identifier."""

    status_code = 500
    message = "Failed to create resolution task"


class UpstreamEngineError(GatewayError):
    """Transport or decoding failure while talking to the task engine."""

    status_code = 500
    message = "Task engine request failed"


class MalformedUpstreamPayload(GatewayError):
    """Engine data did not match the expected result shape.

    Never rendered: the result parser catches it and degrades to an empty
    profile list.
    """

    status_code = 502
    message = "Malformed upstream payload"


# OAuth callback errors ----------------------------------------------------------------------
class OAuthCallbackError(GatewayError):
    plain_text = True


class MissingAuthorizationCode(OAuthCallbackError):
    status_code = 400
    message = "Missing authorization code"


class MissingVerifier(OAuthCallbackError):
    status_code = 400
    message = "Missing code verifier"


class ExchangeRejected(OAuthCallbackError):
    status_code = 400
    message = "Failed to exchange token"
    clears_verifier = True


class UpstreamAuthError(OAuthCallbackError):
    status_code = 500
    message = "OAuth error"
    clears_verifier = True
