import os

from dotenv import load_dotenv

load_dotenv()


APP_NAME = "identity-gateway-service"

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOG_FILE_PATH = os.path.join(BASE_DIR, 'app.log')
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Credential and PKCE cookies
CREDENTIAL_HEADER_NAME = "x-api-key"
CREDENTIAL_COOKIE_NAME = "parallel_api_key"
CREDENTIAL_COOKIE_MAX_AGE = 30 * 24 * 60 * 60  # 30 days
VERIFIER_COOKIE_NAME = "code_verifier"
VERIFIER_COOKIE_MAX_AGE = 10 * 60

AUTH_SUCCESS_REDIRECT = "/?auth=success"
LOGOUT_REDIRECT = "/"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, x-api-key",
}

# Upstream task engine
TASK_ENGINE_BASE_URL = os.getenv("TASK_ENGINE_BASE_URL", "https://api.parallel.ai")
TASK_PROCESSOR = os.getenv("TASK_PROCESSOR", "core")
UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))

JOB_ID_PATTERN = r"^[A-Za-z0-9_\-]{1,128}$"

# Authorization server
OAUTH_AUTHORIZE_URL = os.getenv(
    "OAUTH_AUTHORIZE_URL", "https://platform.parallel.ai/getKeys/authorize"
)
OAUTH_TOKEN_URL = os.getenv(
    "OAUTH_TOKEN_URL", "https://platform.parallel.ai/getKeys/token"
)
OAUTH_CLIENT_ID = os.getenv("OAUTH_CLIENT_ID", "")  # empty -> request hostname
