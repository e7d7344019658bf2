from urllib.parse import parse_qs, urlparse

from support.security import code_challenge_for


def set_cookies(response) -> list:
    return response.headers.get_list("set-cookie")


def cookies_named(response, name: str) -> list:
    return [c for c in set_cookies(response) if c.startswith(f"{name}=")]


def is_expiring(directive: str) -> bool:
    lowered = directive.lower()
    return "max-age=0" in lowered or "01 jan 1970" in lowered


# --------------------------------------------------------------------------------------
# Login
# --------------------------------------------------------------------------------------
def test_login_redirects_with_challenge_and_sets_verifier_cookie(client):
    response = client.get("/login")

    assert response.status_code == 302
    (verifier_cookie,) = cookies_named(response, "code_verifier")
    verifier = verifier_cookie.split(";")[0].split("=", 1)[1]
    assert "httponly" in verifier_cookie.lower()
    assert "max-age=600" in verifier_cookie.lower()

    location = response.headers["location"]
    query = parse_qs(urlparse(location).query)
    assert query["response_type"] == ["code"]
    assert query["code_challenge_method"] == ["S256"]
    assert query["code_challenge"] == [code_challenge_for(verifier)]
    assert query["redirect_uri"] == ["http://testserver/callback"]
    assert query["client_id"] == ["testserver"]
    assert verifier not in location
    assert response.headers["access-control-allow-origin"] == "*"


def test_each_login_gets_a_fresh_verifier(client):
    first = cookies_named(client.get("/login"), "code_verifier")[0]
    second = cookies_named(client.get("/login"), "code_verifier")[0]
    assert first.split(";")[0] != second.split(";")[0]


# --------------------------------------------------------------------------------------
# Callback
# --------------------------------------------------------------------------------------
def test_callback_success_sets_credential_and_clears_verifier(client, fake_token_client):
    response = client.get(
        "/callback?code=auth-code", headers={"Cookie": "code_verifier=the-verifier"}
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/?auth=success"

    directives = set_cookies(response)
    assert len(directives) == 2

    (credential_cookie,) = cookies_named(response, "parallel_api_key")
    assert credential_cookie.startswith("parallel_api_key=issued-token")
    assert "httponly" in credential_cookie.lower()
    assert "secure" in credential_cookie.lower()
    assert "samesite=lax" in credential_cookie.lower()
    assert "max-age=2592000" in credential_cookie.lower()
    assert not is_expiring(credential_cookie)

    (verifier_cookie,) = cookies_named(response, "code_verifier")
    assert is_expiring(verifier_cookie)

    (call,) = fake_token_client.calls
    assert call == {
        "code": "auth-code",
        "code_verifier": "the-verifier",
        "client_id": "testserver",
        "redirect_uri": "http://testserver/callback",
    }
    assert response.headers["access-control-allow-origin"] == "*"


def test_callback_without_code_returns_400(client, fake_token_client):
    response = client.get("/callback", headers={"Cookie": "code_verifier=the-verifier"})

    assert response.status_code == 400
    assert response.text == "Missing authorization code"
    assert cookies_named(response, "parallel_api_key") == []
    assert fake_token_client.calls == []


def test_callback_without_verifier_returns_400_and_sets_no_credential(client, fake_token_client):
    response = client.get("/callback?code=auth-code")

    assert response.status_code == 400
    assert response.text == "Missing code verifier"
    assert cookies_named(response, "parallel_api_key") == []
    assert fake_token_client.calls == []
    assert response.headers["access-control-allow-origin"] == "*"


def test_callback_exchange_rejected_returns_400(client, fake_token_client):
    fake_token_client.access_token = None

    response = client.get(
        "/callback?code=stale-code", headers={"Cookie": "code_verifier=the-verifier"}
    )

    assert response.status_code == 400
    assert response.text == "Failed to exchange token"
    assert cookies_named(response, "parallel_api_key") == []
    (verifier_cookie,) = cookies_named(response, "code_verifier")
    assert is_expiring(verifier_cookie)


def test_callback_auth_server_unreachable_returns_500(client, fake_token_client):
    fake_token_client.unreachable = True

    response = client.get(
        "/callback?code=auth-code", headers={"Cookie": "code_verifier=the-verifier"}
    )

    assert response.status_code == 500
    assert response.text == "OAuth error"
    assert cookies_named(response, "parallel_api_key") == []


def test_callback_never_echoes_the_credential_in_the_body(client, fake_token_client):
    fake_token_client.access_token = "very-secret-token"

    response = client.get(
        "/callback?code=auth-code", headers={"Cookie": "code_verifier=the-verifier"}
    )

    assert "very-secret-token" not in response.text


# --------------------------------------------------------------------------------------
# Logout
# --------------------------------------------------------------------------------------
def test_logout_expires_credential_cookie(client):
    response = client.post("/api/logout", headers={"Cookie": "parallel_api_key=some-key"})

    assert response.status_code == 302
    assert response.headers["location"] == "/"
    (directive,) = cookies_named(response, "parallel_api_key")
    assert is_expiring(directive)
    assert response.headers["access-control-allow-origin"] == "*"


def test_logout_without_existing_cookie_still_expires_it(client):
    response = client.post("/api/logout")

    assert response.status_code == 302
    (directive,) = cookies_named(response, "parallel_api_key")
    assert is_expiring(directive)
