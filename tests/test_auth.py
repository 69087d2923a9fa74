from yourstylist.auth import (
    EMAIL_IN_USE_MESSAGE,
    USER_NOT_FOUND_MESSAGE,
    WRONG_PASSWORD_MESSAGE,
    create_access_token,
    verify_token,
)


def test_signup_returns_token_and_sends_user_to_onboarding(api):
    response = api.post(
        "/auth/signup", json={"email": "Ada@Example.com", "password": "secret123"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["redirect"] == "/onboarding"
    assert body["data"]["user_info"]["email"] == "ada@example.com"
    assert verify_token(body["data"]["access_token"])["sub"] == str(
        body["data"]["user_info"]["id"]
    )


def test_signup_rejects_duplicate_email(api, register):
    register("ada@example.com")

    response = api.post(
        "/auth/signup", json={"email": "ADA@example.com", "password": "another1"}
    )

    assert response.status_code == 400
    assert response.json()["detail"] == EMAIL_IN_USE_MESSAGE


def test_signup_validates_email_and_password(api):
    short = api.post("/auth/signup", json={"email": "ada@example.com", "password": "123"})
    invalid = api.post("/auth/signup", json={"email": "not-an-email", "password": "secret123"})

    assert short.status_code == 422
    assert "at least 6 characters" in short.text
    assert invalid.status_code == 422


def test_signin_reports_unknown_email_and_wrong_password(api, register):
    register("ada@example.com", "secret123")

    unknown = api.post("/auth/signin", json={"email": "bob@example.com", "password": "secret123"})
    wrong = api.post("/auth/signin", json={"email": "ada@example.com", "password": "wrongpass"})

    assert unknown.status_code == 401
    assert unknown.json()["detail"] == USER_NOT_FOUND_MESSAGE
    assert wrong.status_code == 401
    assert wrong.json()["detail"] == WRONG_PASSWORD_MESSAGE


def test_signin_redirect_depends_on_profile(api, register):
    headers = register("ada@example.com", "secret123")
    credentials = {"email": "ada@example.com", "password": "secret123"}

    before = api.post("/auth/signin", json=credentials)
    api.put("/profile", json={"name": "Ada"}, headers=headers)
    after = api.post("/auth/signin", json=credentials)

    assert before.json()["data"]["redirect"] == "/onboarding"
    assert after.json()["data"]["redirect"] == "/dashboard"


def test_me_requires_a_valid_token(api, register):
    headers = register()

    me = api.get("/auth/me", headers=headers)
    anonymous = api.get("/auth/me")
    forged = api.get(
        "/auth/me",
        headers={"Authorization": "Bearer " + create_access_token({"sub": "999"})},
    )

    assert me.status_code == 200
    assert me.json()["email"] == "ada@example.com"
    assert me.json()["has_profile"] is False
    assert anonymous.status_code in (401, 403)
    assert forged.status_code == 401


def test_logout(api, register):
    headers = register()

    response = api.post("/auth/logout", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Successfully logged out"


def test_browser_requests_to_protected_pages_redirect_to_signin(api):
    response = api.get(
        "/profile", headers={"accept": "text/html"}, follow_redirects=False
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/auth/signin?redirect=/profile"
