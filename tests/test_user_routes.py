"""
Tests for registration, cookie sessions and profile updates.
"""

PASSWORD = "secret-pass-123"


def register(client, email="jane@example.com", role="applicant"):
    return client.post("/api/v1/user/register", json={
        "fullname": "Jane Doe",
        "email": email,
        "phone_number": "5550100",
        "password": PASSWORD,
        "role": role,
    })


class TestRegister:

    def test_register_creates_account(self, anonymous, repo):
        resp = register(anonymous)
        assert resp.status_code == 201
        assert resp.json()["success"] is True

        stored = repo.find("users", {"email": "jane@example.com"})
        assert len(stored) == 1
        assert stored[0]["password"] != PASSWORD

    def test_duplicate_email_rejected(self, anonymous):
        register(anonymous)
        resp = register(anonymous, role="recruiter")
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "User already exists with this email"}

    def test_validation_error_uses_envelope(self, anonymous):
        resp = anonymous.post("/api/v1/user/register", json={"email": "not-an-email"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["success"] is False
        assert body["message"]


class TestLogin:

    def test_login_sets_session_cookie(self, anonymous):
        register(anonymous)
        resp = anonymous.post("/api/v1/user/login", json={
            "email": "jane@example.com", "password": PASSWORD, "role": "applicant",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["user"]["role"] == "applicant"
        assert "password" not in body["user"]
        assert "token" in resp.cookies

    def test_wrong_password(self, anonymous):
        register(anonymous)
        resp = anonymous.post("/api/v1/user/login", json={
            "email": "jane@example.com", "password": "wrong-password", "role": "applicant",
        })
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_role_must_match_account(self, anonymous):
        register(anonymous, role="applicant")
        resp = anonymous.post("/api/v1/user/login", json={
            "email": "jane@example.com", "password": PASSWORD, "role": "recruiter",
        })
        assert resp.status_code == 400
        assert resp.json()["message"] == "Account doesn't exist with current role"


class TestSession:

    def test_me_without_cookie_is_unauthenticated(self, anonymous):
        resp = anonymous.get("/api/v1/user/me")
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "message": "User not authenticated"}

    def test_me_with_session(self, applicant):
        resp = applicant.client.get("/api/v1/user/me")
        assert resp.status_code == 200
        assert resp.json()["user"]["id"] == applicant.user["id"]

    def test_garbage_cookie_is_anonymous(self, anonymous):
        resp = anonymous.get("/api/v1/user/me", headers={"Cookie": "token=not-a-jwt"})
        assert resp.status_code == 401

    def test_session_of_deleted_user_is_anonymous(self, applicant, repo):
        repo.delete("users", applicant.user["id"])
        assert applicant.client.get("/api/v1/user/me").status_code == 401

    def test_logout_clears_session(self, applicant):
        resp = applicant.client.post("/api/v1/user/logout")
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert applicant.client.get("/api/v1/user/me").status_code == 401

    def test_logout_without_session_is_harmless(self, anonymous):
        assert anonymous.post("/api/v1/user/logout").status_code == 200


class TestProfileUpdate:

    def test_update_profile_fields(self, applicant):
        resp = applicant.client.post("/api/v1/user/profile/update", json={
            "fullname": "Jane Q. Doe",
            "bio": "Backend developer",
            "skills": "python, mongodb",
        })
        assert resp.status_code == 200
        user = resp.json()["user"]
        assert user["fullname"] == "Jane Q. Doe"
        assert user["profile"] == {"bio": "Backend developer", "skills": ["python", "mongodb"]}

    def test_role_cannot_be_changed(self, applicant, repo):
        resp = applicant.client.post("/api/v1/user/profile/update", json={"role": "recruiter"})
        assert resp.status_code == 200
        assert resp.json()["user"]["role"] == "applicant"
        assert repo.get("users", applicant.user["id"])["role"] == "applicant"

    def test_requires_session(self, anonymous):
        resp = anonymous.post("/api/v1/user/profile/update", json={"bio": "x"})
        assert resp.status_code == 401


def test_health_check(anonymous):
    resp = anonymous.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "status": "healthy", "mongodb": "connected"}
