"""Credentials login, session lookup and sign-out"""
from vetclinic import config

ADMIN_CREDENTIALS = {"username": "admin", "password": "admin-password"}


class TestCredentialsLogin:
    def test_json_login_sets_session_cookie(self, client):
        response = client.post("/api/auth/callback/credentials", json=ADMIN_CREDENTIALS)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["name"] == "Quản trị viên"
        assert data["user"]["id"] == "1"
        assert data["token"]
        assert config.SESSION_COOKIE_NAME in response.cookies

    def test_form_login(self, client):
        response = client.post("/api/auth/callback/credentials", data=ADMIN_CREDENTIALS)
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_wrong_password(self, client):
        response = client.post(
            "/api/auth/callback/credentials", json={"username": "admin", "password": "sai-mat-khau"}
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Tên đăng nhập hoặc mật khẩu không đúng"}
        assert config.SESSION_COOKIE_NAME not in response.cookies

    def test_unknown_user_and_empty_body(self, client):
        assert client.post("/api/auth/callback/credentials", json={"username": "ai", "password": "x"}).status_code == 401
        assert client.post("/api/auth/callback/credentials", json={}).status_code == 401


class TestSession:
    def test_signed_out_session_is_empty(self, client):
        assert client.get("/api/auth/session").json() == {}

    def test_session_after_login(self, auth_client):
        body = auth_client.get("/api/auth/session").json()

        assert body["user"]["name"] == "Quản trị viên"
        assert "expires" in body

    def test_bearer_token_is_accepted(self, client):
        token = client.post("/api/auth/callback/credentials", json=ADMIN_CREDENTIALS).json()["data"]["token"]
        client.cookies.clear()

        body = client.get("/api/auth/session", headers={"Authorization": f"Bearer {token}"}).json()
        assert body["user"]["id"] == "1"

    def test_tampered_token_is_ignored(self, client):
        response = client.get("/api/auth/session", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.json() == {}

    def test_signout_clears_session(self, auth_client):
        response = auth_client.post("/api/auth/signout")

        assert response.status_code == 200
        assert auth_client.get("/api/auth/session").json() == {}


class TestProtectedApi:
    def test_cache_api_requires_login(self, client):
        response = client.get("/api/cache/stats")
        assert response.status_code == 401
        assert response.json()["error"] == "Chưa đăng nhập"

    def test_cache_api_with_login(self, auth_client):
        response = auth_client.get("/api/cache/stats")
        assert response.status_code == 200
        assert response.json()["data"]["available"] is False
