"""Server-rendered admin pages and the sign-in form"""
from vetclinic import config

ADMIN_CREDENTIALS = {"username": "admin", "password": "admin-password"}


class TestLoginRequired:
    def test_dashboard_redirects_to_signin(self, client):
        response = client.get("/admin", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "/auth/signin?next=/admin"

    def test_query_string_is_kept_in_next(self, client):
        response = client.get("/admin/khach-hang?page=2", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"].startswith("/auth/signin?next=/admin/khach-hang")
        assert "page%3D2" in response.headers["location"]

    def test_root_points_at_admin(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.headers["location"] == "/admin"


class TestSigninForm:
    def test_signin_page_renders(self, client):
        response = client.get("/auth/signin")
        assert response.status_code == 200
        assert "<form" in response.text

    def test_signin_redirects_to_next(self, client):
        response = client.post(
            "/auth/signin", data={**ADMIN_CREDENTIALS, "next": "/admin/xa"}, follow_redirects=False
        )

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/xa"
        assert config.SESSION_COOKIE_NAME in response.cookies

    def test_external_next_is_ignored(self, client):
        response = client.post(
            "/auth/signin", data={**ADMIN_CREDENTIALS, "next": "//evil.example"}, follow_redirects=False
        )
        assert response.headers["location"] == "/admin"

    def test_wrong_password_rerenders_form(self, client):
        response = client.post("/auth/signin", data={"username": "admin", "password": "x"})

        assert response.status_code == 401
        assert "Tên đăng nhập hoặc mật khẩu không đúng" in response.text

    def test_signed_in_user_skips_signin(self, auth_client):
        response = auth_client.get("/auth/signin", follow_redirects=False)
        assert response.status_code == 303

    def test_signout_page(self, auth_client):
        response = auth_client.get("/auth/signout", follow_redirects=False)

        assert response.status_code == 303
        assert auth_client.get("/admin", follow_redirects=False).status_code == 303


class TestAdminPages:
    def test_dashboard(self, auth_client, schedule):
        response = auth_client.get("/admin")

        assert response.status_code == 200
        assert "Quản trị viên" in response.text

    def test_list_pages_render(self, auth_client, schedule):
        for path in ("/admin/xa", "/admin/khach-hang", "/admin/ho-so-thu", "/admin/lich-kham", "/admin/cache"):
            response = auth_client.get(path)
            assert response.status_code == 200, path

    def test_list_pages_show_records(self, auth_client, schedule):
        assert "Phường 1" in auth_client.get("/admin/xa").text
        assert "Nguyễn Văn An" in auth_client.get("/admin/khach-hang").text
        assert "Mực" in auth_client.get("/admin/ho-so-thu").text
        assert "Tiêm phòng dại" in auth_client.get("/admin/lich-kham").text

    def test_forms_render(self, auth_client, customer):
        for path in ("/admin/xa/them-moi", "/admin/xa/XA001", "/admin/khach-hang/them-moi",
                     "/admin/khach-hang/KH001", "/admin/ho-so-thu/them-moi?maKhachHang=KH001"):
            response = auth_client.get(path)
            assert response.status_code == 200, path

    def test_pet_detail(self, auth_client, schedule):
        response = auth_client.get("/admin/ho-so-thu/HS001")

        assert response.status_code == 200
        assert "Mực" in response.text
        assert "Tiêm phòng dại" in response.text

    def test_missing_record_renders_error_page(self, auth_client):
        response = auth_client.get("/admin/xa/XA999")

        assert response.status_code == 404
        assert "text/html" in response.headers["content-type"]
        assert "Không tìm thấy xã" in response.text

    def test_invalid_filter_renders_error_page(self, auth_client):
        response = auth_client.get("/admin/ho-so-thu", params={"trangThai": "XYZ"})
        assert response.status_code == 400
        assert "Trạng thái sức khỏe không hợp lệ" in response.text
