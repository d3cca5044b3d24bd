"""Customer (khách hàng) endpoints"""
import pytest

from vetclinic.domain.customers.repository import CustomerRepository
from vetclinic.models import Customer
from vetclinic.shared.validators import validate_vn_phone


class TestPhoneValidation:
    @pytest.mark.parametrize(
        "raw,normalized",
        [
            ("0912345678", "0912345678"),
            ("+84912345678", "+84912345678"),
            ("84 912 345 678", "84912345678"),
            ("091.234.5678", "0912345678"),
            ("0312-345-678", "0312345678"),
        ],
    )
    def test_valid_numbers(self, raw, normalized):
        assert validate_vn_phone(raw) == normalized

    @pytest.mark.parametrize("raw", ["0212345678", "091234567", "09123456789", "abcdefghij"])
    def test_invalid_numbers(self, raw):
        with pytest.raises(ValueError, match="Số điện thoại không hợp lệ"):
            validate_vn_phone(raw)


class TestCreateCustomer:
    def test_create_with_address(self, client, address):
        response = client.post(
            "/api/khach-hang",
            json={
                "tenKhachHang": "Lê Văn Cường",
                "soDienThoai": "0987 654 321",
                "diaChi": "45 Nguyễn Huệ",
                "maXa": "XA001",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Tạo khách hàng thành công"
        data = body["data"]
        assert data["maKhachHang"] == "KH001"
        assert data["soDienThoai"] == "0987654321"
        assert data["xa"] == {"maXa": "XA001", "tenXa": "Phường 1"}
        assert data["hoSoThu"] == []

    def test_optional_fields_may_be_omitted(self, client):
        response = client.post("/api/khach-hang", json={"tenKhachHang": "Phạm Dung", "soDienThoai": "0355555555"})

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["diaChi"] is None
        assert data["maXa"] is None
        assert data["xa"] is None

    def test_short_name_is_rejected(self, client):
        response = client.post("/api/khach-hang", json={"tenKhachHang": "A", "soDienThoai": "0912345678"})

        assert response.status_code == 400
        assert response.json()["error"] == "Tên khách hàng phải có ít nhất 2 ký tự"

    def test_invalid_phone_is_rejected(self, client):
        response = client.post("/api/khach-hang", json={"tenKhachHang": "Hoàng Em", "soDienThoai": "12345"})

        assert response.status_code == 400
        assert response.json()["error"] == "Số điện thoại không hợp lệ"
        assert response.json()["errors"][0]["field"] == "soDienThoai"

    def test_short_street_address_is_rejected(self, client):
        response = client.post(
            "/api/khach-hang",
            json={"tenKhachHang": "Hoàng Em", "soDienThoai": "0912345678", "diaChi": "abc"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Địa chỉ phải có ít nhất 5 ký tự"

    def test_unknown_address_is_404(self, client, db):
        response = client.post(
            "/api/khach-hang",
            json={"tenKhachHang": "Hoàng Em", "soDienThoai": "0912345678", "maXa": "XA404"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Không tìm thấy xã"
        assert db.query(Customer).count() == 0

    def test_duplicate_phone_is_409(self, client, customer):
        response = client.post(
            "/api/khach-hang", json={"tenKhachHang": "Người Khác", "soDienThoai": "0912345678"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Số điện thoại đã tồn tại trong hệ thống"

    def test_phone_clash_at_commit_is_409(self, client, customer, db, monkeypatch):
        # A concurrent insert can take the phone between the lookup and the commit
        monkeypatch.setattr(CustomerRepository, "get_by_phone", staticmethod(lambda *args, **kwargs: None))

        response = client.post(
            "/api/khach-hang", json={"tenKhachHang": "Người Khác", "soDienThoai": "0912345678"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "Số điện thoại đã tồn tại trong hệ thống"
        assert db.query(Customer).count() == 1


class TestListCustomers:
    def _create(self, client, name, phone, **extra):
        response = client.post("/api/khach-hang", json={"tenKhachHang": name, "soDienThoai": phone, **extra})
        assert response.status_code == 201
        return response.json()["data"]

    def test_newest_first_with_pets(self, client, pet):
        self._create(client, "Khách Mới", "0399999999")

        body = client.get("/api/khach-hang").json()

        assert [item["maKhachHang"] for item in body["data"]] == ["KH002", "KH001"]
        assert body["data"][1]["hoSoThu"][0]["maHoSo"] == "HS001"
        assert body["pagination"]["total"] == 2

    def test_search_by_name_phone_or_street(self, client, customer):
        self._create(client, "Võ Thị Giang", "0388888888", diaChi="99 Trần Hưng Đạo")

        def codes(term):
            data = client.get("/api/khach-hang", params={"search": term}).json()["data"]
            return [c["maKhachHang"] for c in data]

        assert codes("Giang") == ["KH002"]
        assert codes("091234") == ["KH001"]
        assert codes("Lê Lợi") == ["KH001"]

    def test_filter_by_address(self, client, customer):
        self._create(client, "Không Có Xã", "0377777777")

        data = client.get("/api/khach-hang", params={"maXa": "XA001"}).json()["data"]

        assert [c["maKhachHang"] for c in data] == ["KH001"]


class TestReadCustomer:
    def test_get(self, client, customer):
        data = client.get("/api/khach-hang/KH001").json()["data"]
        assert data["tenKhachHang"] == "Nguyễn Văn An"
        assert data["xa"]["tenXa"] == "Phường 1"

    def test_get_missing_is_404(self, client):
        response = client.get("/api/khach-hang/KH999")
        assert response.status_code == 404
        assert response.json()["error"] == "Không tìm thấy khách hàng"


class TestUpdateCustomer:
    def test_put_is_full_replace(self, client, customer):
        response = client.put(
            "/api/khach-hang/KH001", json={"tenKhachHang": "Nguyễn Văn Ân", "soDienThoai": "0912345678"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["tenKhachHang"] == "Nguyễn Văn Ân"
        assert data["diaChi"] is None
        assert data["maXa"] is None

    def test_phone_taken_by_another_customer_is_409(self, client, customer):
        client.post("/api/khach-hang", json={"tenKhachHang": "Khách Hai", "soDienThoai": "0366666666"})

        response = client.put(
            "/api/khach-hang/KH002", json={"tenKhachHang": "Khách Hai", "soDienThoai": "0912345678"}
        )

        assert response.status_code == 409

    def test_phone_clash_at_commit_on_update_is_409(self, client, customer, monkeypatch):
        client.post("/api/khach-hang", json={"tenKhachHang": "Khách Hai", "soDienThoai": "0366666666"})
        monkeypatch.setattr(CustomerRepository, "get_by_phone", staticmethod(lambda *args, **kwargs: None))

        response = client.put(
            "/api/khach-hang/KH002", json={"tenKhachHang": "Khách Hai", "soDienThoai": "0912345678"}
        )

        assert response.status_code == 409
        assert client.get("/api/khach-hang/KH002").json()["data"]["soDienThoai"] == "0366666666"

    def test_update_missing_is_404(self, client):
        response = client.put("/api/khach-hang/KH999", json={"tenKhachHang": "Ai Đó", "soDienThoai": "0912345678"})
        assert response.status_code == 404


class TestDeleteCustomer:
    def test_delete_without_pets(self, client, customer):
        response = client.delete("/api/khach-hang/KH001")

        assert response.status_code == 200
        assert client.get("/api/khach-hang/KH001").status_code == 404

    def test_delete_with_pets_is_refused(self, client, pet):
        response = client.delete("/api/khach-hang/KH001")

        assert response.status_code == 400
        assert "hồ sơ thú cưng" in response.json()["error"]
        assert client.get("/api/khach-hang/KH001").status_code == 200
