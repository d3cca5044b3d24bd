"""
Pytest configuration for the entire test suite.

Points the application at a throwaway SQLite file before the package is
imported, recreates the schema for every test and disables Redis unless a
test swaps in fakeredis.
"""
import os
import tempfile
from datetime import datetime
from pathlib import Path

_TEST_DIR = tempfile.mkdtemp(prefix="vetclinic-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TEST_DIR) / 'test.db'}"
os.environ["APP_ENV"] = "test"
os.environ["REDIS_URL"] = ""
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin-password"
os.environ["ADMIN_NAME"] = "Quản trị viên"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from vetclinic.cache import cache  # noqa: E402
from vetclinic.database import Base, get_engine, new_session  # noqa: E402
from vetclinic.main import app  # noqa: E402
from vetclinic.models import Address, Customer, Pet, Schedule  # noqa: E402

ADMIN_CREDENTIALS = {"username": "admin", "password": "admin-password"}


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh schema and a disabled, zeroed cache for every test"""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    cache.redis_client = None
    cache.reset_stats()
    yield
    cache.redis_client = None


@pytest.fixture
def db(reset_database):
    session = new_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(reset_database):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client):
    """Client carrying the session cookie of the seeded administrator"""
    response = client.post("/api/auth/callback/credentials", json=ADMIN_CREDENTIALS)
    assert response.status_code == 200
    return client


@pytest.fixture
def address(db):
    record = Address(ma_xa="XA001", ten_xa="Phường 1")
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def customer(db, address):
    record = Customer(
        ma_khach_hang="KH001",
        ten_khach_hang="Nguyễn Văn An",
        so_dien_thoai="0912345678",
        dia_chi="12 Lê Lợi",
        ma_xa=address.ma_xa,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def pet(db, customer):
    record = Pet(
        ma_ho_so="HS001",
        ten_thu="Mực",
        loai="CHO",
        trang_thai="KHOE_MANH",
        ma_khach_hang=customer.ma_khach_hang,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def schedule(db, pet):
    record = Schedule(
        ma_ho_so=pet.ma_ho_so,
        ngay_kham=datetime(2025, 6, 20, 9, 0),
        so_ngay=7,
        ngay_tai_kham=datetime(2025, 6, 27, 9, 0),
        trang_thai_kham="DA_KHAM",
        ghi_chu="Tiêm phòng dại",
    )
    db.add(record)
    pet.ngay_kham_gan_nhat = record.ngay_kham
    pet.ngay_tai_kham = record.ngay_tai_kham
    db.commit()
    db.refresh(record)
    return record
