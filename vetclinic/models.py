from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Address(Base):
    """Xã - administrative address unit referenced by customers"""

    __tablename__ = "addresses"

    ma_xa = Column(String(20), primary_key=True, index=True)
    ten_xa = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    customers = relationship("Customer", back_populates="address")


class Customer(Base):
    """Khách hàng - clinic client owning pets"""

    __tablename__ = "customers"

    ma_khach_hang = Column(String(20), primary_key=True, index=True)
    ten_khach_hang = Column(String(100), nullable=False, index=True)
    so_dien_thoai = Column(String(20), unique=True, nullable=False, index=True)
    dia_chi = Column(String(200), nullable=True)
    ma_xa = Column(String(20), ForeignKey("addresses.ma_xa"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())

    address = relationship("Address", back_populates="customers")
    pets = relationship("Pet", back_populates="owner", order_by="Pet.ma_ho_so")


class Pet(Base):
    """Hồ sơ thú - pet record"""

    __tablename__ = "pets"

    ma_ho_so = Column(String(20), primary_key=True, index=True)
    ten_thu = Column(String(100), nullable=False, index=True)
    loai = Column(String(20), nullable=False, default="KHAC")  # CHO, MEO, CHIM, CA, THO, HAMSTER, KHAC
    trang_thai = Column(String(20), nullable=False, default="KHOE_MANH")  # health status code
    ma_khach_hang = Column(
        String(20), ForeignKey("customers.ma_khach_hang"), nullable=False, index=True
    )
    # Derived from the most recent schedule
    ngay_kham_gan_nhat = Column(DateTime, nullable=True)
    ngay_tai_kham = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    owner = relationship("Customer", back_populates="pets")
    schedules = relationship(
        "Schedule",
        back_populates="pet",
        order_by=lambda: [Schedule.ngay_kham.desc(), Schedule.id.desc()],
    )


class Schedule(Base):
    """Lịch theo dõi - examination / follow-up record for a pet"""

    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    ma_ho_so = Column(String(20), ForeignKey("pets.ma_ho_so"), nullable=False, index=True)
    ngay_kham = Column(DateTime, nullable=False, index=True)
    so_ngay = Column(Integer, nullable=False, default=0)
    ngay_tai_kham = Column(DateTime, nullable=True, index=True)
    trang_thai_kham = Column(String(20), nullable=False, default="CHUA_KHAM")  # exam status code
    ghi_chu = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    pet = relationship("Pet", back_populates="schedules")
