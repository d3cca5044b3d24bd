"""Customer repository - Database operations for customers"""

from typing import Optional

from sqlalchemy.orm import Query, Session, selectinload

from ...models import Address, Customer
from ...shared.codes import CUSTOMER_PREFIX, insert_with_code
from ...shared.pagination import build_search_filter


class CustomerRepository:
    """Repository for customer database operations"""

    @staticmethod
    def search_query(db: Session, search: str = "", ma_xa: Optional[str] = None) -> Query:
        """Customers filtered by name / phone / street address and optionally by address code"""
        query = db.query(Customer).options(
            selectinload(Customer.pets), selectinload(Customer.address)
        )

        condition = build_search_filter(
            search, Customer.ten_khach_hang, Customer.so_dien_thoai, Customer.dia_chi
        )
        if condition is not None:
            query = query.filter(condition)

        if ma_xa:
            query = query.filter(Customer.ma_xa == ma_xa)

        return query.order_by(Customer.created_at.desc(), Customer.ma_khach_hang.desc())

    @staticmethod
    def get_customer(db: Session, ma_khach_hang: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.ma_khach_hang == ma_khach_hang).first()

    @staticmethod
    def get_by_phone(db: Session, so_dien_thoai: str, exclude: Optional[str] = None) -> Optional[Customer]:
        query = db.query(Customer).filter(Customer.so_dien_thoai == so_dien_thoai)
        if exclude:
            query = query.filter(Customer.ma_khach_hang != exclude)
        return query.first()

    @staticmethod
    def address_exists(db: Session, ma_xa: str) -> bool:
        return db.query(Address.ma_xa).filter(Address.ma_xa == ma_xa).first() is not None

    @staticmethod
    def create_customer(db: Session, **customer_data) -> Customer:
        def build(code: str) -> Customer:
            customer = Customer(ma_khach_hang=code, **customer_data)
            db.add(customer)
            return customer

        return insert_with_code(db, Customer.ma_khach_hang, CUSTOMER_PREFIX, build)

    @staticmethod
    def replace_customer(db: Session, customer: Customer, **fields) -> Customer:
        """Overwrite every editable field, including clearing optional ones"""
        for key, value in fields.items():
            setattr(customer, key, value)
        db.commit()
        db.refresh(customer)
        return customer

    @staticmethod
    def delete_customer(db: Session, customer: Customer) -> None:
        db.delete(customer)
        db.commit()

    @staticmethod
    def list_all(db: Session) -> list[Customer]:
        return db.query(Customer).order_by(Customer.ten_khach_hang.asc()).all()

    @staticmethod
    def count(db: Session) -> int:
        return db.query(Customer).count()
