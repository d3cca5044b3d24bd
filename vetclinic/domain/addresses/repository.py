"""Address repository - Database operations for addresses"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session

from ...models import Address, Customer
from ...shared.codes import ADDRESS_PREFIX, insert_with_code
from ...shared.pagination import build_search_filter


def _customer_count_column():
    return (
        select(func.count(Customer.ma_khach_hang))
        .where(Customer.ma_xa == Address.ma_xa)
        .correlate(Address)
        .scalar_subquery()
        .label("customer_count")
    )


class AddressRepository:
    """Repository for address database operations"""

    @staticmethod
    def search_query(db: Session, search: str = "") -> Query:
        """Addresses with their customer count, filtered by name, ordered by name"""
        query = db.query(Address, _customer_count_column())

        condition = build_search_filter(search, Address.ten_xa)
        if condition is not None:
            query = query.filter(condition)

        return query.order_by(Address.ten_xa.asc(), Address.ma_xa.asc())

    @staticmethod
    def get_address(db: Session, ma_xa: str) -> Optional[Address]:
        return db.query(Address).filter(Address.ma_xa == ma_xa).first()

    @staticmethod
    def count_customers(db: Session, ma_xa: str) -> int:
        return db.query(func.count(Customer.ma_khach_hang)).filter(Customer.ma_xa == ma_xa).scalar()

    @staticmethod
    def create_address(db: Session, ten_xa: str) -> Address:
        def build(code: str) -> Address:
            address = Address(ma_xa=code, ten_xa=ten_xa)
            db.add(address)
            return address

        return insert_with_code(db, Address.ma_xa, ADDRESS_PREFIX, build)

    @staticmethod
    def update_address(db: Session, address: Address, ten_xa: str) -> Address:
        address.ten_xa = ten_xa
        db.commit()
        db.refresh(address)
        return address

    @staticmethod
    def delete_address(db: Session, address: Address) -> None:
        db.delete(address)
        db.commit()

    @staticmethod
    def list_all(db: Session) -> list[Address]:
        """Every address, for select inputs"""
        return db.query(Address).order_by(Address.ten_xa.asc()).all()
