"""Pet repository - Database operations for pet records"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from ...models import Customer, Pet, Schedule
from ...shared.codes import PET_PREFIX, insert_with_code
from ...shared.pagination import build_search_filter
from ..schedules.repository import ScheduleRepository


class PetRepository:
    """Repository for pet database operations"""

    @staticmethod
    def search_query(
        db: Session,
        search: str = "",
        trang_thai: Optional[str] = None,
        loai: Optional[str] = None,
    ) -> Query:
        """Pets filtered by name / record code / owner name / owner phone, newest first"""
        query = (
            db.query(Pet)
            .join(Pet.owner)
            .options(selectinload(Pet.owner), selectinload(Pet.schedules))
        )

        condition = build_search_filter(
            search, Pet.ten_thu, Pet.ma_ho_so, Customer.ten_khach_hang, Customer.so_dien_thoai
        )
        if condition is not None:
            query = query.filter(condition)
        if trang_thai:
            query = query.filter(Pet.trang_thai == trang_thai)
        if loai:
            query = query.filter(Pet.loai == loai)

        return query.order_by(Pet.created_at.desc(), Pet.ma_ho_so.desc())

    @staticmethod
    def count_by_status(db: Session) -> dict[str, int]:
        rows = db.query(Pet.trang_thai, func.count(Pet.ma_ho_so)).group_by(Pet.trang_thai).all()
        return {status: count for status, count in rows}

    @staticmethod
    def get_pet(db: Session, ma_ho_so: str) -> Optional[Pet]:
        return db.query(Pet).filter(Pet.ma_ho_so == ma_ho_so).first()

    @staticmethod
    def get_owner(db: Session, ma_khach_hang: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.ma_khach_hang == ma_khach_hang).first()

    @staticmethod
    def count_schedules(db: Session, ma_ho_so: str) -> int:
        return db.query(Schedule).filter(Schedule.ma_ho_so == ma_ho_so).count()

    @staticmethod
    def create_pet(db: Session, schedule_fields: Optional[dict] = None, **pet_data) -> Pet:
        """Insert a pet and, when given, its first schedule in the same commit"""
        def build(code: str) -> Pet:
            pet = Pet(ma_ho_so=code, **pet_data)
            db.add(pet)
            if schedule_fields:
                db.flush()
                ScheduleRepository.add_schedule(db, pet.ma_ho_so, **schedule_fields)
                ScheduleRepository.refresh_pet_dates(db, pet)
            return pet

        return insert_with_code(db, Pet.ma_ho_so, PET_PREFIX, build)

    @staticmethod
    def replace_pet(db: Session, pet: Pet, **fields) -> Pet:
        for key, value in fields.items():
            setattr(pet, key, value)
        db.commit()
        db.refresh(pet)
        return pet

    @staticmethod
    def delete_pet(db: Session, pet: Pet) -> None:
        db.delete(pet)
        db.commit()

    @staticmethod
    def count(db: Session) -> int:
        return db.query(Pet).count()
