"""Schedule repository - Database operations for schedules"""

from typing import Optional

from sqlalchemy.orm import Query, Session, selectinload

from ...models import Customer, Pet, Schedule
from ...shared.pagination import build_search_filter


class ScheduleRepository:
    """Repository for schedule database operations"""

    @staticmethod
    def search_query(
        db: Session,
        search: str = "",
        trang_thai_kham: Optional[str] = None,
        ma_ho_so: Optional[str] = None,
    ) -> Query:
        """Schedules filtered by pet name / owner name / note, newest exam first"""
        query = (
            db.query(Schedule)
            .join(Schedule.pet)
            .join(Pet.owner)
            .options(selectinload(Schedule.pet).selectinload(Pet.owner))
        )

        condition = build_search_filter(search, Pet.ten_thu, Customer.ten_khach_hang, Schedule.ghi_chu)
        if condition is not None:
            query = query.filter(condition)
        if trang_thai_kham:
            query = query.filter(Schedule.trang_thai_kham == trang_thai_kham)
        if ma_ho_so:
            query = query.filter(Schedule.ma_ho_so == ma_ho_so)

        return query.order_by(Schedule.ngay_kham.desc(), Schedule.id.desc())

    @staticmethod
    def get_schedule(db: Session, schedule_id: int) -> Optional[Schedule]:
        return db.query(Schedule).filter(Schedule.id == schedule_id).first()

    @staticmethod
    def get_pet(db: Session, ma_ho_so: str) -> Optional[Pet]:
        return db.query(Pet).filter(Pet.ma_ho_so == ma_ho_so).first()

    @staticmethod
    def list_for_pet(db: Session, ma_ho_so: str) -> list[Schedule]:
        return (
            db.query(Schedule)
            .filter(Schedule.ma_ho_so == ma_ho_so)
            .order_by(Schedule.ngay_kham.desc(), Schedule.id.desc())
            .all()
        )

    @staticmethod
    def refresh_pet_dates(db: Session, pet: Pet) -> None:
        """Copy the latest schedule's exam and follow-up dates onto the pet (no commit)"""
        db.flush()
        latest = (
            db.query(Schedule)
            .filter(Schedule.ma_ho_so == pet.ma_ho_so)
            .order_by(Schedule.ngay_kham.desc(), Schedule.id.desc())
            .first()
        )
        pet.ngay_kham_gan_nhat = latest.ngay_kham if latest else None
        pet.ngay_tai_kham = latest.ngay_tai_kham if latest else None

    @staticmethod
    def add_schedule(db: Session, ma_ho_so: str, **fields) -> Schedule:
        """Stage a new schedule for ``ma_ho_so`` (no commit)"""
        schedule = Schedule(ma_ho_so=ma_ho_so, **fields)
        db.add(schedule)
        return schedule

    @staticmethod
    def create_schedule(db: Session, pet: Pet, **fields) -> Schedule:
        schedule = ScheduleRepository.add_schedule(db, pet.ma_ho_so, **fields)
        ScheduleRepository.refresh_pet_dates(db, pet)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def replace_schedule(db: Session, schedule: Schedule, **fields) -> Schedule:
        for key, value in fields.items():
            setattr(schedule, key, value)
        ScheduleRepository.refresh_pet_dates(db, schedule.pet)
        db.commit()
        db.refresh(schedule)
        return schedule

    @staticmethod
    def delete_schedule(db: Session, schedule: Schedule) -> None:
        pet = schedule.pet
        db.delete(schedule)
        ScheduleRepository.refresh_pet_dates(db, pet)
        db.commit()
