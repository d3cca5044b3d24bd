"""Schedule routers - /api/lich-kham and the per-pet /api/ho-so-thu/{maHoSo}/lich-theo-doi"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...shared.pagination import PageParams
from ...shared.responses import created, success
from ...shared.validators import parse_schedule_id
from .schemas import ScheduleCreate, ScheduleWrite
from .service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/lich-kham", tags=["Schedules"])
pet_schedules_router = APIRouter(prefix="/api/ho-so-thu", tags=["Schedules"])


def get_schedule_service(db: Session = Depends(get_db)) -> ScheduleService:
    """Dependency injection for ScheduleService"""
    return ScheduleService(db)


@router.get("")
async def list_schedules(
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    trangThaiKham: Optional[str] = Query(None),
    maHoSo: Optional[str] = Query(None),
    service: ScheduleService = Depends(get_schedule_service),
):
    """List schedules, most recent exam first"""
    result = await service.list_schedules(
        PageParams.from_query(search, page, limit), trangThaiKham, maHoSo or None
    )
    return success(result["items"], pagination=result["pagination"])


@router.post("")
async def create_schedule(
    data: ScheduleCreate,
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = service.create_from_body(data)
    return created(schedule, "Tạo lịch khám thành công")


# Ids are taken as strings so that a non-numeric id is a 400, not a 422
@router.get("/{schedule_id}")
async def get_schedule(
    schedule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    return success(service.get_schedule_response(parse_schedule_id(schedule_id)))


@router.put("/{schedule_id}")
async def update_schedule(
    schedule_id: str,
    data: ScheduleWrite,
    service: ScheduleService = Depends(get_schedule_service),
):
    """Replace a schedule; the follow-up date must still be after the exam date"""
    schedule = service.update_schedule(parse_schedule_id(schedule_id), data)
    return success(schedule, "Cập nhật lịch khám thành công")


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    service.delete_schedule(parse_schedule_id(schedule_id))
    return success(None, "Xóa lịch khám thành công")


@pet_schedules_router.get("/{ma_ho_so}/lich-theo-doi")
async def list_pet_schedules(
    ma_ho_so: str,
    service: ScheduleService = Depends(get_schedule_service),
):
    return success(service.list_for_pet(ma_ho_so))


@pet_schedules_router.post("/{ma_ho_so}/lich-theo-doi")
async def create_pet_schedule(
    ma_ho_so: str,
    data: ScheduleWrite,
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = service.create_schedule(ma_ho_so, data)
    return created(schedule, "Thêm lịch theo dõi thành công")
