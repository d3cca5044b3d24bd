"""Server-rendered admin pages"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ..auth import require_page_user
from ..cache import get_cache_stats
from ..database import get_db
from ..domain.addresses.service import AddressService
from ..domain.customers.service import CustomerService
from ..domain.pets.service import PetService
from ..domain.schedules.service import ScheduleService
from ..models import Address, Customer, Pet, Schedule, User
from ..shared.pagination import PageParams
from ..shared.status_manager import HEALTH_STATUS_CONFIGS
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Pages"])

UPCOMING_FOLLOW_UPS = 5


def _render(request: Request, name: str, user: User, **context):
    return templates.TemplateResponse(request, name, {"user": user, **context})


def _page_params(search, page, limit) -> PageParams:
    return PageParams.from_query(search, page, limit)


@router.get("")
async def dashboard(
    request: Request,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    """Record counts, pets per health status and the next follow-up visits"""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    status_counts = dict(db.query(Pet.trang_thai, func.count(Pet.ma_ho_so)).group_by(Pet.trang_thai).all())
    upcoming = (
        db.query(Schedule)
        .options(selectinload(Schedule.pet).selectinload(Pet.owner))
        .filter(Schedule.ngay_tai_kham.isnot(None), Schedule.ngay_tai_kham >= now)
        .order_by(Schedule.ngay_tai_kham.asc())
        .limit(UPCOMING_FOLLOW_UPS)
        .all()
    )
    return _render(
        request,
        "admin/dashboard.html",
        user,
        counts={
            "xa": db.query(Address).count(),
            "khachHang": db.query(Customer).count(),
            "hoSoThu": db.query(Pet).count(),
            "lichKham": db.query(Schedule).count(),
        },
        health_stats={code: status_counts.get(code, 0) for code in HEALTH_STATUS_CONFIGS},
        upcoming=upcoming,
    )


@router.get("/")
async def dashboard_slash():
    return RedirectResponse("/admin", status_code=307)


# Addresses


@router.get("/xa")
async def address_list(
    request: Request,
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    params = _page_params(search, page, limit)
    result = await AddressService(db).list_addresses(params)
    return _render(request, "admin/xa/list.html", user, params=params, **result)


@router.get("/xa/them-moi")
async def address_new(request: Request, user: User = Depends(require_page_user)):
    return _render(request, "admin/xa/form.html", user, address=None)


@router.get("/xa/{ma_xa}")
async def address_detail(
    request: Request,
    ma_xa: str,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    address = AddressService(db).get_address_response(ma_xa)
    return _render(request, "admin/xa/form.html", user, address=address.model_dump(mode="json"))


# Customers


@router.get("/khach-hang")
async def customer_list(
    request: Request,
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    maXa: Optional[str] = Query(None),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    params = _page_params(search, page, limit)
    result = await CustomerService(db).list_customers(params, maXa or None)
    return _render(
        request,
        "admin/khach-hang/list.html",
        user,
        params=params,
        ma_xa=maXa or "",
        addresses=AddressService(db).list_all(),
        **result,
    )


@router.get("/khach-hang/them-moi")
async def customer_new(
    request: Request,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    return _render(
        request, "admin/khach-hang/form.html", user, customer=None, addresses=AddressService(db).list_all()
    )


@router.get("/khach-hang/{ma_khach_hang}")
async def customer_detail(
    request: Request,
    ma_khach_hang: str,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    customer = CustomerService(db).get_customer_response(ma_khach_hang)
    return _render(
        request,
        "admin/khach-hang/form.html",
        user,
        customer=customer.model_dump(mode="json"),
        addresses=AddressService(db).list_all(),
    )


# Pets


@router.get("/ho-so-thu")
async def pet_list(
    request: Request,
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    trangThai: Optional[str] = Query(None),
    loai: Optional[str] = Query(None),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    params = _page_params(search, page, limit)
    result = await PetService(db).list_pets(params, trangThai, loai)
    return _render(
        request,
        "admin/ho-so-thu/list.html",
        user,
        params=params,
        trang_thai=trangThai or "",
        loai=loai or "",
        **result,
    )


@router.get("/ho-so-thu/them-moi")
async def pet_new(
    request: Request,
    maKhachHang: Optional[str] = Query(None),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    return _render(
        request,
        "admin/ho-so-thu/new.html",
        user,
        customers=CustomerService(db).list_all(),
        selected_customer=maKhachHang or "",
    )


@router.get("/ho-so-thu/{ma_ho_so}")
async def pet_detail(
    request: Request,
    ma_ho_so: str,
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    pet = PetService(db).get_pet_response(ma_ho_so)
    return _render(request, "admin/ho-so-thu/detail.html", user, pet=pet.model_dump(mode="json"))


# Schedules


@router.get("/lich-kham")
async def schedule_list(
    request: Request,
    search: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    trangThaiKham: Optional[str] = Query(None),
    user: User = Depends(require_page_user),
    db: Session = Depends(get_db),
):
    params = _page_params(search, page, limit)
    result = await ScheduleService(db).list_schedules(params, trangThaiKham)
    return _render(
        request,
        "admin/lich-kham/list.html",
        user,
        params=params,
        trang_thai_kham=trangThaiKham or "",
        **result,
    )


@router.get("/cache")
async def cache_page(request: Request, user: User = Depends(require_page_user)):
    return _render(request, "admin/cache.html", user, stats=get_cache_stats())
