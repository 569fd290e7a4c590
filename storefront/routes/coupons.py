from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.user import User
from storefront.schemas.coupon_schemas import (
    CouponCreate,
    CouponRead,
    CouponUpdate,
    CouponValidateRequest,
    CouponValidation,
)
from storefront.services import coupon_service

router = APIRouter()


@router.post("/validate", response_model=CouponValidation)
def validate_coupon(payload: CouponValidateRequest, session: Session = Depends(get_session)):
    return coupon_service.validate_coupon(session, payload.code, payload.order_amount)


# -------- ADMIN --------

@router.post("/", response_model=CouponRead, status_code=status.HTTP_201_CREATED)
def create_coupon(
    payload: CouponCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return coupon_service.create_coupon(session, payload)


@router.get("/", response_model=List[CouponRead])
def list_coupons(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return coupon_service.list_coupons(session)


@router.get("/code/{code}", response_model=CouponRead)
def get_coupon(
    code: str,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return coupon_service.require_coupon(session, code)


@router.patch("/{coupon_id}", response_model=CouponRead)
def update_coupon(
    coupon_id: int,
    payload: CouponUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return coupon_service.update_coupon(session, coupon_id, payload)


@router.delete("/{coupon_id}")
def delete_coupon(
    coupon_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    if not coupon_service.delete_coupon(session, coupon_id):
        raise HTTPException(404, "Coupon not found")
    return {"message": "Coupon deactivated"}
