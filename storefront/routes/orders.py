from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from storefront.constants.order_status import UserRole
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.errors import OrderNotFound
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.order_schemas import (
    OrderCreate,
    OrderDetail,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
    PaymentStatusUpdate,
)
from storefront.services import order_lifecycle, order_service
from storefront.utils.token import get_current_user

router = APIRouter()


def _detail(session: Session, order: Order) -> OrderDetail:
    items = order_service.get_order_items(session, order.id)
    return OrderDetail(
        **OrderRead.model_validate(order).model_dump(),
        items=[OrderItemRead.model_validate(i) for i in items],
    )


def _get_visible_order(session: Session, order_id: int, user: User) -> Order:
    order = order_service.get_order(session, order_id)
    # other customers' orders look like missing ones
    if order.user_id != user.id and user.role != UserRole.admin:
        raise OrderNotFound(order_id)
    return order


# -------- CUSTOMER --------

@router.post("/", response_model=OrderDetail, status_code=status.HTTP_201_CREATED)
def place_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = order_service.create_order(
        session,
        user_id=current_user.id,
        items=payload.items,
        coupon_code=payload.coupon_code,
    )
    return _detail(session, order)


@router.get("/me", response_model=List[OrderRead])
def my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return order_service.list_orders_by_user(session, current_user.id)


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    order = _get_visible_order(session, order_id, current_user)
    return _detail(session, order)


@router.get("/{order_id}/items", response_model=List[OrderItemRead])
def get_order_items(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    _get_visible_order(session, order_id, current_user)
    return order_service.get_order_items(session, order_id)


# -------- ADMIN --------

@router.get("/", response_model=List[OrderRead])
def list_orders(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return order_service.list_orders(session)


@router.get("/user/{user_id}", response_model=List[OrderRead])
def list_user_orders(
    user_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return order_service.list_orders_by_user(session, user_id)


@router.patch("/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return order_lifecycle.update_order_status(session, order_id, payload.status)


@router.patch("/{order_id}/payment-status", response_model=OrderRead)
def update_payment_status(
    order_id: int,
    payload: PaymentStatusUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return order_lifecycle.update_payment_status(session, order_id, payload.payment_status)
