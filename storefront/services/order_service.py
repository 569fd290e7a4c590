import logging
from decimal import Decimal
from typing import List, Optional

from sqlmodel import Session, select

from storefront.errors import OrderNotFound, ProductNotFound, UserNotFound
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.order_schemas import OrderItemInput
from storefront.services.coupon_service import (
    ZERO,
    evaluate_coupon,
    get_coupon_by_code,
    redeem_coupon,
    to_money,
)

logger = logging.getLogger(__name__)


def calculate_total(session: Session, items: List[OrderItemInput]) -> Decimal:
    """Sum ``price * quantity`` over the submitted lines.

    The price on each line is the unit price the customer saw; it is locked
    into the order as-is. Every product must exist.
    """
    total = ZERO

    for item in items:
        if not session.get(Product, item.product_id):
            raise ProductNotFound(item.product_id)
        total += Decimal(item.price) * item.quantity

    return to_money(total)


def create_order(
    session: Session,
    user_id: int,
    items: List[OrderItemInput],
    coupon_code: Optional[str] = None,
) -> Order:
    """Checkout: persist the order, its items and the coupon use together."""
    try:
        if not session.get(User, user_id):
            raise UserNotFound(user_id)

        total_amount = calculate_total(session, items)
        discount_amount = ZERO
        coupon = None

        if coupon_code:
            coupon = get_coupon_by_code(session, coupon_code)
            check = evaluate_coupon(coupon, coupon_code, total_amount)
            if not check.valid:
                raise check.error
            discount_amount = check.discount

        order = Order(
            user_id=user_id,
            total_amount=total_amount,
            discount_amount=discount_amount,
            final_amount=total_amount - discount_amount,
            coupon_id=coupon.id if coupon else None,
        )
        session.add(order)
        session.flush()

        for item in items:
            session.add(
                OrderItem(
                    order_id=order.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    price=item.price,
                )
            )

        if coupon:
            redeem_coupon(session, coupon)

        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    logger.info(
        f"Order {order.id} created for user {user_id}: "
        f"total={order.total_amount} discount={order.discount_amount} final={order.final_amount}"
    )
    return order


# ---------- READS ----------


def list_orders(session: Session) -> List[Order]:
    return session.exec(select(Order).order_by(Order.created_at.desc())).all()


def get_order(session: Session, order_id: int) -> Order:
    order = session.get(Order, order_id)
    if not order:
        raise OrderNotFound(order_id)
    return order


def list_orders_by_user(session: Session, user_id: int) -> List[Order]:
    if not session.get(User, user_id):
        raise UserNotFound(user_id)

    return session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
    ).all()


def get_order_items(session: Session, order_id: int) -> List[OrderItem]:
    get_order(session, order_id)

    return session.exec(
        select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
    ).all()
