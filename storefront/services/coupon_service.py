"""Coupon evaluation and coupon administration.

``evaluate_coupon`` is pure: it looks only at the coupon row, the order amount
and the clock. Checkout and the public ``validate`` endpoint both go through
it, so the rules live in one place. Redemption (``redeem_coupon``) is the only
writer of ``current_uses`` and does so with a single conditional UPDATE.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy import or_, update
from sqlmodel import Session, select

from storefront.errors import (
    CouponExpired,
    CouponInactive,
    CouponMinimumNotMet,
    CouponNotFound,
    CouponUsageLimitExceeded,
    DuplicateValue,
    InvalidCouponDefinition,
    StorefrontError,
)
from storefront.models.coupon import Coupon
from storefront.schemas.coupon_schemas import CouponCreate, CouponRead, CouponUpdate, CouponValidation
from storefront.utils.patch import apply_patch

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class CouponCheck:
    valid: bool
    discount: Decimal
    error: Optional[StorefrontError] = None


def evaluate_coupon(
    coupon: Optional[Coupon],
    code: str,
    order_amount: Decimal,
    now: Optional[datetime] = None,
) -> CouponCheck:
    """Apply the coupon rules in order; the first failing rule wins."""
    now = now or datetime.utcnow()
    order_amount = Decimal(order_amount)

    if coupon is None:
        return CouponCheck(False, ZERO, CouponNotFound(code))

    if not coupon.is_active:
        return CouponCheck(False, ZERO, CouponInactive(code))

    if coupon.expires_at is not None and coupon.expires_at < now:
        return CouponCheck(False, ZERO, CouponExpired(code))

    if coupon.max_uses is not None and coupon.current_uses >= coupon.max_uses:
        return CouponCheck(False, ZERO, CouponUsageLimitExceeded(code))

    if coupon.min_order_amount is not None and order_amount < coupon.min_order_amount:
        return CouponCheck(False, ZERO, CouponMinimumNotMet(code, coupon.min_order_amount))

    if coupon.discount_percentage is not None:
        discount = to_money(order_amount * Decimal(coupon.discount_percentage) / 100)
    elif coupon.discount_amount is not None:
        discount = to_money(coupon.discount_amount)
    else:
        discount = ZERO

    # a coupon never pushes the final amount below zero
    discount = min(discount, order_amount)

    return CouponCheck(True, discount)


def get_coupon_by_code(session: Session, code: str) -> Optional[Coupon]:
    return session.exec(select(Coupon).where(Coupon.code == code)).first()


def validate_coupon(session: Session, code: str, order_amount: Decimal) -> CouponValidation:
    coupon = get_coupon_by_code(session, code)
    check = evaluate_coupon(coupon, code, order_amount)

    if not check.valid:
        logger.info(f"Coupon {code} rejected: {check.error}")
        return CouponValidation(valid=False, discount=ZERO)

    return CouponValidation(
        valid=True,
        discount=check.discount,
        coupon=CouponRead.model_validate(coupon),
    )


def redeem_coupon(session: Session, coupon: Coupon) -> None:
    """Atomically take one use of ``coupon`` inside the caller's transaction.

    The cap is re-checked by the database, so two concurrent checkouts cannot
    both take the last use.
    """
    result = session.execute(
        update(Coupon)
        .where(Coupon.id == coupon.id)
        .where(or_(Coupon.max_uses.is_(None), Coupon.current_uses < Coupon.max_uses))
        .values(current_uses=Coupon.current_uses + 1, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        raise CouponUsageLimitExceeded(coupon.code)

    session.refresh(coupon)


# ---------- ADMIN ----------


def _check_discount_modes(percentage, amount) -> None:
    if percentage is None and amount is None:
        raise InvalidCouponDefinition("either discount_percentage or discount_amount is required")
    if percentage is not None and amount is not None:
        raise InvalidCouponDefinition("discount_percentage and discount_amount are mutually exclusive")


def _check_usage_cap(max_uses, current_uses) -> None:
    if max_uses is not None and current_uses > max_uses:
        raise InvalidCouponDefinition(f"max_uses cannot be below current_uses ({current_uses})")


def create_coupon(session: Session, data: CouponCreate) -> Coupon:
    _check_discount_modes(data.discount_percentage, data.discount_amount)

    if get_coupon_by_code(session, data.code):
        raise DuplicateValue("Coupon code", data.code)

    coupon = Coupon(**data.model_dump())

    session.add(coupon)
    session.commit()
    session.refresh(coupon)

    logger.info(f"Coupon {coupon.code} created")
    return coupon


def list_coupons(session: Session) -> List[Coupon]:
    return session.exec(select(Coupon).order_by(Coupon.created_at.desc())).all()


def require_coupon(session: Session, code: str) -> Coupon:
    coupon = get_coupon_by_code(session, code)
    if not coupon:
        raise CouponNotFound(code)
    return coupon


def update_coupon(session: Session, coupon_id: int, data: CouponUpdate) -> Coupon:
    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        raise CouponNotFound(str(coupon_id))

    if data.code is not None and data.code != coupon.code:
        if get_coupon_by_code(session, data.code):
            raise DuplicateValue("Coupon code", data.code)

    apply_patch(coupon, data)

    # the merged row must still carry exactly one discount mode and a reachable cap
    try:
        _check_discount_modes(coupon.discount_percentage, coupon.discount_amount)
        _check_usage_cap(coupon.max_uses, coupon.current_uses)
    except InvalidCouponDefinition:
        session.rollback()
        raise

    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


def delete_coupon(session: Session, coupon_id: int) -> bool:
    """Soft delete: orders keep referencing the row."""
    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        return False

    coupon.is_active = False
    coupon.updated_at = datetime.utcnow()
    session.add(coupon)
    session.commit()
    return True
