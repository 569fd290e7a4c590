"""Status and payment-status transitions for orders.

The two fields move independently; any transition is accepted. Whenever an
update leaves an order completed *and* paid, its digital items are
provisioned as download grants.
"""

import logging
from datetime import datetime

from sqlmodel import Session

from storefront.constants.order_status import OrderStatus, PaymentStatus
from storefront.models.order import Order
from storefront.services.download_service import provision_downloads
from storefront.services.order_service import get_order

logger = logging.getLogger(__name__)


def _provision_if_fulfilled(session: Session, order: Order) -> None:
    if not order.is_fulfilled:
        return

    try:
        provision_downloads(session, order)
    except Exception:
        # the status change is already committed; grants can be re-provisioned later
        session.rollback()
        logger.exception(f"Provisioning downloads for order {order.id} failed")


def update_order_status(session: Session, order_id: int, status: OrderStatus) -> Order:
    order = get_order(session, order_id)
    previous = order.status

    order.status = status
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order_id} status: {previous.value} -> {status.value}")

    _provision_if_fulfilled(session, order)
    session.refresh(order)
    return order


def update_payment_status(session: Session, order_id: int, payment_status: PaymentStatus) -> Order:
    order = get_order(session, order_id)
    previous = order.payment_status

    order.payment_status = payment_status
    order.updated_at = datetime.utcnow()
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info(f"Order {order_id} payment status: {previous.value} -> {payment_status.value}")

    _provision_if_fulfilled(session, order)
    session.refresh(order)
    return order
