import logging
from datetime import datetime
from decimal import Decimal
from typing import List

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from storefront.errors import CartItemNotFound, ProductNotFound, UserNotFound
from storefront.models.cart import CartItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.schemas.cart_schemas import CartItemRead, CartSummary
from storefront.services.coupon_service import ZERO, to_money

logger = logging.getLogger(__name__)


def _bump_quantity(session: Session, user_id: int, product_id: int, quantity: int) -> bool:
    result = session.execute(
        update(CartItem)
        .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        .values(quantity=CartItem.quantity + quantity, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


def _get_line(session: Session, user_id: int, product_id: int) -> CartItem:
    return session.exec(
        select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product_id)
    ).one()


def add_to_cart(session: Session, user_id: int, product_id: int, quantity: int) -> CartItem:
    """Add a product, merging into the existing line for the same product."""
    if not session.get(User, user_id):
        raise UserNotFound(user_id)
    if not session.get(Product, product_id):
        raise ProductNotFound(product_id)

    if not _bump_quantity(session, user_id, product_id, quantity):
        try:
            session.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
            session.commit()
        except IntegrityError:
            # a concurrent add created the line first
            session.rollback()
            _bump_quantity(session, user_id, product_id, quantity)
            session.commit()
    else:
        session.commit()

    item = _get_line(session, user_id, product_id)
    session.refresh(item)
    return item


def get_cart(session: Session, user_id: int) -> List[CartItem]:
    return session.exec(
        select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at)
    ).all()


def _get_owned_item(session: Session, user_id: int, item_id: int) -> CartItem:
    item = session.get(CartItem, item_id)
    if not item or item.user_id != user_id:
        raise CartItemNotFound(item_id)
    return item


def update_cart_item(session: Session, user_id: int, item_id: int, quantity: int) -> CartItem:
    item = _get_owned_item(session, user_id, item_id)

    item.quantity = quantity
    item.updated_at = datetime.utcnow()
    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def remove_from_cart(session: Session, user_id: int, item_id: int) -> bool:
    item = session.get(CartItem, item_id)
    if not item or item.user_id != user_id:
        return False

    session.delete(item)
    session.commit()
    return True


def clear_cart(session: Session, user_id: int) -> int:
    items = get_cart(session, user_id)

    for item in items:
        session.delete(item)

    session.commit()
    return len(items)


def get_cart_summary(session: Session, user_id: int) -> CartSummary:
    rows = session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.created_at)
    ).all()

    total = ZERO
    item_count = 0
    items = []

    for cart_item, product in rows:
        total += Decimal(product.price) * cart_item.quantity
        item_count += cart_item.quantity
        items.append(CartItemRead.model_validate(cart_item))

    return CartSummary(items=items, total=to_money(total), item_count=item_count)
