"""Download grants for digital products and the short-lived tokens that redeem them.

A grant is the durable right to download a product bought in an order. A
token is a signed JWT (``typ=download``) that points at one grant for a few
minutes; it is what the browser actually follows. A token that fails
validation once is written to ``revoked_download_tokens`` and never accepted
again, even if the grant later becomes valid.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy import update
from sqlmodel import Session, select

from storefront.config import settings
from storefront.errors import (
    DownloadAccessDenied,
    DownloadLimitExceeded,
    DownloadNotFound,
    DownloadTokenInvalid,
    DuplicateValue,
    OrderNotFound,
    ProductNotFound,
    UserNotFound,
)
from storefront.models.download import DownloadGrant, RevokedDownloadToken
from storefront.models.order import Order
from storefront.models.product import Product
from storefront.models.user import User
from storefront.utils.token import create_access_token, decode_access_token

logger = logging.getLogger(__name__)

DOWNLOAD_TOKEN_TYPE = "download"


@dataclass
class GrantCheck:
    valid: bool
    grant: Optional[DownloadGrant] = None
    product: Optional[Product] = None


@dataclass
class TokenCheck:
    valid: bool
    grant_id: Optional[int] = None
    user_id: Optional[int] = None


# ---------- GRANTS ----------


def create_grant(session: Session, user_id: int, product_id: int, order_id: int) -> DownloadGrant:
    if not session.get(Product, product_id):
        raise ProductNotFound(product_id)

    order = session.get(Order, order_id)
    if not order or order.user_id != user_id:
        raise OrderNotFound(order_id)

    existing = _find_grant(session, user_id, product_id, order_id)
    if existing:
        raise DuplicateValue("Download for order", order_id)

    grant = DownloadGrant(
        user_id=user_id,
        product_id=product_id,
        order_id=order_id,
        download_count=0,
        expires_at=datetime.utcnow() + timedelta(days=settings.download_grant_days),
    )

    session.add(grant)
    session.commit()
    session.refresh(grant)

    logger.info(f"Download grant {grant.id} created for user {user_id}, product {product_id}")
    return grant


def _find_grant(session: Session, user_id: int, product_id: int, order_id: int) -> Optional[DownloadGrant]:
    return session.exec(
        select(DownloadGrant).where(
            DownloadGrant.user_id == user_id,
            DownloadGrant.product_id == product_id,
            DownloadGrant.order_id == order_id,
        )
    ).first()


def provision_downloads(session: Session, order: Order) -> List[DownloadGrant]:
    """Create one grant per digital line item of a fulfilled order.

    Lines that already have a grant are skipped, so calling this again for the
    same order creates nothing new. Commits when something was added.
    """
    created = []

    for item in order.items:
        product = session.get(Product, item.product_id)
        if product is None or not product.is_digital:
            continue

        if _find_grant(session, order.user_id, product.id, order.id):
            continue

        # limited products get a validity window; unlimited ones never expire
        expires_at = None
        if product.download_limit:
            expires_at = datetime.utcnow() + timedelta(days=settings.download_grant_days)

        grant = DownloadGrant(
            user_id=order.user_id,
            product_id=product.id,
            order_id=order.id,
            download_count=0,
            expires_at=expires_at,
        )
        session.add(grant)
        created.append(grant)

    if created:
        session.commit()
        logger.info(f"Provisioned {len(created)} download(s) for order {order.id}")

    return created


def validate_grant(session: Session, grant_id: int, user_id: int) -> GrantCheck:
    grant = session.get(DownloadGrant, grant_id)
    if not grant or grant.user_id != user_id:
        return GrantCheck(False)

    if grant.expires_at is not None and grant.expires_at < datetime.utcnow():
        return GrantCheck(False)

    product = session.get(Product, grant.product_id)
    if product is None:
        return GrantCheck(False)

    if product.download_limit is not None and grant.download_count >= product.download_limit:
        return GrantCheck(False)

    return GrantCheck(True, grant, product)


def increment_download_count(session: Session, grant_id: int) -> DownloadGrant:
    grant = session.get(DownloadGrant, grant_id)
    if not grant:
        raise DownloadNotFound(grant_id)

    product = session.get(Product, grant.product_id)

    stmt = update(DownloadGrant).where(DownloadGrant.id == grant_id)
    if product is not None and product.download_limit is not None:
        stmt = stmt.where(DownloadGrant.download_count < product.download_limit)

    result = session.execute(
        stmt.values(download_count=DownloadGrant.download_count + 1)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 0:
        session.rollback()
        raise DownloadLimitExceeded(grant_id)

    session.commit()
    session.refresh(grant)
    return grant


def list_grants_by_user(session: Session, user_id: int) -> List[DownloadGrant]:
    if not session.get(User, user_id):
        raise UserNotFound(user_id)

    return session.exec(
        select(DownloadGrant)
        .where(DownloadGrant.user_id == user_id)
        .order_by(DownloadGrant.created_at.desc())
    ).all()


def get_grant(session: Session, grant_id: int) -> DownloadGrant:
    grant = session.get(DownloadGrant, grant_id)
    if not grant:
        raise DownloadNotFound(grant_id)
    return grant


# ---------- TOKENS ----------


def generate_token(session: Session, grant_id: int, user_id: int) -> Tuple[str, int]:
    """Mint a download token; returns ``(token, expires_in_seconds)``."""
    check = validate_grant(session, grant_id, user_id)
    if not check.valid:
        raise DownloadAccessDenied(grant_id)

    ttl = timedelta(minutes=settings.download_token_expire_minutes)
    token = create_access_token(
        {
            "typ": DOWNLOAD_TOKEN_TYPE,
            "grant_id": grant_id,
            "user_id": user_id,
            "jti": secrets.token_urlsafe(32),
        },
        expires_delta=ttl,
    )
    return token, int(ttl.total_seconds())


def _revoke(session: Session, jti: Optional[str]) -> None:
    if not jti or session.get(RevokedDownloadToken, jti):
        return
    session.add(RevokedDownloadToken(jti=jti))
    session.commit()


def validate_token(session: Session, token: str) -> TokenCheck:
    # expiry is checked by hand so an expired token still yields its jti
    payload = decode_access_token(token, verify_exp=False)
    if not payload or payload.get("typ") != DOWNLOAD_TOKEN_TYPE:
        return TokenCheck(False)

    jti = payload.get("jti")
    grant_id = payload.get("grant_id")
    user_id = payload.get("user_id")

    if not jti or grant_id is None or user_id is None:
        return TokenCheck(False)

    if session.get(RevokedDownloadToken, jti):
        return TokenCheck(False)

    exp = payload.get("exp")
    if exp is None or exp < time.time():
        _revoke(session, jti)
        return TokenCheck(False)

    if not validate_grant(session, grant_id, user_id).valid:
        _revoke(session, jti)
        return TokenCheck(False)

    return TokenCheck(True, grant_id, user_id)


def consume_token(session: Session, token: str) -> Tuple[DownloadGrant, Product]:
    """Redeem a token: count one download and return the grant with its product."""
    check = validate_token(session, token)
    if not check.valid:
        raise DownloadTokenInvalid()

    grant = increment_download_count(session, check.grant_id)
    product = session.get(Product, grant.product_id)

    logger.info(f"Download {grant.id} served to user {grant.user_id} ({grant.download_count} so far)")
    return grant, product
