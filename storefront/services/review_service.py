import logging
from datetime import datetime
from typing import List

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.errors import ProductNotFound, ReviewNotFound, UserNotFound
from storefront.models.product import Product
from storefront.models.review import Review
from storefront.models.user import User
from storefront.schemas.review_schemas import ProductRating, ReviewCreate

logger = logging.getLogger(__name__)


def create_review(session: Session, user_id: int, data: ReviewCreate) -> Review:
    if not session.get(User, user_id):
        raise UserNotFound(user_id)
    if not session.get(Product, data.product_id):
        raise ProductNotFound(data.product_id)

    review = Review(
        user_id=user_id,
        product_id=data.product_id,
        rating=data.rating,
        comment=data.comment,
    )

    session.add(review)
    session.commit()
    session.refresh(review)

    logger.info(f"Review {review.id} submitted for product {review.product_id}, awaiting approval")
    return review


def list_product_reviews(session: Session, product_id: int) -> List[Review]:
    """Approved reviews only; pending ones stay hidden from shoppers."""
    return session.exec(
        select(Review)
        .where(Review.product_id == product_id, Review.is_approved == True)  # noqa: E712
        .order_by(Review.created_at.desc())
    ).all()


def list_pending_reviews(session: Session) -> List[Review]:
    return session.exec(
        select(Review).where(Review.is_approved == False).order_by(Review.created_at)  # noqa: E712
    ).all()


def list_reviews(session: Session) -> List[Review]:
    return session.exec(select(Review).order_by(Review.created_at.desc())).all()


def set_review_approval(session: Session, review_id: int, is_approved: bool) -> Review:
    review = session.get(Review, review_id)
    if not review:
        raise ReviewNotFound(review_id)

    review.is_approved = is_approved
    review.updated_at = datetime.utcnow()
    session.add(review)
    session.commit()
    session.refresh(review)
    return review


def delete_review(session: Session, review_id: int) -> bool:
    review = session.get(Review, review_id)
    if not review:
        return False

    session.delete(review)
    session.commit()
    return True


def get_product_rating(session: Session, product_id: int) -> ProductRating:
    average, count = session.exec(
        select(func.avg(Review.rating), func.count(Review.id))
        .where(Review.product_id == product_id, Review.is_approved == True)  # noqa: E712
    ).one()

    return ProductRating(
        average_rating=round(float(average), 2) if average is not None else 0.0,
        total_reviews=count or 0,
    )
