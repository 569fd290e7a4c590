from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.user import User
from storefront.schemas.review_schemas import ReviewApproval, ReviewCreate, ReviewRead
from storefront.services import review_service
from storefront.utils.token import get_current_user

router = APIRouter()


@router.post("/", response_model=ReviewRead, status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return review_service.create_review(session, current_user.id, payload)


@router.get("/product/{product_id}", response_model=List[ReviewRead])
def get_product_reviews(product_id: int, session: Session = Depends(get_session)):
    return review_service.list_product_reviews(session, product_id)


# -------- MODERATION --------

@router.get("/", response_model=List[ReviewRead])
def list_reviews(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return review_service.list_reviews(session)


@router.get("/pending", response_model=List[ReviewRead])
def list_pending_reviews(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return review_service.list_pending_reviews(session)


@router.patch("/{review_id}/approval", response_model=ReviewRead)
def set_review_approval(
    review_id: int,
    payload: ReviewApproval,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return review_service.set_review_approval(session, review_id, payload.is_approved)


@router.delete("/{review_id}")
def delete_review(
    review_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    if not review_service.delete_review(session, review_id):
        raise HTTPException(404, "Review not found")
    return {"message": "Review deleted"}
