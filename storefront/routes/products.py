from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.user import User
from storefront.schemas.product_schemas import ProductCreate, ProductRead, ProductUpdate
from storefront.schemas.review_schemas import ProductRating, ReviewRead
from storefront.services import catalog_service, review_service

router = APIRouter()


# -------- PUBLIC --------

@router.get("/", response_model=List[ProductRead])
def list_products(session: Session = Depends(get_session)):
    return catalog_service.list_products(session)


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int, session: Session = Depends(get_session)):
    return catalog_service.get_product(session, product_id)


@router.get("/{product_id}/reviews", response_model=List[ReviewRead])
def list_product_reviews(product_id: int, session: Session = Depends(get_session)):
    catalog_service.get_product(session, product_id)
    return review_service.list_product_reviews(session, product_id)


@router.get("/{product_id}/rating", response_model=ProductRating)
def get_product_rating(product_id: int, session: Session = Depends(get_session)):
    catalog_service.get_product(session, product_id)
    return review_service.get_product_rating(session, product_id)


# -------- ADMIN --------

@router.post("/", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return catalog_service.create_product(session, payload)


@router.patch("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return catalog_service.update_product(session, product_id, payload)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    if not catalog_service.delete_product(session, product_id):
        raise HTTPException(404, "Product not found")
    return {"message": "Product deactivated"}
