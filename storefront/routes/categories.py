from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.user import User
from storefront.schemas.category_schemas import CategoryCreate, CategoryRead, CategoryUpdate
from storefront.schemas.product_schemas import ProductRead
from storefront.services import catalog_service

router = APIRouter()


# -------- PUBLIC --------

@router.get("/", response_model=List[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    return catalog_service.list_categories(session)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, session: Session = Depends(get_session)):
    return catalog_service.get_category(session, category_id)


@router.get("/{category_id}/products", response_model=List[ProductRead])
def list_category_products(category_id: int, session: Session = Depends(get_session)):
    return catalog_service.list_products_by_category(session, category_id)


# -------- ADMIN --------

@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return catalog_service.create_category(session, payload)


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return catalog_service.update_category(session, category_id, payload)


@router.delete("/{category_id}")
def delete_category(
    category_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    if not catalog_service.delete_category(session, category_id):
        raise HTTPException(404, "Category not found")
    return {"message": "Category deactivated"}
