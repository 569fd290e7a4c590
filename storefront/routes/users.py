from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.constants.order_status import UserRole
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.user import User
from storefront.schemas.user_schemas import UserRead, UserRegister
from storefront.services import auth_service
from storefront.utils.token import get_current_user

router = APIRouter()


@router.get("/me", response_model=UserRead)
def get_my_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/", response_model=List[UserRead])
def list_users(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return auth_service.list_users(session)


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserRegister,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return auth_service.register_user(session, payload, allow_role=True)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    if current_user.id != user_id and current_user.role != UserRole.admin:
        raise HTTPException(403, "Not allowed to view this user")

    return auth_service.get_user(session, user_id)
