from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.schemas.user_schemas import LoginResponse, UserLogin, UserRead, UserRegister
from storefront.services import auth_service
from storefront.utils.token import create_access_token


router = APIRouter()


# -------- AUTH ROUTES --------

@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    # self-registration always creates a customer
    return auth_service.register_user(session, payload)


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = auth_service.authenticate(session, payload.email, payload.password)

    if not user:
        raise HTTPException(401, "Invalid email or password")

    token = create_access_token({"user_id": user.id})
    return LoginResponse(
        access_token=token,
        token_type="bearer",
        user=UserRead.model_validate(user),
    )


@router.post("/logout")
def logout():
    return {"message": "Logout successful"}
