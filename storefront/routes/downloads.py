from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session
from storefront.constants.order_status import UserRole
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.errors import DownloadNotFound
from storefront.models.user import User
from storefront.schemas.download_schemas import (
    DownloadCreate,
    DownloadLink,
    DownloadRead,
    DownloadTokenInput,
    DownloadTokenResponse,
    DownloadValidation,
    TokenValidation,
)
from storefront.services import download_service
from storefront.utils.token import get_current_user

router = APIRouter()


# -------- CUSTOMER --------

@router.get("/file", response_model=DownloadLink)
def download_file(token: str = Query(...), session: Session = Depends(get_session)):
    # the token itself is the credential; no session login needed
    grant, product = download_service.consume_token(session, token)
    return DownloadLink(
        download_id=grant.id,
        download_url=product.digital_file_url,
        download_count=grant.download_count,
        download_limit=product.download_limit,
    )


@router.get("/me", response_model=List[DownloadRead])
def my_downloads(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return download_service.list_grants_by_user(session, current_user.id)


@router.get("/{download_id}", response_model=DownloadRead)
def get_download(
    download_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    grant = download_service.get_grant(session, download_id)
    if grant.user_id != current_user.id and current_user.role != UserRole.admin:
        raise DownloadNotFound(download_id)
    return grant


@router.get("/{download_id}/validate", response_model=DownloadValidation)
def validate_download(
    download_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    check = download_service.validate_grant(session, download_id, current_user.id)
    if not check.valid:
        return DownloadValidation(valid=False)
    return DownloadValidation(valid=True, download=DownloadRead.model_validate(check.grant))


@router.post("/{download_id}/token", response_model=DownloadTokenResponse)
def create_download_token(
    download_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    token, expires_in = download_service.generate_token(session, download_id, current_user.id)
    return DownloadTokenResponse(token=token, expires_in=expires_in)


# -------- TOKEN HOLDERS --------

@router.post("/token/validate", response_model=TokenValidation)
def validate_download_token(payload: DownloadTokenInput, session: Session = Depends(get_session)):
    check = download_service.validate_token(session, payload.token)
    return TokenValidation(valid=check.valid, download_id=check.grant_id, user_id=check.user_id)


# -------- ADMIN --------

@router.post("/", response_model=DownloadRead, status_code=status.HTTP_201_CREATED)
def create_download(
    payload: DownloadCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return download_service.create_grant(session, payload.user_id, payload.product_id, payload.order_id)


@router.get("/user/{user_id}", response_model=List[DownloadRead])
def list_user_downloads(
    user_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return download_service.list_grants_by_user(session, user_id)


@router.post("/{download_id}/increment", response_model=DownloadRead)
def increment_download(
    download_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return download_service.increment_download_count(session, download_id)
