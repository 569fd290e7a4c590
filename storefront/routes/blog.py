from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.user import User
from storefront.schemas.blog_schemas import BlogPostCreate, BlogPostRead, BlogPostUpdate
from storefront.services import blog_service

router = APIRouter()


# -------- PUBLIC --------

@router.get("/", response_model=List[BlogPostRead])
def list_posts(session: Session = Depends(get_session)):
    return blog_service.list_posts(session, published_only=True)


@router.get("/slug/{slug}", response_model=BlogPostRead)
def get_post_by_slug(slug: str, session: Session = Depends(get_session)):
    return blog_service.get_post_by_slug(session, slug)


@router.get("/{post_id}", response_model=BlogPostRead)
def get_post(post_id: int, session: Session = Depends(get_session)):
    return blog_service.get_post(session, post_id)


# -------- ADMIN --------

@router.get("/admin/all", response_model=List[BlogPostRead])
def list_all_posts(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return blog_service.list_posts(session, published_only=False)


@router.post("/", response_model=BlogPostRead, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: BlogPostCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return blog_service.create_post(session, admin.id, payload)


@router.patch("/{post_id}", response_model=BlogPostRead)
def update_post(
    post_id: int,
    payload: BlogPostUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return blog_service.update_post(session, post_id, payload)


@router.post("/{post_id}/publish", response_model=BlogPostRead)
def publish_post(
    post_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return blog_service.publish_post(session, post_id)


@router.delete("/{post_id}")
def delete_post(
    post_id: int,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    if not blog_service.delete_post(session, post_id):
        raise HTTPException(404, "Blog post not found")
    return {"message": "Blog post deleted"}
