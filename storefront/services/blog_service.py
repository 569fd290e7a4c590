import logging
from datetime import datetime
from typing import List

from slugify import slugify
from sqlmodel import Session, select

from storefront.errors import BlogPostNotFound, DuplicateValue, UserNotFound
from storefront.models.blog import BlogPost
from storefront.models.user import User
from storefront.schemas.blog_schemas import BlogPostCreate, BlogPostUpdate
from storefront.utils.patch import apply_patch

logger = logging.getLogger(__name__)


def _ensure_unique_slug(session: Session, slug: str, exclude_id: int = None):
    query = select(BlogPost).where(BlogPost.slug == slug)
    if exclude_id is not None:
        query = query.where(BlogPost.id != exclude_id)
    if session.exec(query).first():
        raise DuplicateValue("Blog slug", slug)


def create_post(session: Session, author_id: int, data: BlogPostCreate) -> BlogPost:
    if not session.get(User, author_id):
        raise UserNotFound(author_id)

    slug = data.slug or slugify(data.title)
    _ensure_unique_slug(session, slug)

    post = BlogPost(
        title=data.title,
        content=data.content,
        excerpt=data.excerpt,
        slug=slug,
        author_id=author_id,
    )

    session.add(post)
    session.commit()
    session.refresh(post)
    return post


def list_posts(session: Session, published_only: bool = True) -> List[BlogPost]:
    query = select(BlogPost)
    if published_only:
        query = query.where(BlogPost.is_published == True)  # noqa: E712
    return session.exec(query.order_by(BlogPost.created_at.desc())).all()


def get_post(session: Session, post_id: int) -> BlogPost:
    post = session.get(BlogPost, post_id)
    if not post:
        raise BlogPostNotFound(post_id)
    return post


def get_post_by_slug(session: Session, slug: str) -> BlogPost:
    post = session.exec(select(BlogPost).where(BlogPost.slug == slug)).first()
    if not post:
        raise BlogPostNotFound(slug)
    return post


def update_post(session: Session, post_id: int, data: BlogPostUpdate) -> BlogPost:
    post = get_post(session, post_id)

    if data.slug is not None and data.slug != post.slug:
        _ensure_unique_slug(session, data.slug, exclude_id=post.id)

    apply_patch(post, data)

    session.add(post)
    session.commit()
    session.refresh(post)
    return post


def publish_post(session: Session, post_id: int) -> BlogPost:
    post = get_post(session, post_id)

    post.is_published = True
    post.updated_at = datetime.utcnow()
    session.add(post)
    session.commit()
    session.refresh(post)

    logger.info(f"Blog post published: {post.slug}")
    return post


def delete_post(session: Session, post_id: int) -> bool:
    post = session.get(BlogPost, post_id)
    if not post:
        return False

    session.delete(post)
    session.commit()
    return True
