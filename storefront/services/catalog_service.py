import logging
from datetime import datetime
from typing import List

from slugify import slugify
from sqlmodel import Session, select

from storefront.errors import CategoryNotFound, DuplicateValue, ProductNotFound
from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.category_schemas import CategoryCreate, CategoryUpdate
from storefront.schemas.product_schemas import ProductCreate, ProductUpdate
from storefront.utils.patch import apply_patch

logger = logging.getLogger(__name__)


# ---------- CATEGORIES ----------


def _ensure_unique_category_slug(session: Session, slug: str, exclude_id: int = None):
    query = select(Category).where(Category.slug == slug)
    if exclude_id is not None:
        query = query.where(Category.id != exclude_id)
    if session.exec(query).first():
        raise DuplicateValue("Category slug", slug)


def create_category(session: Session, data: CategoryCreate) -> Category:
    slug = data.slug or slugify(data.name)
    _ensure_unique_category_slug(session, slug)

    category = Category(name=data.name, description=data.description, slug=slug)

    session.add(category)
    session.commit()
    session.refresh(category)

    logger.info(f"Category created: {category.slug}")
    return category


def list_categories(session: Session) -> List[Category]:
    return session.exec(
        select(Category).where(Category.is_active == True).order_by(Category.name)  # noqa: E712
    ).all()


def get_category(session: Session, category_id: int) -> Category:
    category = session.get(Category, category_id)
    if not category:
        raise CategoryNotFound(category_id)
    return category


def update_category(session: Session, category_id: int, data: CategoryUpdate) -> Category:
    category = get_category(session, category_id)

    if data.slug is not None and data.slug != category.slug:
        _ensure_unique_category_slug(session, data.slug, exclude_id=category.id)

    apply_patch(category, data)

    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def delete_category(session: Session, category_id: int) -> bool:
    category = session.get(Category, category_id)
    if not category:
        return False

    category.is_active = False
    category.updated_at = datetime.utcnow()
    session.add(category)
    session.commit()
    return True


# ---------- PRODUCTS ----------


def create_product(session: Session, data: ProductCreate) -> Product:
    get_category(session, data.category_id)

    values = data.model_dump()
    if data.digital_file_url is not None:
        values["digital_file_url"] = str(data.digital_file_url)

    product = Product(**values)

    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product {product.id} created in category {product.category_id}")
    return product


def list_products(session: Session) -> List[Product]:
    return session.exec(
        select(Product).where(Product.is_active == True).order_by(Product.created_at.desc())  # noqa: E712
    ).all()


def get_product(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise ProductNotFound(product_id)
    return product


def list_products_by_category(session: Session, category_id: int) -> List[Product]:
    get_category(session, category_id)

    return session.exec(
        select(Product)
        .where(Product.category_id == category_id, Product.is_active == True)  # noqa: E712
        .order_by(Product.created_at.desc())
    ).all()


def update_product(session: Session, product_id: int, data: ProductUpdate) -> Product:
    product = get_product(session, product_id)

    if data.category_id is not None and data.category_id != product.category_id:
        get_category(session, data.category_id)

    changes = apply_patch(product, data)
    if changes.get("digital_file_url") is not None:
        product.digital_file_url = str(changes["digital_file_url"])

    session.add(product)
    session.commit()
    session.refresh(product)
    return product


def delete_product(session: Session, product_id: int) -> bool:
    product = session.get(Product, product_id)
    if not product:
        return False

    product.is_active = False
    product.updated_at = datetime.utcnow()
    session.add(product)
    session.commit()
    return True
