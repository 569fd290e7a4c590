"""Pytest fixtures for storefront tests."""

import os

# settings are read at import time, so the environment goes first
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["ENV"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from storefront import models  # noqa: F401
from storefront.constants.order_status import UserRole
from storefront.database import engine, get_session
from storefront.main import app
from storefront.models.category import Category
from storefront.models.coupon import Coupon
from storefront.models.product import Product
from storefront.models.user import User
from storefront.utils.hash import hash_password
from storefront.utils.token import create_access_token

PASSWORD = "correct-horse-battery"


@pytest.fixture
def session():
    """A fresh in-memory database per test."""
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def client(session):
    """TestClient sharing the test session."""

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _make_user(session, email, role=UserRole.customer, first_name="Test", last_name="User"):
    user = User(
        email=email,
        password_hash=hash_password(PASSWORD),
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def customer(session):
    return _make_user(session, "jane@example.com", first_name="Jane", last_name="Doe")


@pytest.fixture
def other_customer(session):
    return _make_user(session, "sam@example.com", first_name="Sam", last_name="Roe")


@pytest.fixture
def admin(session):
    return _make_user(session, "admin@example.com", role=UserRole.admin, first_name="Ada", last_name="Min")


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def category(session):
    category = Category(name="E-books", slug="e-books")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def make_product(session, category, name="Book", price="29.99", digital_file_url=None, download_limit=None):
    product = Product(
        name=name,
        price=Decimal(price),
        category_id=category.id,
        digital_file_url=digital_file_url,
        download_limit=download_limit,
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def product(session, category):
    return make_product(session, category, name="Printed Guide", price="29.99")


@pytest.fixture
def digital_product(session, category):
    return make_product(
        session,
        category,
        name="Python Handbook PDF",
        price="19.99",
        digital_file_url="https://files.example.com/handbook.pdf",
        download_limit=3,
    )


@pytest.fixture
def unlimited_digital_product(session, category):
    return make_product(
        session,
        category,
        name="Audio Course",
        price="49.00",
        digital_file_url="https://files.example.com/course.zip",
    )


def make_coupon(session, code, **fields):
    coupon = Coupon(code=code, **fields)
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


@pytest.fixture
def save10(session):
    """10% off orders of 50.00 or more."""
    return make_coupon(
        session,
        "SAVE10",
        discount_percentage=Decimal("10"),
        min_order_amount=Decimal("50.00"),
    )


@pytest.fixture
def high50(session):
    """Flat 50.00 off."""
    return make_coupon(session, "HIGH50", discount_amount=Decimal("50.00"))


def money(value) -> Decimal:
    """JSON may render decimals as strings or numbers."""
    return Decimal(str(value))
