import logging
from typing import List, Optional

from sqlmodel import Session, select

from storefront.constants.order_status import UserRole
from storefront.errors import DuplicateValue, UserNotFound
from storefront.models.user import User
from storefront.schemas.user_schemas import UserRegister
from storefront.utils.hash import hash_password, verify_password

logger = logging.getLogger(__name__)


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email.lower())).first()


def register_user(session: Session, data: UserRegister, allow_role: bool = False) -> User:
    """Create an account. Only admin-initiated registrations may pick a role."""
    email = data.email.lower()
    if get_user_by_email(session, email):
        raise DuplicateValue("Email", email)

    role = data.role if allow_role and data.role else UserRole.customer

    user = User(
        email=email,
        password_hash=hash_password(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=role,
    )

    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info(f"User registered: {user.email} ({user.role.value})")
    return user


def authenticate(session: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(session, email)

    if not user or not verify_password(password, user.password_hash):
        logger.info(f"Failed login for {email}")
        return None

    if not user.is_active:
        logger.info(f"Login refused for disabled account {email}")
        return None

    return user


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise UserNotFound(user_id)
    return user


def list_users(session: Session) -> List[User]:
    return session.exec(select(User).order_by(User.created_at.desc())).all()
