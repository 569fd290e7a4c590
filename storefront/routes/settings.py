from datetime import datetime
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.errors import SettingNotFound
from storefront.models.setting import Setting
from storefront.models.user import User
from storefront.schemas.settings_schemas import SettingRead, SettingUpdate


router = APIRouter()

# keys anyone may read, with the value used until an admin sets one
PUBLIC_SETTINGS = {
    "site_name": "Storefront",
    "contact_email": "support@example.com",
    "currency": "USD",
}


def _get_setting(session: Session, key: str):
    return session.exec(select(Setting).where(Setting.key == key)).first()


@router.get("/public")
def get_public_settings(session: Session = Depends(get_session)) -> Dict[str, str]:
    stored = session.exec(
        select(Setting).where(Setting.key.in_(list(PUBLIC_SETTINGS)))
    ).all()

    values = dict(PUBLIC_SETTINGS)
    values.update({s.key: s.value for s in stored})
    return values


@router.get("/", response_model=List[SettingRead])
def list_settings(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return session.exec(select(Setting).order_by(Setting.key)).all()


@router.get("/{key}", response_model=SettingRead)
def get_setting(
    key: str,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    setting = _get_setting(session, key)
    if not setting:
        raise SettingNotFound(key)
    return setting


@router.put("/", response_model=SettingRead)
def upsert_setting(
    payload: SettingUpdate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    setting = _get_setting(session, payload.key)

    if not setting:
        setting = Setting(key=payload.key, value=payload.value)
    else:
        setting.value = payload.value
        setting.updated_at = datetime.utcnow()

    session.add(setting)
    session.commit()
    session.refresh(setting)
    return setting
