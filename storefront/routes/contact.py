import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session, select
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.models.contact import ContactSubmission
from storefront.models.user import User
from storefront.schemas.contact_schemas import ContactFormInput, ContactRead, ContactResult

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=ContactResult)
def submit_contact_form(payload: ContactFormInput, session: Session = Depends(get_session)):
    submission = ContactSubmission(**payload.model_dump())

    session.add(submission)
    session.commit()
    session.refresh(submission)

    logger.info(f"Contact submission {submission.id} from {submission.email}: {submission.subject}")

    return ContactResult(
        success=True,
        message="Thank you for your message. We will get back to you soon.",
    )


@router.get("/", response_model=List[ContactRead])
def list_submissions(
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    return session.exec(
        select(ContactSubmission).order_by(ContactSubmission.created_at.desc(), ContactSubmission.id.desc())
    ).all()
