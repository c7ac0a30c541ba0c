from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from app.core.rate_limiter import limiter
from app.db.session import get_db
from app.schemas.contact import ContactMessageCreate
from app.services.contact_service import ContactService
from app.utils.response import success

router = APIRouter()


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
def submit_contact_message(
    request: Request,
    message_in: ContactMessageCreate,
    db: Session = Depends(get_db),
):
    """Public contact form"""
    message = ContactService.submit(db, message_in)
    return success(data={"id": message.id}, message="Message sent successfully")
