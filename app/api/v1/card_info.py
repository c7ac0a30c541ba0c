from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.schemas.card_info import CardInfoCreate
from app.services.card_info_service import CardInfoService
from app.utils.response import success

router = APIRouter()


@router.post("", response_model=dict)
def save_card_info(
    card_in: CardInfoCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Store the caller's card on file (masked)"""
    card_info = CardInfoService.save(db, current_user, card_in)
    return success(data=CardInfoService.serialize(card_info), message="Card information saved successfully")
