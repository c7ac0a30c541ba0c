from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.card_info import CardInfo
from app.models.user import User
from app.schemas.card_info import CardInfoCreate
from app.utils.cards import mask_card

logger = structlog.get_logger()


class CardInfoService:

    @staticmethod
    def _find(db: Session, user_id: int) -> Optional[CardInfo]:
        return db.query(CardInfo).filter(CardInfo.user_id == user_id).first()

    @staticmethod
    def _apply(card_info: CardInfo, user: User, card_last4: str, expiry: str) -> None:
        card_info.user_name = user.name
        card_info.user_email = user.email
        card_info.card_last4 = card_last4
        card_info.expiry = expiry
        card_info.last_used = datetime.utcnow()

    @staticmethod
    def save(db: Session, user: User, card_in: CardInfoCreate) -> CardInfo:
        """
        Upsert the caller's card on file, keeping only the last four digits.

        The copied name and email are refreshed on every save. An insert that
        loses to a concurrent one on the unique user_id becomes an update of
        the existing row.
        """
        card_last4, expiry = mask_card(card_in.card_number.get_secret_value(), card_in.expiry_date)

        card_info = CardInfoService._find(db, user.id)
        if card_info is None:
            card_info = CardInfo(user_id=user.id)
            CardInfoService._apply(card_info, user, card_last4, expiry)
            db.add(card_info)
            try:
                db.flush()
            except IntegrityError:
                db.rollback()
                card_info = db.query(CardInfo).filter(CardInfo.user_id == user.id).one()

        CardInfoService._apply(card_info, user, card_last4, expiry)
        db.commit()
        db.refresh(card_info)
        logger.info("card_info_saved", user_id=user.id, card_last4=card_last4)
        return card_info

    @staticmethod
    def list_all(db: Session) -> List[CardInfo]:
        return (
            db.query(CardInfo)
            .order_by(CardInfo.last_used.desc(), CardInfo.id.desc())
            .all()
        )

    @staticmethod
    def serialize(card_info: CardInfo) -> dict:
        return {
            "id": card_info.id,
            "user_id": card_info.user_id,
            "user_name": card_info.user_name,
            "user_email": card_info.user_email,
            "masked_card": card_info.masked_card,
            "expiry": card_info.expiry,
            "last_used": card_info.last_used,
        }
